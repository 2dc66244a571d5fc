"""
Tests for the CSV codec
"""
import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.exceptions import DecodeError
from d2_sourcing.csv_codec import OUTPUT_HEADER, parse, serialize
from d4_enrichment.models import BusinessRecord, EnrichedFields


class TestParse:
    def test_skips_header_and_trims_fields(self):
        data = b"Name,City,Province\n  Acme Bakery , Springfield ,ON \nBolt Hardware,Shelbyville,QC\n"

        records = list(parse(data))

        assert [(r.name, r.city, r.region) for r in records] == [
            ("Acme Bakery", "Springfield", "ON"),
            ("Bolt Hardware", "Shelbyville", "QC"),
        ]

    def test_enrichment_fields_start_empty(self):
        record = next(parse(b"Name,City,Province\nAcme,Springfield,ON\n"))

        assert (record.place_id, record.address, record.phone, record.website) == ("", "", "", "")
        assert not record.is_enriched

    def test_extra_columns_ignored(self):
        records = list(parse(b"Name,City,Province,Notes\nAcme,Springfield,ON,call back\n"))

        assert records[0].region == "ON"

    def test_quoted_fields(self):
        records = list(parse(b'Name,City,Province\n"Smith, Jones & Co","Ottawa",ON\n'))

        assert records[0].name == "Smith, Jones & Co"

    def test_header_only_and_empty_input(self):
        assert list(parse(b"Name,City,Province\n")) == []
        assert list(parse(b"")) == []

    def test_utf8_bom_and_crlf(self):
        data = "\ufeffName,City,Province\r\nCafé Olé,Montréal,QC\r\n".encode("utf-8")

        records = list(parse(data))

        assert records[0].name == "Café Olé"
        assert records[0].city == "Montréal"

    def test_blank_lines_skipped(self):
        records = list(parse(b"Name,City,Province\nAcme,Springfield,ON\n\nBolt,Shelbyville,QC\n"))

        assert len(records) == 2

    def test_is_lazy_and_one_shot(self):
        rows = parse(b"Name,City,Province\nAcme,Springfield,ON\nBad Row\n")

        first = next(rows)
        assert first.name == "Acme"
        with pytest.raises(DecodeError):
            next(rows)

        consumed = parse(b"Name,City,Province\nAcme,Springfield,ON\n")
        assert len(list(consumed)) == 1
        assert list(consumed) == []

    def test_short_row_is_fatal(self):
        data = b"Name,City,Province\nAcme,Springfield,ON\nBolt,Shelbyville\nCore,Ogdenville,NB\n"

        with pytest.raises(DecodeError) as exc_info:
            list(parse(data))

        assert exc_info.value.line == 3

    def test_invalid_utf8_is_fatal(self):
        with pytest.raises(DecodeError):
            list(parse(b"Name,City,Province\n\xff\xfe,Springfield,ON\n"))

    def test_malformed_quoting_is_fatal(self):
        with pytest.raises(DecodeError):
            list(parse(b'Name,City,Province\n"Acme"x,Springfield,ON\n'))


class TestSerialize:
    def test_header_only_for_empty_dataset(self):
        assert serialize([]) == b"Business Name,City,Province,Address,Phone Number,Website\n"

    def test_output_header_constant(self):
        assert OUTPUT_HEADER == ["Business Name", "City", "Province", "Address", "Phone Number", "Website"]

    def test_resolved_and_unresolved_rows(self):
        resolved = BusinessRecord("Acme Bakery", "Springfield", "ON")
        resolved.apply(EnrichedFields(place_id="p1", address="1 Main St", phone="555-0100", website="acme.test"))
        unresolved = BusinessRecord("Ghost Diner", "Nowhere", "ON")

        assert serialize([resolved, unresolved]) == (
            b"Business Name,City,Province,Address,Phone Number,Website\n"
            b"Acme Bakery,Springfield,ON,1 Main St,555-0100,acme.test\n"
            b"Ghost Diner,Nowhere,ON,,,\n"
        )

    def test_escapes_delimiters_and_quotes(self):
        record = BusinessRecord('Joe\'s "Best" Pizza', "Ottawa, East", "ON")
        record.apply(EnrichedFields(place_id="p", address="1 Main St, Unit 2"))

        row = serialize([record]).decode().splitlines()[1]

        assert row == '"Joe\'s ""Best"" Pizza","Ottawa, East",ON,"1 Main St, Unit 2",,'

    def test_escaped_output_parses_back(self):
        record = BusinessRecord("Smith, Jones & Co", 'The "Hub"', "ON")

        parsed = next(parse(serialize([record])))

        assert (parsed.name, parsed.city, parsed.region) == ("Smith, Jones & Co", 'The "Hub"', "ON")


plain_text = st.text(alphabet=string.ascii_letters + string.digits + " .-&'", max_size=20).map(str.strip)


@given(st.lists(st.tuples(plain_text, plain_text, plain_text), max_size=25))
def test_serialize_parse_round_trip(rows):
    """Input fields survive serialize -> parse -> serialize unchanged."""
    records = [BusinessRecord(name, city, region) for name, city, region in rows]

    first = serialize(records)
    reparsed = list(parse(first))

    assert [(r.name, r.city, r.region) for r in reparsed] == [(r.name, r.city, r.region) for r in records]
    assert serialize(reparsed) == first
