"""
CSV codec for business datasets

parse() turns an uploaded CSV into BusinessRecords; serialize() writes the
enriched dataset back out with the fixed six-column output header.
"""
import csv
import io
from typing import Iterable, Iterator

from core.exceptions import DecodeError
from d4_enrichment.models import BusinessRecord

INPUT_COLUMNS = 3  # name, city, region; later columns are ignored

OUTPUT_HEADER = ["Business Name", "City", "Province", "Address", "Phone Number", "Website"]


def parse(data: bytes) -> Iterator[BusinessRecord]:
    """
    Lazily parse CSV bytes into records

    The first line is a header and is skipped. Each later row yields one
    record from its first three columns, whitespace-trimmed. The returned
    generator is one-shot.

    Raises:
        DecodeError: On non-UTF-8 input, invalid CSV, or a row with fewer
            than three columns. Nothing is skipped; one bad row fails the parse.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Input is not valid UTF-8: {e}") from e

    reader = csv.reader(io.StringIO(text, newline=""), strict=True)

    try:
        next(reader)  # header
    except StopIteration:
        return
    except csv.Error as e:
        raise DecodeError(f"Malformed header: {e}", line=reader.line_num) from e

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise DecodeError(f"Malformed CSV: {e}", line=reader.line_num) from e

        if not row:
            continue

        if len(row) < INPUT_COLUMNS:
            raise DecodeError(
                f"Expected at least {INPUT_COLUMNS} columns, got {len(row)}",
                line=reader.line_num,
                row=row,
            )

        yield BusinessRecord(name=row[0].strip(), city=row[1].strip(), region=row[2].strip())


def serialize(records: Iterable[BusinessRecord]) -> bytes:
    """Write records as CSV with the output header, preserving order"""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")

    writer.writerow(OUTPUT_HEADER)
    for record in records:
        writer.writerow(record.to_row())

    return output.getvalue().encode("utf-8")
