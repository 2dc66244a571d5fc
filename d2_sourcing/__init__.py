"""
D2 Sourcing - Business dataset ingest

Parses uploaded CSV datasets into business records and writes enriched
datasets back out.
"""

from .csv_codec import OUTPUT_HEADER, parse, serialize

__all__ = [
    "OUTPUT_HEADER",
    "parse",
    "serialize",
]
