"""
CSV parsing for spreadsheet-backed tables.

Contentful spreadsheet sources are plain CSV assets.  The parser handles
quoted fields containing commas or newlines, doubled-quote escapes, LF and
CRLF line endings, and a leading UTF-8 BOM.  Cells are trimmed and rows
whose cells are all empty are skipped.
"""

from __future__ import annotations

import csv
import io
from typing import List

_BOM = "\ufeff"


def parse_csv(text: str) -> List[List[str]]:
    """Parse ``text`` into a list of rows of trimmed cells."""
    if not text:
        return []
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    reader = csv.reader(io.StringIO(text, newline=""), skipinitialspace=False, strict=False)
    rows: List[List[str]] = []
    for record in reader:
        row = [cell.strip() for cell in record]
        if any(cell != "" for cell in row):
            rows.append(row)
    return rows
