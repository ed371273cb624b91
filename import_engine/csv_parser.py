"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Delimiter sniffing (',' vs ';')
  • Dropping blank lines and header whitespace
  • Returns (headers, rows) as plain lists of strings
"""

from __future__ import annotations

import csv
import io

from import_engine.errors import ImportFileError

Table = tuple[list[str], list[list[str]]]


def read_table(raw: str | bytes) -> Table:
    """
    Accept raw file content (bytes or str), clean it, and return
    (headers, rows).  Raises ImportFileError unless there is a header
    row and at least one data row.
    """
    text = _decode(raw)
    if not text or not text.strip():
        raise ImportFileError("File is empty")

    reader = csv.reader(io.StringIO(text), dialect=_sniff(text))
    lines = [row for row in reader if any(cell.strip() for cell in row)]

    if len(lines) < 2:
        raise ImportFileError(
            "No data found. The file needs a header row and at least one data row."
        )

    headers = [h.strip() for h in lines[0]]
    return headers, lines[1:]


def ensure_table(headers: list[str], rows: list[list[str]]) -> Table:
    """Validate an already-parsed 2-D array the same way read_table does."""
    if not headers or not any(str(h).strip() for h in headers):
        raise ImportFileError("Header row is missing")
    data = [[str(c) if c is not None else "" for c in r] for r in rows
            if any(str(c or "").strip() for c in r)]
    if not data:
        raise ImportFileError(
            "No data found. The file needs a header row and at least one data row."
        )
    return [str(h).strip() for h in headers], data


def _sniff(text: str):
    try:
        return csv.Sniffer().sniff(text[:4096], delimiters=",;")
    except csv.Error:
        return csv.excel


def _decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw
