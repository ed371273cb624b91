"""
schema.template - The downloadable import template.

The same column layout is used by the record export so an exported file
can be re-imported without remapping.
"""

from __future__ import annotations

import csv
import io

from schema.catalog import FIELDS_BY_KEY

TEMPLATE_KEYS: tuple[str, ...] = (
    "firstName", "lastName", "email", "phone",
    "effectiveDate", "carrier", "plan", "planType", "status",
    "dob", "address", "city", "state", "zip",
    "notes",
)

TEMPLATE_HEADERS: list[str] = [FIELDS_BY_KEY[k].label for k in TEMPLATE_KEYS]

SAMPLE_ROWS: list[list[str]] = [
    ["Jane", "Doe", "jane@example.com", "555-111-2222", "01/15/2024", "Humana",
     "Medicare Advantage Plus", "Medicare Advantage", "active", "03/12/1950",
     "123 Main St", "Louisville", "KY", "40202", "Prefers email contact"],
    ["John", "Smith", "john@example.com", "555-222-3333", "10/01/2023",
     "UnitedHealthcare", "AARP Medicare Supplement", "Supplement", "active",
     "07/22/1948", "456 Oak Ave", "Lexington", "KY", "40507", "Birthday in July"],
    ["Mary", "Johnson", "mary@example.com", "555-333-4444", "01/01/2024", "Aetna",
     "Silver Plan", "Medicare Advantage", "active", "11/05/1952", "789 Pine Rd",
     "Bowling Green", "KY", "42101", "Spanish speaker"],
]


def write_csv(rows: list[list[str]]) -> str:
    """Serialise a header + rows table as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue()


def build_template_csv() -> str:
    return write_csv([TEMPLATE_HEADERS, *SAMPLE_ROWS])
