"""Cell-level normalisation helpers.

All functions accept str | None and return the normalised value or None
when the cell holds nothing usable.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from dateutil import parser as dateparser

from schema.catalog import DEFAULT_STATUS, KNOWN_CARRIERS, STATUS_VALUES

_CARRIERS_BY_KEY = {re.sub(r"[^a-z0-9]", "", c.lower()): c for c in KNOWN_CARRIERS}

# Fixed default so a partial date ("2024") never inherits today's month/day
_DATE_DEFAULT = datetime(2000, 1, 1)


def trim(value: str | None) -> str | None:
    """Strip leading/trailing whitespace; treat empty string as None."""
    if value is None:
        return None
    v = str(value).strip()
    return v if v else None


def normalize_space(value: str | None) -> str | None:
    """Collapse internal runs of whitespace to single spaces, then trim."""
    v = trim(value)
    if v is None:
        return None
    return re.sub(r"\s+", " ", v)


def normalize_email(value: str | None) -> str | None:
    """Lowercase and trim an email address."""
    v = trim(value)
    if v is None:
        return None
    return v.lower()


def normalize_phone(value: str | None) -> str | None:
    """Return digits-only phone or None.

    11-digit numbers with a leading NANP '1' lose it, so "+1 (555) 111-2222"
    and "555-111-2222" compare equal.  Fewer than 7 digits → None.
    """
    v = trim(value)
    if v is None:
        return None
    digits = re.sub(r"\D", "", v)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) < 7:
        return None
    return digits


def parse_date(value: str | None) -> date | None:
    """Lenient date parse (US month-first); None when unparseable."""
    v = trim(value)
    if v is None:
        return None
    try:
        return dateparser.parse(v, default=_DATE_DEFAULT).date()
    except (ValueError, OverflowError):
        return None


def normalize_status(value: str | None) -> str | None:
    """None for a blank cell; unknown values fall back to the default."""
    v = trim(value)
    if v is None:
        return None
    v = v.lower()
    return v if v in STATUS_VALUES else DEFAULT_STATUS


def normalize_carrier(value: str | None) -> str | None:
    """Known carriers get their canonical spelling; others are kept as typed."""
    v = normalize_space(value)
    if v is None:
        return None
    return _CARRIERS_BY_KEY.get(re.sub(r"[^a-z0-9]", "", v.lower()), v)


def split_full_name(value: str | None) -> tuple[str | None, str | None]:
    """Split on the first whitespace run: "Mary Ann Lee" → ("Mary", "Ann Lee")."""
    v = normalize_space(value)
    if v is None:
        return None, None
    first, _, rest = v.partition(" ")
    return first, (rest or None)
