"""
import_engine.row_processor - Validate and normalise one data row.

Single-responsibility: given a raw row, the column mapping and the
out-of-band defaults, either return a ClientRecord or mark the row as
skipped.  The result depends on nothing but those three inputs.

validate_mapping() holds the checks that run once over the whole upload
before any row is reconciled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from schema.catalog import (
    FIELDS_BY_KEY, IDENTITY_KEYS, NAME_KEYS, OPTIONAL_KEYS, RECORD_FIELDS,
)
from import_engine.field_map import ColumnMapping
from import_engine.normalize import (
    normalize_carrier,
    normalize_email,
    normalize_phone,
    normalize_space,
    normalize_status,
    parse_date,
    split_full_name,
)
from import_engine.record import ClientRecord
from import_engine.report import ERROR, WARNING, RowIssue

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2    # row 1 is the header


@dataclass
class RowOutcome:
    row: int
    record: Optional[ClientRecord]
    issues: list[RowIssue] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)    # field keys with unusable values

    @property
    def skipped(self) -> bool:
        return self.record is None


class RowProcessor:
    """
    Stateless per-row normaliser bound to one mapping + defaults pair.
    """

    def __init__(self, mapping: ColumnMapping, defaults: dict | None = None):
        self.mapping = dict(mapping)
        self.defaults = usable_defaults(defaults)
        self.split_name = (
            "fullName" in self.mapping
            and not any(k in self.mapping for k in NAME_KEYS)
        )

    def process(self, raw_row: list[str], row_number: int) -> RowOutcome:
        outcome = RowOutcome(row=row_number, record=None)
        values: dict = {}

        for spec in RECORD_FIELDS:
            raw = self._cell(raw_row, spec.key)
            if raw is None and spec.key in self.defaults:
                raw = self.defaults[spec.key]

            if spec.kind == "status":
                values[spec.attr] = normalize_status(raw)
                continue

            value = _coerce(spec.kind, raw)
            if raw is not None and value is None:
                outcome.dropped.append(spec.key)
                outcome.issues.append(RowIssue(
                    row_number, WARNING,
                    f"{spec.label} '{raw}' could not be read and was left blank",
                ))
            values[spec.attr] = value

        if self.split_name:
            values["first_name"], values["last_name"] = split_full_name(
                self._cell(raw_row, "fullName")
            )

        record = ClientRecord(**values)
        if not record.has_name:
            outcome.issues.append(RowIssue(
                row_number, WARNING, "Row has no first or last name and was skipped",
            ))
            return outcome

        outcome.record = record
        return outcome

    def _cell(self, raw_row: list[str], key: str) -> str | None:
        idx = self.mapping.get(key)
        if idx is None or idx >= len(raw_row):
            return None
        val = raw_row[idx]
        if val is None:
            return None
        val = str(val).strip()
        return val or None


def _coerce(kind: str, raw: str | None):
    if kind == "date":
        return parse_date(raw)
    if kind == "phone":
        return normalize_phone(raw)
    if kind == "email":
        return normalize_email(raw)
    if kind == "carrier":
        return normalize_carrier(raw)
    return normalize_space(raw)


def usable_defaults(defaults: dict | None) -> dict[str, str]:
    """Non-empty defaults for optional fields only."""
    out: dict[str, str] = {}
    for key, val in (defaults or {}).items():
        if key not in OPTIONAL_KEYS:
            continue
        val = str(val or "").strip()
        if val:
            out[key] = val
    return out


def validate_mapping(
    mapping: ColumnMapping,
    rows: list[list[str]],
    defaults: dict | None = None,
) -> list[RowIssue]:
    """
    Upload-level checks, run once before any row is reconciled.

    Errors block the import; warnings are informational.
    """
    issues: list[RowIssue] = []

    has_name = any(k in mapping for k in NAME_KEYS) or "fullName" in mapping
    if not has_name:
        issues.append(RowIssue(0, ERROR,
            "At least First Name or Last Name must be mapped"))

    if not any(k in mapping for k in IDENTITY_KEYS):
        issues.append(RowIssue(0, ERROR,
            "Phone or Email must be mapped. At least one is required for "
            "duplicate detection and communication."))

    if "effectiveDate" not in mapping:
        issues.append(RowIssue(0, WARNING,
            "Effective Date is not mapped. Retention tracking will be limited."))

    for key in (defaults or {}):
        if key not in OPTIONAL_KEYS:
            label = FIELDS_BY_KEY[key].label if key in FIELDS_BY_KEY else key
            issues.append(RowIssue(0, WARNING,
                f"A default cannot be set for {label}; it was ignored"))

    processor = RowProcessor(mapping, defaults)
    empty_names = bad_dates = bad_phones = no_identity = 0
    for offset, raw in enumerate(rows):
        outcome = processor.process(raw, FIRST_DATA_ROW + offset)
        if outcome.skipped:
            empty_names += 1
            continue
        if any(FIELDS_BY_KEY[k].kind == "date" for k in outcome.dropped):
            bad_dates += 1
        if "phone" in outcome.dropped:
            bad_phones += 1
        rec = outcome.record
        if not (rec.phone or rec.email):
            no_identity += 1

    if has_name and empty_names:
        issues.append(RowIssue(0, WARNING,
            f"{empty_names} row(s) have empty names and will be skipped"))
    if bad_dates:
        issues.append(RowIssue(0, WARNING,
            f"{bad_dates} row(s) have invalid date formats that couldn't be parsed"))
    if bad_phones:
        issues.append(RowIssue(0, WARNING,
            f"{bad_phones} row(s) have phone numbers that couldn't be read"))
    if no_identity and any(k in mapping for k in IDENTITY_KEYS):
        issues.append(RowIssue(0, WARNING,
            f"{no_identity} row(s) have neither phone nor email and will be rejected"))

    logger.debug("Mapping validation: %d issue(s) over %d row(s)", len(issues), len(rows))
    return issues
