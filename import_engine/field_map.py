"""
import_engine.field_map - Source column ↔ canonical field mapping.

A ColumnMapping is a plain dict of canonical field key → column index.
Each field maps to at most one column and no column is claimed twice.
"""

from __future__ import annotations

import hashlib
import json
import re

from schema.catalog import FIELDS, FIELDS_BY_KEY

ColumnMapping = dict[str, int]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_header(header) -> str:
    """Case-fold and strip everything but [a-z0-9]."""
    return _NON_ALNUM.sub("", str(header or "").lower().strip())


def header_fingerprint(headers: list[str]) -> str:
    """Stable hash of the exact header row, used to key saved mappings."""
    payload = json.dumps(list(headers), ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def infer_mapping(headers: list[str]) -> ColumnMapping:
    """
    Guess a mapping from raw header strings.

    Headers are scanned left to right; each takes the first field (in
    catalog priority order) whose synonyms match and which no earlier
    header has claimed.  Unrecognised headers are left unmapped.
    """
    mapping: ColumnMapping = {}
    for idx, raw in enumerate(headers):
        key = normalize_header(raw)
        for spec in FIELDS:
            if spec.key in mapping:
                continue
            if spec.matches(key):
                mapping[spec.key] = idx
                break
    return mapping


def clean_mapping(mapping: dict, column_count: int) -> ColumnMapping:
    """
    Coerce an operator-supplied mapping into a valid ColumnMapping.

    Unknown field keys, blank values and out-of-range indexes are
    dropped; when two fields name the same column the first one listed
    keeps it.
    """
    out: ColumnMapping = {}
    used: set[int] = set()
    for key, val in (mapping or {}).items():
        if key not in FIELDS_BY_KEY or val is None or val == "":
            continue
        try:
            idx = int(val)
        except (TypeError, ValueError):
            continue
        if idx < 0 or idx >= column_count or idx in used:
            continue
        out[key] = idx
        used.add(idx)
    return out
