"""
services.mapping_service - Remembered column mappings.

A saved mapping is reused only for an upload whose header row is
identical (same fingerprint).  Anything else falls back to inference.
"""

from __future__ import annotations

import json

from sqlalchemy.orm import Session

from db.models import SavedMapping
from import_engine.field_map import (
    ColumnMapping, clean_mapping, header_fingerprint, infer_mapping,
)


class MappingService:

    @staticmethod
    def recall(session: Session, headers: list[str]) -> ColumnMapping | None:
        saved = session.get(SavedMapping, header_fingerprint(headers))
        if saved is None or saved.headers != list(headers):
            return None
        return clean_mapping(saved.mapping, len(headers))

    @staticmethod
    def remember(session: Session, headers: list[str], mapping: ColumnMapping) -> None:
        """Upsert the mapping for this header row.  Does not commit."""
        fp = header_fingerprint(headers)
        saved = session.get(SavedMapping, fp)
        if saved is None:
            saved = SavedMapping(fingerprint=fp)
            session.add(saved)
        saved.headers_json = json.dumps(list(headers), ensure_ascii=False)
        saved.mapping_json = json.dumps(dict(mapping))
        session.flush()

    @staticmethod
    def resolve(session: Session, headers: list[str]) -> tuple[ColumnMapping, bool]:
        """
        (mapping, from_saved): the saved mapping for this exact header row
        if there is one, otherwise a fresh inference.
        """
        saved = MappingService.recall(session, headers)
        if saved is not None:
            return saved, True
        return infer_mapping(headers), False
