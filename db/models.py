"""
db.models - SQLAlchemy ORM declarations.

Tables
------
clients         - one row per client.  Phone is stored digits-only and
                  email lower-cased so identity lookups are exact matches.
                  source_batch_id tags rows an import created; it is a
                  plain indexed column, not a foreign key, because the
                  ledger row is written after the rows it describes.
import_batches  - the import ledger, one row per completed run.
saved_mappings  - remembered column mappings keyed by header fingerprint.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Text, Index, CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


class Base(DeclarativeBase):
    pass


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # ── Identity ───────────────────────────────────────────────────────
    first_name = Column(String(200), default="")
    last_name  = Column(String(200), default="")
    phone      = Column(String(20), index=True)
    email      = Column(String(320), index=True)

    # ── Policy ─────────────────────────────────────────────────────────
    effective_date = Column(Date, nullable=True)
    carrier        = Column(String(200), default="")
    plan           = Column(String(200), default="")
    plan_type      = Column(String(200), default="")
    status         = Column(String(20), nullable=False, default="active")

    # ── Demographic ────────────────────────────────────────────────────
    dob     = Column(Date, nullable=True)
    address = Column(String(300), default="")
    city    = Column(String(120), default="")
    state   = Column(String(60), default="")
    zip     = Column(String(20), default="")

    notes = Column(Text, default="")

    # ── Provenance (set on creation only) ──────────────────────────────
    source_batch_id = Column(String(32), nullable=True, index=True)

    # ── Timestamps ─────────────────────────────────────────────────────
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'lost', 'churned')",
            name="ck_clients_status",
        ),
        Index("ix_clients_name", "last_name", "first_name"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name or "",
            "last_name": self.last_name or "",
            "phone": self.phone or "",
            "email": self.email or "",
            "effective_date": _iso(self.effective_date),
            "carrier": self.carrier or "",
            "plan": self.plan or "",
            "plan_type": self.plan_type or "",
            "status": self.status,
            "dob": _iso(self.dob),
            "address": self.address or "",
            "city": self.city or "",
            "state": self.state or "",
            "zip": self.zip or "",
            "notes": self.notes or "",
            "source_batch_id": self.source_batch_id,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class ImportBatch(Base):
    """
    Ledger entry for one import run.

    Written once, after every row of the run has been reconciled.  The
    only transition afterwards is completed → reversed.
    """
    __tablename__ = "import_batches"

    id       = Column(String(32), primary_key=True)
    filename = Column(String(255), default="")
    status   = Column(String(20), nullable=False, default="completed")

    total_rows    = Column(Integer, nullable=False, default=0)
    created_count = Column(Integer, nullable=False, default=0)
    updated_count = Column(Integer, nullable=False, default=0)
    skipped_count = Column(Integer, nullable=False, default=0)
    error_count   = Column(Integer, nullable=False, default=0)

    created_at     = Column(DateTime, default=_utcnow, index=True)
    reversed_at    = Column(DateTime, nullable=True)
    reversed_count = Column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('completed', 'reversed')",
            name="ck_import_batches_status",
        ),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "filename": self.filename or "",
            "status": self.status,
            "total_rows": self.total_rows,
            "created_count": self.created_count,
            "updated_count": self.updated_count,
            "skipped_count": self.skipped_count,
            "error_count": self.error_count,
            "created_at": _iso(self.created_at),
            "reversed_at": _iso(self.reversed_at),
            "reversed_count": self.reversed_count,
        }


class SavedMapping(Base):
    """
    Last column mapping used for a given header row.

    Convenience state only: losing a row here just means the next upload
    of that file layout is mapped by inference again.
    """
    __tablename__ = "saved_mappings"

    fingerprint  = Column(String(64), primary_key=True)   # sha256 of header row
    headers_json = Column(Text, nullable=False, default="[]")
    mapping_json = Column(Text, nullable=False, default="{}")
    updated_at   = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    @property
    def headers(self) -> list[str]:
        return json.loads(self.headers_json or "[]")

    @property
    def mapping(self) -> dict[str, int]:
        return {k: int(v) for k, v in json.loads(self.mapping_json or "{}").items()}
