"""
import_engine.record - The canonical client row produced by normalisation.

Every field is optional; an absent field is None (never an
empty string) so the reconciler can tell "not supplied" apart from data.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Optional


@dataclass
class ClientRecord:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    effective_date: Optional[date] = None
    carrier: Optional[str] = None
    plan: Optional[str] = None
    plan_type: Optional[str] = None
    status: Optional[str] = None

    dob: Optional[date] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None

    notes: Optional[str] = None

    @property
    def has_name(self) -> bool:
        return bool(self.first_name or self.last_name)

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def present_fields(self) -> dict:
        """Non-empty attributes, i.e. what an update may overwrite."""
        out = {}
        for f in fields(self):
            val = getattr(self, f.name)
            if val is not None and val != "":
                out[f.name] = val
        return out

    def to_dict(self) -> dict:
        out = {}
        for f in fields(self):
            val = getattr(self, f.name)
            out[f.name] = val.isoformat() if isinstance(val, date) else val
        return out
