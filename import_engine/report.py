"""
import_engine.report - Structured results of a preview or an import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import config

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class RowIssue:
    row: int            # spreadsheet row (header = 1); 0 for file-level issues
    severity: str       # "error" | "warning"
    message: str

    @property
    def blocking(self) -> bool:
        return self.severity == ERROR

    def to_dict(self) -> dict:
        return {"row": self.row, "severity": self.severity, "message": self.message}


def has_errors(issues: list[RowIssue]) -> bool:
    return any(i.blocking for i in issues)


@dataclass
class ImportReport:
    filename: str = ""
    batch_id: Optional[str] = None
    total_rows: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    mapping: dict[str, int] = field(default_factory=dict)
    issues: list[RowIssue] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "filename": self.filename,
            "total_rows": self.total_rows,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "mapping": dict(self.mapping),
            "issues": [i.to_dict() for i in self.issues[:config.MAX_REPORTED_ISSUES]],
            "issue_count": len(self.issues),
        }


@dataclass
class PreviewReport:
    headers: list[str] = field(default_factory=list)
    mapping: dict[str, int] = field(default_factory=dict)
    from_saved: bool = False
    total_rows: int = 0
    issues: list[RowIssue] = field(default_factory=list)
    sample: list[dict] = field(default_factory=list)

    @property
    def can_import(self) -> bool:
        return not has_errors(self.issues)

    def to_dict(self) -> dict:
        return {
            "headers": list(self.headers),
            "mapping": dict(self.mapping),
            "from_saved": self.from_saved,
            "total_rows": self.total_rows,
            "can_import": self.can_import,
            "issues": [i.to_dict() for i in self.issues],
            "sample": list(self.sample),
        }
