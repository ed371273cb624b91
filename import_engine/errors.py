"""
import_engine.errors - Exception hierarchy for the import pipeline.
"""

from __future__ import annotations


class ImportEngineError(Exception):
    """Base class for every error raised by the import pipeline."""
    pass


class ImportFileError(ImportEngineError):
    """The upload is not a usable table (needs a header and a data row)."""
    pass


class ValidationError(ImportEngineError):
    """Blocking mapping problems; nothing was ingested."""

    def __init__(self, issues):
        self.issues = list(issues)
        messages = "; ".join(i.message for i in self.issues) or "validation failed"
        super().__init__(messages)


class RowError(ImportEngineError):
    """Raised when a single row cannot be reconciled."""
    pass


class ConflictError(ImportEngineError):
    """An operation is not allowed in the batch's current state."""
    pass


class BatchNotFoundError(ConflictError):
    pass


class BatchConflictError(ConflictError):
    pass
