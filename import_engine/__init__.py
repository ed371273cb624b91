"""
import_engine - Client spreadsheet import pipeline.

Public API:
    read_table(raw)                          → (headers, rows)
    infer_mapping(headers)                   → ColumnMapping
    validate_mapping(mapping, rows, defaults) → [RowIssue]
    RowProcessor(mapping, defaults).process(row, n) → RowOutcome
    reconcile(session, batch_id, rows)       → ReconcileResult

The orchestrator that ties these to the ledger is
services.import_service.run_import.
"""

from import_engine.csv_parser import read_table                    # noqa: F401
from import_engine.field_map import infer_mapping, header_fingerprint  # noqa: F401
from import_engine.row_processor import RowProcessor, validate_mapping  # noqa: F401
from import_engine.reconciler import reconcile                      # noqa: F401
from import_engine.record import ClientRecord                       # noqa: F401
from import_engine.report import ImportReport, PreviewReport, RowIssue  # noqa: F401
from import_engine.errors import (                                  # noqa: F401
    ImportEngineError,
    ImportFileError,
    ValidationError,
    RowError,
    ConflictError,
    BatchNotFoundError,
    BatchConflictError,
)
