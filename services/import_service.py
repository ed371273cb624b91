"""
services.import_service - Top-level orchestrator for client imports.

Coordinates csv_parser → mapping → row_processor → reconciler → ledger
and produces a structured ImportReport.  preview_import() runs the
same front half without writing any client rows.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

import config
from db.engine import get_session
from import_engine.csv_parser import ensure_table, read_table
from import_engine.errors import ValidationError
from import_engine.field_map import ColumnMapping, clean_mapping
from import_engine.reconciler import reconcile
from import_engine.report import ImportReport, PreviewReport, has_errors
from import_engine.row_processor import FIRST_DATA_ROW, RowProcessor, validate_mapping
from services.batch_service import BatchService, new_batch_id
from services.mapping_service import MappingService

logger = logging.getLogger(__name__)


def _load_table(file_content=None, headers=None, rows=None):
    if file_content is not None:
        return read_table(file_content)
    return ensure_table(headers or [], rows or [])


def _pick_mapping(session, headers, mapping) -> tuple[ColumnMapping, bool]:
    if mapping is not None:
        return clean_mapping(mapping, len(headers)), False
    return MappingService.resolve(session, headers)


def _remember(session, headers, mapping) -> None:
    """Save the mapping cache; the import is already committed, so failures only log."""
    try:
        MappingService.remember(session, headers, mapping)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("Could not save column mapping: %s", exc)


def preview_import(
    file_content: str | bytes | None = None,
    *,
    headers: Optional[list[str]] = None,
    rows: Optional[list[list[str]]] = None,
    mapping: Optional[dict] = None,
    defaults: Optional[dict] = None,
) -> PreviewReport:
    """
    Parse an upload, resolve its mapping and run the upload-level checks.
    Nothing is written.  Raises ImportFileError for unusable input.
    """
    headers, rows = _load_table(file_content, headers, rows)

    session = get_session()
    try:
        resolved, from_saved = _pick_mapping(session, headers, mapping)
    finally:
        session.close()

    processor = RowProcessor(resolved, defaults)
    sample = []
    for offset, raw in enumerate(rows[:config.PREVIEW_ROWS]):
        outcome = processor.process(raw, FIRST_DATA_ROW + offset)
        sample.append({
            "row": outcome.row,
            "skipped": outcome.skipped,
            "record": outcome.record.to_dict() if outcome.record else None,
        })

    return PreviewReport(
        headers=headers,
        mapping=resolved,
        from_saved=from_saved,
        total_rows=len(rows),
        issues=validate_mapping(resolved, rows, defaults),
        sample=sample,
    )


def run_import(
    file_content: str | bytes | None = None,
    *,
    headers: Optional[list[str]] = None,
    rows: Optional[list[list[str]]] = None,
    filename: str = "import.csv",
    mapping: Optional[dict] = None,
    defaults: Optional[dict] = None,
    remember_mapping: bool = True,
) -> ImportReport:
    """
    Import a client spreadsheet.

    Parameters
    ----------
    file_content : raw CSV (bytes or str); or pass headers + rows instead
    filename : recorded on the batch ledger entry
    mapping : operator-edited field → column index map; inferred (or
              recalled for an identical header row) when omitted
    defaults : values for optional fields, applied to rows that leave
               that field empty (e.g. {"carrier": "Humana"})
    remember_mapping : save the mapping for the next upload of this layout

    Returns
    -------
    ImportReport with counts, the batch id and per-row issues

    Raises
    ------
    ImportFileError for unusable input, ValidationError when the mapping
    has blocking problems (nothing is written in either case).
    """
    headers, rows = _load_table(file_content, headers, rows)
    report = ImportReport(filename=filename or "import.csv", total_rows=len(rows))

    session = get_session()
    try:
        resolved, from_saved = _pick_mapping(session, headers, mapping)
        report.mapping = resolved

        pipeline_issues = validate_mapping(resolved, rows, defaults)
        if has_errors(pipeline_issues):
            raise ValidationError([i for i in pipeline_issues if i.blocking])
        report.issues.extend(pipeline_issues)

        report.batch_id = new_batch_id()
        logger.info("Import %s: %d row(s) from %s (mapping %s)",
                    report.batch_id, len(rows), report.filename,
                    "recalled" if from_saved else "inferred or supplied")

        processor = RowProcessor(resolved, defaults)
        accepted = []
        for offset, raw in enumerate(rows):
            outcome = processor.process(raw, FIRST_DATA_ROW + offset)
            report.issues.extend(outcome.issues)
            if outcome.skipped:
                report.skipped += 1
            else:
                accepted.append((outcome.row, outcome.record))

        result = reconcile(session, report.batch_id, accepted)
        report.created = result.created
        report.updated = result.updated
        report.errors = result.errors
        report.issues.extend(result.issues)

        BatchService.record_batch(session, report)

        if remember_mapping:
            _remember(session, headers, resolved)
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    logger.info("Import %s complete - created: %d, updated: %d, skipped: %d, errors: %d",
                report.batch_id, report.created, report.updated,
                report.skipped, report.errors)
    return report
