"""
services.batch_service - Import ledger and batch reversal.

All session management is the caller's responsibility except where a
function documents that it commits: the ledger write and the reversal
are each a single transaction of their own.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

import config
from db.models import Client, ImportBatch
from import_engine.errors import BatchConflictError, BatchNotFoundError
from import_engine.report import ImportReport

logger = logging.getLogger(__name__)

COMPLETED = "completed"
REVERSED = "reversed"


def new_batch_id() -> str:
    return uuid.uuid4().hex


class BatchService:

    # ── Ledger ─────────────────────────────────────────────────────────

    @staticmethod
    def record_batch(session: Session, report: ImportReport) -> str:
        """
        Persist the summary of a finished run and commit.  Returns the
        batch id (report.batch_id, allocated before reconciliation so the
        rows it created could be tagged with it).
        """
        batch_id = report.batch_id or new_batch_id()
        batch = ImportBatch(
            id=batch_id,
            filename=report.filename,
            status=COMPLETED,
            total_rows=report.total_rows,
            created_count=report.created,
            updated_count=report.updated,
            skipped_count=report.skipped,
            error_count=report.errors,
        )
        session.add(batch)
        session.commit()
        return batch_id

    @staticmethod
    def list_batches(session: Session, limit: int | None = None) -> list[ImportBatch]:
        """Most recent first."""
        limit = config.HISTORY_LIMIT if limit is None else limit
        return list(session.scalars(
            select(ImportBatch)
            .order_by(ImportBatch.created_at.desc())
            .limit(limit)
        ))

    @staticmethod
    def get(session: Session, batch_id: str) -> ImportBatch | None:
        return session.get(ImportBatch, batch_id)

    @staticmethod
    def mark_reversed(session: Session, batch_id: str, reversed_count: int) -> None:
        """
        Flip completed → reversed.  Compare-and-set on status, so of two
        concurrent callers only one can succeed; the loser gets
        BatchConflictError.  Does not commit.
        """
        result = session.execute(
            update(ImportBatch)
            .where(ImportBatch.id == batch_id, ImportBatch.status == COMPLETED)
            .values(
                status=REVERSED,
                reversed_at=datetime.now(timezone.utc),
                reversed_count=reversed_count,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise BatchConflictError(f"Import {batch_id} has already been reversed")

    # ── Reversal ───────────────────────────────────────────────────────

    @staticmethod
    def reverse(session: Session, batch_id: str) -> ImportBatch:
        """
        Delete every client this batch created and mark it reversed, in
        one transaction.  Clients the batch only updated are left alone.

        Raises BatchNotFoundError / BatchConflictError without touching
        any data.
        """
        batch = session.get(ImportBatch, batch_id)
        if batch is None:
            raise BatchNotFoundError(f"Import {batch_id} not found")
        if batch.status == REVERSED:
            raise BatchConflictError(f"Import {batch_id} has already been reversed")

        try:
            deleted = session.execute(
                delete(Client)
                .where(Client.source_batch_id == batch_id)
                .execution_options(synchronize_session=False)
            ).rowcount
            BatchService.mark_reversed(session, batch_id, deleted)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.expire_all()
        batch = session.get(ImportBatch, batch_id)
        logger.info("Reversed import %s - deleted %d client(s)", batch_id, deleted)
        return batch
