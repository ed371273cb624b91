"""
import_engine.reconciler - Identity-based upsert of normalised rows.

Identity resolution runs in the fixed order of IDENTITY_STRATEGY: an
exact normalised-phone match first, then a case-insensitive email match.
The order decides which of two conflicting existing clients a row merges
into, so it must not change silently.

Every row is its own transaction.  A failing row is rolled back, tallied
as an error and the run carries on with the next row.

Only one batch reconciles at a time per process (_RECONCILE_LOCK): two
concurrent uploads could otherwise both decide the same phone is new and
create a duplicate.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models import Client
from import_engine.errors import RowError
from import_engine.record import ClientRecord
from import_engine.report import ERROR, RowIssue
from schema.catalog import DEFAULT_STATUS

logger = logging.getLogger(__name__)

_RECONCILE_LOCK = threading.Lock()

CREATED = "created"
UPDATED = "updated"


def _by_phone(session: Session, record: ClientRecord) -> Optional[Client]:
    if not record.phone:
        return None
    return session.scalars(
        select(Client).where(Client.phone == record.phone)
        .order_by(Client.id).limit(1)
    ).first()


def _by_email(session: Session, record: ClientRecord) -> Optional[Client]:
    if not record.email:
        return None
    return session.scalars(
        select(Client).where(func.lower(Client.email) == record.email.lower())
        .order_by(Client.id).limit(1)
    ).first()


# (identity key, lookup) in strict priority order
IDENTITY_STRATEGY: tuple[tuple[str, Callable[[Session, ClientRecord], Optional[Client]]], ...] = (
    ("phone", _by_phone),
    ("email", _by_email),
)


def find_existing(session: Session, record: ClientRecord) -> Optional[Client]:
    """Return the client this record refers to, or None if it is new."""
    if not (record.phone or record.email):
        raise RowError("Row has neither phone nor email; it cannot be matched")
    for _key, lookup in IDENTITY_STRATEGY:
        match = lookup(session, record)
        if match is not None:
            return match
    return None


def apply_update(client: Client, record: ClientRecord) -> None:
    """Overwrite with every non-empty incoming value; never touch id or provenance."""
    for attr, val in record.present_fields().items():
        setattr(client, attr, val)


def build_client(record: ClientRecord, batch_id: str) -> Client:
    client = Client(status=record.status or DEFAULT_STATUS, source_batch_id=batch_id)
    apply_update(client, record)
    return client


@dataclass
class ReconcileResult:
    created: int = 0
    updated: int = 0
    errors: int = 0
    issues: list[RowIssue] = field(default_factory=list)
    client_ids: list[int] = field(default_factory=list)


class Reconciler:
    """
    Applies normalised rows to the clients table for one batch.
    """

    def __init__(self, session: Session, batch_id: str):
        self.session = session
        self.batch_id = batch_id

    def apply(self, record: ClientRecord) -> tuple[str, Client]:
        """Create or update one client and commit it.  Raises RowError."""
        session = self.session
        try:
            existing = find_existing(session, record)
            if existing is not None:
                apply_update(existing, record)
                session.commit()
                return UPDATED, existing

            client = build_client(record, self.batch_id)
            session.add(client)
            session.commit()
            return CREATED, client
        except RowError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            raise RowError(f"Database error: {exc.__class__.__name__}: {exc}") from exc

    def run(self, rows: Iterable[tuple[int, ClientRecord]]) -> ReconcileResult:
        result = ReconcileResult()
        with _RECONCILE_LOCK:
            for row_number, record in rows:
                try:
                    action, client = self.apply(record)
                except RowError as exc:
                    result.errors += 1
                    result.issues.append(RowIssue(row_number, ERROR, str(exc)))
                    logger.info("Row %d rejected: %s", row_number, exc)
                    continue
                except Exception as exc:
                    self.session.rollback()
                    result.errors += 1
                    result.issues.append(RowIssue(row_number, ERROR, f"Unexpected: {exc}"))
                    logger.exception("Row %d failed", row_number)
                    continue

                logger.debug("Row %d %s client %d (%s)",
                             row_number, action, client.id, record.display_name)
                if action == CREATED:
                    result.created += 1
                else:
                    result.updated += 1
                result.client_ids.append(client.id)
        return result


def reconcile(
    session: Session,
    batch_id: str,
    rows: Iterable[tuple[int, ClientRecord]],
) -> ReconcileResult:
    """Upsert (row number, record) pairs; see Reconciler."""
    return Reconciler(session, batch_id).run(rows)
