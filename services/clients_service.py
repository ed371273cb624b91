"""
services.clients_service - Read access to client records and CSV export.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from db.models import Client
from schema.catalog import FIELDS_BY_KEY
from schema.template import TEMPLATE_HEADERS, TEMPLATE_KEYS, write_csv


class ClientsService:

    SORTABLE_COLUMNS = ("id", "last_name", "first_name", "effective_date", "created_at")

    @staticmethod
    def get(session: Session, client_id: int) -> Client | None:
        return session.get(Client, client_id)

    @staticmethod
    def search(
        session: Session,
        q: str = "",
        status: str = "",
        batch_id: str = "",
        sort_by: str = "id",
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Client], int]:
        """Return (page of clients, total matching)."""
        stmt = select(Client)
        if q:
            like = f"%{q.lower()}%"
            stmt = stmt.where(or_(
                func.lower(Client.first_name).like(like),
                func.lower(Client.last_name).like(like),
                func.lower(Client.email).like(like),
                Client.phone.like(f"%{q}%"),
            ))
        if status:
            stmt = stmt.where(Client.status == status)
        if batch_id:
            stmt = stmt.where(Client.source_batch_id == batch_id)

        total = session.scalar(select(func.count()).select_from(stmt.subquery()))

        if sort_by not in ClientsService.SORTABLE_COLUMNS:
            sort_by = "id"
        stmt = stmt.order_by(getattr(Client, sort_by), Client.id)
        rows = list(session.scalars(stmt.limit(limit).offset(offset)))
        return rows, total or 0

    @staticmethod
    def count(session: Session) -> int:
        return session.scalar(select(func.count(Client.id))) or 0

    @staticmethod
    def export_csv(session: Session) -> str:
        """All clients in the import-template column layout."""
        attrs = [FIELDS_BY_KEY[k].attr for k in TEMPLATE_KEYS]
        table = [list(TEMPLATE_HEADERS)]
        for client in session.scalars(select(Client).order_by(Client.id)):
            table.append([_cell(getattr(client, a)) for a in attrs])
        return write_csv(table)


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.strftime("%m/%d/%Y")
    return str(value)
