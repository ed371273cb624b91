"""
api.routes_clients - /api/v1/clients read-only endpoints and export.
"""

from flask import Response, jsonify, request

from api import api_bp
from api.errors import int_arg
from db import get_session
from services.clients_service import ClientsService
import config


@api_bp.route("/clients")
def list_clients():
    """
    GET /api/v1/clients?q=&status=&batch=&sort=id&limit=100&offset=0
    """
    q        = request.args.get("q", "").strip()
    status   = request.args.get("status", "").strip()
    batch_id = request.args.get("batch", "").strip()
    sort_by  = request.args.get("sort", "id").strip()
    limit    = int_arg("limit", config.API_DEFAULT_LIMIT, config.API_MAX_LIMIT)
    offset   = int_arg("offset", 0)

    session = get_session()
    try:
        clients, total = ClientsService.search(
            session, q=q, status=status, batch_id=batch_id,
            sort_by=sort_by, limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "clients": [c.to_dict() for c in clients],
        })
    finally:
        session.close()


@api_bp.route("/clients/export")
def export_clients():
    """GET /api/v1/clients/export - every client as CSV (template layout)."""
    session = get_session()
    try:
        body = ClientsService.export_csv(session)
    finally:
        session.close()
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=clients.csv"},
    )


@api_bp.route("/clients/<int:client_id>")
def get_client(client_id: int):
    """GET /api/v1/clients/{id}"""
    session = get_session()
    try:
        client = ClientsService.get(session, client_id)
        if not client:
            return jsonify({"error": "not found"}), 404
        return jsonify(client.to_dict())
    finally:
        session.close()
