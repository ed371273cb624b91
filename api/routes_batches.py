"""
api.routes_batches - /api/v1/imports import-history endpoints.
"""

from flask import jsonify

from api import api_bp
from api.errors import int_arg
from db import get_session
from services.batch_service import BatchService
import config


@api_bp.route("/imports")
def list_imports():
    """GET /api/v1/imports?limit=20 - most recent first."""
    limit = int_arg("limit", config.HISTORY_LIMIT, config.API_MAX_LIMIT)
    session = get_session()
    try:
        batches = BatchService.list_batches(session, limit=limit)
        return jsonify({"imports": [b.to_dict() for b in batches]})
    finally:
        session.close()


@api_bp.route("/imports/<batch_id>")
def get_import(batch_id: str):
    """GET /api/v1/imports/{id}"""
    session = get_session()
    try:
        batch = BatchService.get(session, batch_id)
        if not batch:
            return jsonify({"error": "not found"}), 404
        return jsonify(batch.to_dict())
    finally:
        session.close()


@api_bp.route("/imports/<batch_id>/reverse", methods=["POST"])
def reverse_import(batch_id: str):
    """
    POST /api/v1/imports/{id}/reverse

    Deletes the clients this import created.  404 if unknown, 409 if
    already reversed (see api.errors).
    """
    session = get_session()
    try:
        batch = BatchService.reverse(session, batch_id)
        return jsonify({
            "deleted": batch.reversed_count,
            "import": batch.to_dict(),
        })
    finally:
        session.close()
