"""
api.errors - JSON error handlers and query-parameter parsing for the API blueprint.
"""

from flask import abort, jsonify, request
from api import api_bp
from import_engine.errors import (
    BatchNotFoundError, ConflictError, ImportFileError, ValidationError,
)


@api_bp.errorhandler(404)
def api_not_found(_e):
    return jsonify({"error": "not found"}), 404


@api_bp.errorhandler(400)
def api_bad_request(e):
    return jsonify({"error": "bad request", "detail": e.description}), 400


@api_bp.errorhandler(500)
def api_server_error(_e):
    return jsonify({"error": "internal server error"}), 500


@api_bp.errorhandler(ImportFileError)
def api_bad_file(e):
    return jsonify({"error": str(e)}), 400


@api_bp.errorhandler(ValidationError)
def api_blocked_import(e):
    return jsonify({
        "error": "import blocked by mapping errors",
        "issues": [i.to_dict() for i in e.issues],
    }), 422


@api_bp.errorhandler(BatchNotFoundError)
def api_batch_not_found(e):
    return jsonify({"error": str(e)}), 404


@api_bp.errorhandler(ConflictError)
def api_conflict(e):
    return jsonify({"error": str(e)}), 409


def int_arg(name: str, default: int, maximum: int | None = None) -> int:
    """Non-negative integer query parameter; 400 on anything else."""
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        value = default
    else:
        try:
            value = int(raw)
        except ValueError:
            abort(400, description=f"'{name}' must be an integer")
    value = max(0, value)
    return value if maximum is None else min(value, maximum)
