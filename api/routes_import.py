"""
api.routes_import - /api/v1/import endpoints.

Accepts CSV via multipart file upload or raw request body.  The optional
mapping and defaults travel as JSON strings in form fields or query
parameters, so the same request works for both upload styles.
"""

import json

from flask import Response, jsonify, request

from api import api_bp
from schema.template import build_template_csv
from services.import_service import preview_import, run_import


def _json_param(name: str):
    raw = request.form.get(name) or request.args.get(name)
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def _read_upload():
    """Return (content, filename) or (None, None)."""
    if request.content_type and "multipart" in request.content_type:
        f = request.files.get("csv_file")
        if not f:
            return None, None
        return f.read(), f.filename
    return request.get_data(), None


@api_bp.route("/import/preview", methods=["POST"])
def api_import_preview():
    """
    POST /api/v1/import/preview

    Returns the resolved mapping, upload-level issues and a few
    normalised sample rows.  Nothing is written.
    """
    content, _filename = _read_upload()
    if not content:
        return jsonify({"error": "no csv_file in upload or empty body"}), 400

    preview = preview_import(
        content,
        mapping=_json_param("mapping"),
        defaults=_json_param("defaults"),
    )
    return jsonify(preview.to_dict())


@api_bp.route("/import", methods=["POST"])
def api_import_csv():
    """
    POST /api/v1/import?remember=0|1&filename=…

    Multipart: field name 'csv_file'
    Or: raw CSV as request body (Content-Type: text/csv).
    """
    content, upload_name = _read_upload()
    if not content:
        return jsonify({"error": "no csv_file in upload or empty body"}), 400

    remember = (request.form.get("remember") or request.args.get("remember", "1")) == "1"
    filename = (request.form.get("filename") or request.args.get("filename")
                or upload_name or "import.csv")

    report = run_import(
        content,
        filename=filename,
        mapping=_json_param("mapping"),
        defaults=_json_param("defaults"),
        remember_mapping=remember,
    )
    return jsonify(report.to_dict())


@api_bp.route("/import/template")
def api_import_template():
    """GET /api/v1/import/template - sample CSV with every mappable column."""
    return Response(
        build_template_csv(),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment; filename=client-import-template.csv"},
    )
