"""
api.routes_schema - /api/v1/schema/* endpoints.

Expose the client field catalog so a mapping form (or a script building
an upload) can enumerate the canonical fields without hard-coding them.
"""

from flask import jsonify

from api import api_bp
from schema.catalog import STATUS_VALUES, KNOWN_CARRIERS, fields_by_group


@api_bp.route("/schema/fields")
def schema_fields():
    """Canonical fields grouped as required / contact / policy / personal / other."""
    return jsonify({
        "groups": fields_by_group(),
        "status_values": list(STATUS_VALUES),
        "carriers": list(KNOWN_CARRIERS),
    })
