"""
schema - Canonical client field catalog and import template.

Public API:
    catalog.FIELDS / FIELDS_BY_KEY / RECORD_FIELDS
    catalog.fields_by_group / get_field
    template.build_template_csv / TEMPLATE_HEADERS
"""

from schema.catalog import (                         # noqa: F401
    FIELDS,
    FIELDS_BY_KEY,
    RECORD_FIELDS,
    STATUS_VALUES,
    DEFAULT_STATUS,
    KNOWN_CARRIERS,
    fields_by_group,
    get_field,
)
from schema.template import build_template_csv, TEMPLATE_HEADERS   # noqa: F401
