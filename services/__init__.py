"""
services - Business-logic layer sitting between API and DB.
"""

from services.batch_service import BatchService                  # noqa: F401
from services.clients_service import ClientsService              # noqa: F401
from services.mapping_service import MappingService              # noqa: F401
from services.import_service import run_import, preview_import   # noqa: F401
