"""
CLIENTDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR      = Path(__file__).resolve().parent
CSV_SEED_PATH = Path(os.environ.get("CLIENTDB_CSV_SEED", BASE_DIR / "clients_seed.csv"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("CLIENTDB_DB", f"sqlite:///{BASE_DIR / 'clientdb.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("CLIENTDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("CLIENTDB_PORT", "5000"))
DEBUG  = os.environ.get("CLIENTDB_DEBUG", "0") == "1"
SECRET = os.environ.get("CLIENTDB_SECRET", "clientdb-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("CLIENTDB_LOG_LEVEL", "INFO").upper()

# ── Import pipeline ────────────────────────────────────────────────────
HISTORY_LIMIT       = int(os.environ.get("CLIENTDB_HISTORY_LIMIT", "20"))
PREVIEW_ROWS        = int(os.environ.get("CLIENTDB_PREVIEW_ROWS", "5"))
MAX_REPORTED_ISSUES = int(os.environ.get("CLIENTDB_MAX_REPORTED_ISSUES", "200"))

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 100
