"""
GradeDB - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("GRADEDB_DB", f"sqlite:///{BASE_DIR / 'gradedb.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("GRADEDB_HOST", "0.0.0.0")
PORT   = int(os.environ.get("GRADEDB_PORT", "5000"))
DEBUG  = os.environ.get("GRADEDB_DEBUG", "0") == "1"
SECRET = os.environ.get("GRADEDB_SECRET", "gradedb-dev-key-change-in-prod")

LOG_LEVEL = os.environ.get("GRADEDB_LOG_LEVEL", "INFO").upper()

# ── Auth pass-through ──────────────────────────────────────────────────
# The upstream auth proxy puts the authenticated user id in this header.
OWNER_HEADER = os.environ.get("GRADEDB_OWNER_HEADER", "X-User-Id")

# ── Import ─────────────────────────────────────────────────────────────
MAX_UPLOAD_BYTES = int(os.environ.get("GRADEDB_MAX_UPLOAD_MB", "10")) * 1024 * 1024

MIME_CSV  = "text/csv"
MIME_XLS  = "application/vnd.ms-excel"
MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ALLOWED_MIME_TYPES = frozenset({MIME_CSV, MIME_XLS, MIME_XLSX})

IMPORTED_CLASS_DESCRIPTION = "Imported from file"
