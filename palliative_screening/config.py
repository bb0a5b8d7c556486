"""
ESAS Screening Core - Configuration
===================================
Centralised settings for logging, the intervention catalog and the
history analytics cadence. Values come from the project-level .env file
or the process environment; explicit function arguments always win.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PACKAGE_DIR = Path(__file__).resolve().parent               # palliative_screening/
PROJECT_ROOT = PACKAGE_DIR.parent
DEFAULT_CATALOG_PATH = PACKAGE_DIR / "core" / "recommendation" / "data" / "intervention_catalog.json"

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("ESAS_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("ESAS_LOG_FILE") or None

# ── Intervention catalog ────────────────────────────────────────────────
CATALOG_PATH = Path(os.getenv("ESAS_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))

# ── History analytics ───────────────────────────────────────────────────
MAX_HISTORY_SAMPLES = int(os.getenv("ESAS_MAX_HISTORY_SAMPLES", "1000"))  # most recent N records analysed
STREAK_WINDOW_DAYS = int(os.getenv("ESAS_STREAK_WINDOW_DAYS", "30"))

# ── Follow-up scheduling ────────────────────────────────────────────────
FOLLOW_UP_OVERDUE_DAYS = int(os.getenv("ESAS_FOLLOW_UP_OVERDUE_DAYS", "30"))
FOLLOW_UP_ELEVATED_DAYS = int(os.getenv("ESAS_FOLLOW_UP_ELEVATED_DAYS", "14"))

# ── Service ─────────────────────────────────────────────────────────────
API_TITLE = "ESAS Palliative Screening API"
API_VERSION = "1.0.0"
