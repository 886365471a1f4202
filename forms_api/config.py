# forms_api/config.py
from __future__ import annotations

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = PROJECT_ROOT / "data"
DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_PATH = DATA_DIR / "forms.db"
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH.as_posix()}")

# Create tables at startup when alembic is not used
AUTO_CREATE_TABLES: bool = os.getenv("AUTO_CREATE_TABLES", "1") == "1"

DEBUG: bool = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Token signing. Empty means "generate a per-process secret" (see routes/auth.py).
JWT_SECRET: str = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
SESSION_TTL_DAYS: int = int(os.getenv("SESSION_TTL_DAYS", "7"))

# Lazy cleanup of expired session rows
SESSION_PURGE_ON_LOGIN: bool = os.getenv("SESSION_PURGE_ON_LOGIN", "1") == "1"
SESSION_PURGE_THROTTLE_SECONDS: int = int(os.getenv("SESSION_PURGE_THROTTLE_SECONDS", "60"))
