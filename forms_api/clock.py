# forms_api/clock.py
from __future__ import annotations

from datetime import datetime, timezone


def now_utc_naive() -> datetime:
    # Naive UTC datetime (no tzinfo). Works cleanly with SQLite.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value: datetime | None) -> str:
    return value.isoformat() if value else ""
