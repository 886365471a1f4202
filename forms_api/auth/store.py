# forms_api/auth/store.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from forms_api.clock import now_utc_naive
from forms_api.config import SESSION_PURGE_THROTTLE_SECONDS
from forms_api.models.session import SessionToken

logger = structlog.get_logger(__name__)


class SessionStore:
    """Sole authority on whether an issued token is still honourable.

    Each mutation is one statement plus a commit, so a deletion is visible
    to any request that starts after it returns.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, token: str, subject_id: int, expires_at: datetime) -> SessionToken:
        sess = SessionToken(
            user_id=int(subject_id),
            token=token,
            created_at=now_utc_naive(),
            expires_at=expires_at,
        )
        self._db.add(sess)
        self._db.commit()
        return sess

    def find_live(self, token: str) -> SessionToken | None:
        """The row for a token that has not been logged out or purged."""
        return self._db.scalars(select(SessionToken).where(SessionToken.token == token)).first()

    def delete(self, token: str) -> bool:
        """Remove a session; True only if this call removed the row."""
        result = self._db.execute(delete(SessionToken).where(SessionToken.token == token))
        self._db.commit()
        return result.rowcount == 1

    def delete_for_user(self, user_id: int) -> int:
        result = self._db.execute(delete(SessionToken).where(SessionToken.user_id == int(user_id)))
        self._db.commit()
        return int(result.rowcount or 0)

    def purge_expired(self, now: datetime | None = None) -> int:
        now = now or now_utc_naive()
        result = self._db.execute(delete(SessionToken).where(SessionToken.expires_at <= now))
        self._db.commit()
        return int(result.rowcount or 0)


_LAST_PURGE_AT: Optional[datetime] = None


def purge_expired_sessions_now(db: Session, now: datetime | None = None) -> int:
    """
    Purge-on-login with a global throttle.
    Expired rows are dead weight only; the codec already rejects their tokens.
    """
    global _LAST_PURGE_AT

    now = now or now_utc_naive()

    if _LAST_PURGE_AT is not None:
        elapsed = (now - _LAST_PURGE_AT).total_seconds()
        if 0 <= elapsed < SESSION_PURGE_THROTTLE_SECONDS:
            return 0  # throttle hit → skip purge

    removed = SessionStore(db).purge_expired(now)
    _LAST_PURGE_AT = now
    if removed:
        logger.info("expired_sessions_purged", count=removed)
    return removed


def reset_purge_throttle() -> None:
    global _LAST_PURGE_AT
    _LAST_PURGE_AT = None
