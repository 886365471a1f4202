# forms_api/auth/sessions.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from forms_api.auth.codec import TokenCodec
from forms_api.auth.store import SessionStore, purge_expired_sessions_now
from forms_api.config import SESSION_PURGE_ON_LOGIN
from forms_api.data import users as user_store
from forms_api.errors import AuthFailed, Unauthenticated

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated caller, resolved from a live token."""

    user_id: int
    email: str
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_id: int
    expires_at: datetime


class SessionManager:
    """Issues, validates and revokes session tokens.

    A token is live only while it verifies (signature and expiry) *and* its
    session row exists. Logout deletes the row, so a revoked token is
    rejected even though it would still verify cryptographically.
    """

    def __init__(
        self,
        db: Session,
        codec: TokenCodec,
        *,
        purge_on_login: bool = SESSION_PURGE_ON_LOGIN,
    ) -> None:
        self._db = db
        self._codec = codec
        self._store = SessionStore(db)
        self._purge_on_login = purge_on_login

    @property
    def store(self) -> SessionStore:
        return self._store

    def login(self, email: str, password: str) -> LoginResult:
        user = user_store.verify_password(self._db, email, password)
        if user is None:
            # same outcome for unknown email and wrong password
            logger.info("login_failed")
            raise AuthFailed()

        # runs before the new row exists, on the same clock as verify
        if self._purge_on_login:
            purge_expired_sessions_now(self._db, self._codec.now())

        issued = self._codec.mint(user.id)
        self._store.create(issued.token, user.id, issued.expires_at)
        logger.info("session_created", user_id=user.id, expires_at=issued.expires_at.isoformat())

        return LoginResult(token=issued.token, user_id=user.id, expires_at=issued.expires_at)

    def validate(self, token: str | None) -> Identity:
        claims = self._codec.verify(token)
        if claims is None:
            raise Unauthenticated()

        sess = self._store.find_live(token)
        if sess is None or sess.user_id != claims.subject_id:
            raise Unauthenticated()

        user = user_store.find_by_id(self._db, claims.subject_id)
        if user is None:
            raise Unauthenticated()

        return Identity(
            user_id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def logout(self, token: str | None) -> None:
        identity = self.validate(token)

        # rowcount decides: of two racing logouts only one removes the row
        if not self._store.delete(token):
            raise Unauthenticated()

        logger.info("session_revoked", user_id=identity.user_id)
