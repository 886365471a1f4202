# forms_api/routes/auth.py
from __future__ import annotations

import secrets
from datetime import timedelta

import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from forms_api.auth.codec import TokenCodec
from forms_api.auth.guard import AccessGuard
from forms_api.auth.sessions import Identity, SessionManager
from forms_api.config import JWT_ALGORITHM, JWT_SECRET, SESSION_TTL_DAYS
from forms_api.database import get_db

logger = structlog.get_logger(__name__)

_codec: TokenCodec | None = None


def build_codec() -> TokenCodec:
    secret = JWT_SECRET
    if not secret:
        # tokens do not survive a restart
        logger.warning("jwt_secret_not_set", detail="using a random per-process signing secret")
        secret = secrets.token_urlsafe(48)
    return TokenCodec(
        secret,
        ttl=timedelta(days=SESSION_TTL_DAYS),
        algorithm=JWT_ALGORITHM,
    )


def get_codec() -> TokenCodec:
    global _codec
    if _codec is None:
        _codec = build_codec()
    return _codec


def get_session_manager(
    db: Session = Depends(get_db),
    codec: TokenCodec = Depends(get_codec),
) -> SessionManager:
    return SessionManager(db, codec)


def get_access_guard(
    sessions: SessionManager = Depends(get_session_manager),
) -> AccessGuard:
    return AccessGuard(sessions)


async def request_token(request: Request) -> str | None:
    """The caller's token, read from the raw body before the body is validated."""
    try:
        body = await request.json()
    except ValueError:
        return None
    token = body.get("token") if isinstance(body, dict) else None
    return token if isinstance(token, str) else None


def current_identity(
    token: str | None = Depends(request_token),
    guard: AccessGuard = Depends(get_access_guard),
) -> Identity:
    # sub-dependencies resolve before the request body, so a bad token wins
    # over a malformed field
    return guard.authenticate(token)
