# forms_api/auth/codec.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from forms_api.clock import now_utc_naive

Clock = Callable[[], datetime]

DEFAULT_TTL = timedelta(days=7)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    subject_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    issued_at: datetime
    expires_at: datetime
    token_id: str


def _to_timestamp(value: datetime) -> int:
    return int(value.replace(tzinfo=timezone.utc).timestamp())


def _from_timestamp(value: int) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)


class TokenCodec:
    """Mints and verifies signed, expiring bearer tokens.

    Pure: no storage is touched. A token that verifies here is only
    *eligible* to authenticate; the session store decides if it is live.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
        clock: Clock = now_utc_naive,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl <= timedelta(0):
            raise ValueError("Token ttl must be positive")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        """The time expiry is judged against."""
        return self._clock()

    def mint(self, subject_id: int) -> IssuedToken:
        # whole seconds, so the stored expiry matches the exp claim exactly
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": str(int(subject_id)),
            "iat": _to_timestamp(issued_at),
            "exp": _to_timestamp(expires_at),
            # two logins in the same second must still differ
            "jti": secrets.token_urlsafe(16),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            subject_id=int(subject_id),
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def verify(self, token: str | None) -> TokenClaims | None:
        """Return the claims of a well-formed, correctly signed, unexpired token.

        Every failure (malformed, tampered, wrong key, expired, bad subject)
        yields None; callers must not be able to tell them apart.
        """
        if not token or not isinstance(token, str):
            return None

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                # expiry is judged against our own clock below
                options={
                    "require": ["sub", "iat", "exp", "jti"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            subject_id = int(claims["sub"])
            expires_at = _from_timestamp(claims["exp"])
            issued_at = _from_timestamp(claims["iat"])
        except (jwt.InvalidTokenError, TypeError, ValueError, OverflowError):
            return None

        if self._clock() >= expires_at:
            return None

        return TokenClaims(
            subject_id=subject_id,
            issued_at=issued_at,
            expires_at=expires_at,
            token_id=str(claims["jti"]),
        )
