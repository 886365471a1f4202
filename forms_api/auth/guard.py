# forms_api/auth/guard.py
from __future__ import annotations

from forms_api.auth.sessions import Identity, SessionManager
from forms_api.errors import PermissionDenied


class AccessGuard:
    """Entry check for every RPC method except CreateUser and CreateSession."""

    def __init__(self, sessions: SessionManager) -> None:
        self._sessions = sessions

    def authenticate(self, token: str | None) -> Identity:
        return self._sessions.validate(token)

    def authorize_self_or_admin(
        self,
        identity: Identity,
        target_user_id: str | int | None,
        message: str = "You can only access your own user data",
    ) -> None:
        # There is no admin role yet, so this is a self-only check.
        try:
            target = int(str(target_user_id).strip())
        except (TypeError, ValueError):
            raise PermissionDenied(message)
        if target != identity.user_id:
            raise PermissionDenied(message)
