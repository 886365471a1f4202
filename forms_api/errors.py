# forms_api/errors.py
from __future__ import annotations

from enum import IntEnum


class StatusCode(IntEnum):
    """gRPC status codes used on the wire."""

    OK = 0
    INVALID_ARGUMENT = 3
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    INTERNAL = 13
    UNAUTHENTICATED = 16


HTTP_STATUS: dict[StatusCode, int] = {
    StatusCode.INVALID_ARGUMENT: 400,
    StatusCode.NOT_FOUND: 404,
    StatusCode.ALREADY_EXISTS: 409,
    StatusCode.PERMISSION_DENIED: 403,
    StatusCode.INTERNAL: 500,
    StatusCode.UNAUTHENTICATED: 401,
}


class RpcError(Exception):
    """Base class for errors reported to RPC callers.

    The message is shown to the caller verbatim, so it must never carry
    sensitive detail (which check failed, whether an account exists, ...).
    """

    code: StatusCode = StatusCode.INTERNAL
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.code]


class AuthFailed(RpcError):
    """Login rejected. Never says whether the email or the password was wrong."""

    code = StatusCode.UNAUTHENTICATED
    default_message = "Invalid email or password"


class Unauthenticated(RpcError):
    """Missing, malformed, expired or revoked token. All look the same."""

    code = StatusCode.UNAUTHENTICATED
    default_message = "Invalid or expired token"


class PermissionDenied(RpcError):
    code = StatusCode.PERMISSION_DENIED
    default_message = "Permission denied"


class InvalidArgument(RpcError):
    code = StatusCode.INVALID_ARGUMENT
    default_message = "Invalid argument"


class NotFound(RpcError):
    code = StatusCode.NOT_FOUND
    default_message = "Not found"


class AlreadyExists(RpcError):
    code = StatusCode.ALREADY_EXISTS
    default_message = "Already exists"


class Internal(RpcError):
    code = StatusCode.INTERNAL
    default_message = "Internal server error"
