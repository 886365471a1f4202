# forms_api/routes/rpc.py
"""
Shared plumbing for the JSON RPC surface.

Every method is `POST /forms.<Service>/<Method>` with a body shaped like the
protobuf message: camelCase names, and proto3 zero values for anything the
caller leaves out.
"""
from __future__ import annotations

from typing import Annotated, Any, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError

from forms_api.errors import Internal, InvalidArgument, RpcError

logger = structlog.get_logger(__name__)


def _coerce_id(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# ids travel as strings, but callers echoing an int Form.id are accepted
RpcId = Annotated[str, BeforeValidator(_coerce_id)]


class RpcMessage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthenticatedRequest(RpcMessage):
    token: Optional[str] = None

    @field_validator("token", mode="before")
    @classmethod
    def _malformed_token_is_no_token(cls, value: Any) -> Any:
        # a malformed credential must look exactly like a missing one
        return value if isinstance(value, str) else None


class Ack(RpcMessage):
    success: bool
    message: str


# largest key SQLite (and a BIGINT column) can hold
MAX_ID = 2**63 - 1


def parse_id(value: str | None) -> int | None:
    value = (value or "").strip()
    if not (value.isascii() and value.isdigit()):
        return None
    if len(value.lstrip("0")) > len(str(MAX_ID)):
        return None
    parsed = int(value)
    if parsed > MAX_ID:
        return None
    return parsed


def supplied(payload: BaseModel, field: str) -> bool:
    return field in payload.model_fields_set


def error_response(exc: RpcError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content={"code": int(exc.code), "status": exc.code.name, "message": exc.message},
    )


async def rpc_error_handler(_: Request, exc: RpcError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(_: Request, exc: Exception) -> JSONResponse:
    return error_response(InvalidArgument("Malformed request"))


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("rpc_internal_error", path=request.url.path, exc_info=exc)
    return error_response(Internal())


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RpcError, rpc_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, storage_error_handler)
