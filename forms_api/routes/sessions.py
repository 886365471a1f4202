# forms_api/routes/sessions.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from forms_api.auth.sessions import Identity, SessionManager
from forms_api.clock import isoformat
from forms_api.errors import InvalidArgument
from forms_api.routes.auth import current_identity, get_session_manager, request_token
from forms_api.routes.rpc import Ack, AuthenticatedRequest, RpcMessage

router = APIRouter(prefix="/forms.SessionsService", tags=["sessions"])


class CreateSessionRequest(RpcMessage):
    email: str = ""
    password: str = ""


class SessionMessage(RpcMessage):
    token: str
    user_id: str


class DeleteSessionRequest(AuthenticatedRequest):
    pass


class ValidateSessionRequest(AuthenticatedRequest):
    pass


class ValidatedUser(RpcMessage):
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str


@router.post("/CreateSession", response_model=SessionMessage)
def create_session(
    payload: CreateSessionRequest,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionMessage:
    if not payload.email or not payload.password:
        raise InvalidArgument("Email and password are required")

    result = sessions.login(payload.email, payload.password)
    return SessionMessage(token=result.token, user_id=str(result.user_id))


@router.post("/DeleteSession", response_model=Ack)
def delete_session(
    payload: DeleteSessionRequest,
    token: str | None = Depends(request_token),
    sessions: SessionManager = Depends(get_session_manager),
) -> Ack:
    sessions.logout(token)
    return Ack(success=True, message="Logged out successfully")


@router.post("/ValidateSession", response_model=ValidatedUser)
def validate_session(
    payload: ValidateSessionRequest,
    identity: Identity = Depends(current_identity),
) -> ValidatedUser:
    return ValidatedUser(
        id=str(identity.user_id),
        email=identity.email,
        name=identity.name,
        created_at=isoformat(identity.created_at),
        updated_at=isoformat(identity.updated_at),
    )
