# forms_api/routes/users.py
from __future__ import annotations

import re

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.auth.guard import AccessGuard
from forms_api.auth.sessions import Identity
from forms_api.clock import isoformat
from forms_api.data import users as user_store
from forms_api.database import get_db
from forms_api.errors import InvalidArgument, NotFound
from forms_api.models.user import User
from forms_api.routes.auth import current_identity, get_access_guard
from forms_api.routes.rpc import Ack, AuthenticatedRequest, RpcId, RpcMessage, parse_id

router = APIRouter(prefix="/forms.UsersService", tags=["users"])

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


class UserMessage(RpcMessage):
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str
    password_updated: bool = False


class CreateUserResponse(RpcMessage):
    id: str
    email: str
    name: str
    created_at: str
    updated_at: str


class CreateUserRequest(RpcMessage):
    email: str = ""
    password: str = ""
    name: str = ""


class GetUserRequest(AuthenticatedRequest):
    user_id: RpcId = ""


class ListUsersRequest(AuthenticatedRequest):
    pass


class ListUsersResponse(RpcMessage):
    users: list[UserMessage]


class UpdateUserRequest(AuthenticatedRequest):
    user_id: RpcId = ""
    email: str = ""
    password: str = ""
    name: str = ""


class DeleteUserRequest(AuthenticatedRequest):
    user_id: RpcId = ""


def _to_message(user: User, password_updated: bool = False) -> UserMessage:
    return UserMessage(
        id=str(user.id),
        email=user.email,
        name=user.name,
        created_at=isoformat(user.created_at),
        updated_at=isoformat(user.updated_at),
        password_updated=password_updated,
    )


def _check_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise InvalidArgument("Invalid email format")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgument(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _get_user_or_404(db: Session, user_id: str) -> User:
    parsed = parse_id(user_id)
    user = user_store.find_by_id(db, parsed) if parsed is not None else None
    if user is None:
        raise NotFound("User not found")
    return user


@router.post("/CreateUser", response_model=CreateUserResponse)
def create_user(payload: CreateUserRequest, db: Session = Depends(get_db)) -> CreateUserResponse:
    if not payload.email or not payload.password or not payload.name:
        raise InvalidArgument("Email, password, and name are required")
    _check_email(payload.email)
    _check_password(payload.password)

    user = user_store.create_user(
        db, email=payload.email, password=payload.password, name=payload.name
    )
    return CreateUserResponse(
        id=str(user.id),
        email=user.email,
        name=user.name,
        created_at=isoformat(user.created_at),
        updated_at=isoformat(user.updated_at),
    )


@router.post("/GetUser", response_model=UserMessage)
def get_user(
    payload: GetUserRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
    guard: AccessGuard = Depends(get_access_guard),
) -> UserMessage:
    guard.authorize_self_or_admin(identity, payload.user_id)

    return _to_message(_get_user_or_404(db, payload.user_id))


@router.post("/ListUsers", response_model=ListUsersResponse)
def list_users(
    payload: ListUsersRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ListUsersResponse:
    # any authenticated user may list; there is no admin role to restrict it to
    return ListUsersResponse(users=[_to_message(u) for u in user_store.list_users(db)])


@router.post("/UpdateUser", response_model=UserMessage)
def update_user(
    payload: UpdateUserRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
    guard: AccessGuard = Depends(get_access_guard),
) -> UserMessage:
    guard.authorize_self_or_admin(
        identity, payload.user_id, "You can only update your own user data"
    )

    # empty strings mean "leave unchanged"
    email = payload.email or None
    password = payload.password or None
    name = payload.name or None

    if email is not None:
        _check_email(email)
    if password is not None:
        _check_password(password)

    user = _get_user_or_404(db, payload.user_id)
    user = user_store.update_user(db, user, email=email, password=password, name=name)
    return _to_message(user, password_updated=password is not None)


@router.post("/DeleteUser", response_model=Ack)
def delete_user(
    payload: DeleteUserRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
    guard: AccessGuard = Depends(get_access_guard),
) -> Ack:
    guard.authorize_self_or_admin(identity, payload.user_id, "You can only delete your own account")

    user = _get_user_or_404(db, payload.user_id)
    user_store.delete_user(db, user)
    return Ack(success=True, message="User deleted successfully")
