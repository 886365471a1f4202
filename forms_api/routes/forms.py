# forms_api/routes/forms.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from forms_api.auth.sessions import Identity
from forms_api.clock import isoformat
from forms_api.data import forms as form_store
from forms_api.database import get_db
from forms_api.errors import InvalidArgument, NotFound
from forms_api.models.form import Form
from forms_api.routes.auth import current_identity
from forms_api.routes.rpc import (
    Ack,
    AuthenticatedRequest,
    RpcId,
    RpcMessage,
    parse_id,
    supplied,
)

router = APIRouter(prefix="/forms.FormsService", tags=["forms"])


class FormMessage(RpcMessage):
    id: int
    user_id: int
    title: str
    description: str
    created_at: str
    updated_at: str


class CreateFormRequest(AuthenticatedRequest):
    title: str = ""
    description: str = ""


class GetFormRequest(AuthenticatedRequest):
    form_id: RpcId = ""


class ListFormsRequest(AuthenticatedRequest):
    pass


class ListFormsResponse(RpcMessage):
    forms: list[FormMessage]


class UpdateFormRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    title: str = ""
    description: str = ""


class DeleteFormRequest(AuthenticatedRequest):
    form_id: RpcId = ""


def _to_message(form: Form) -> FormMessage:
    return FormMessage(
        id=form.id,
        user_id=form.user_id,
        title=form.title,
        description=form.description or "",
        created_at=isoformat(form.created_at),
        updated_at=isoformat(form.updated_at),
    )


def _not_found(form_id: str) -> NotFound:
    return NotFound(f"Form with ID {form_id} does not exist")


def _get_owned_form_or_404(db: Session, form_id: str, user_id: int) -> Form:
    # someone else's form is reported as missing, not as forbidden
    parsed = parse_id(form_id)
    form = form_store.get_owned_form(db, parsed, user_id) if parsed is not None else None
    if form is None:
        raise _not_found(form_id)
    return form


@router.post("/CreateForm", response_model=FormMessage)
def create_form(
    payload: CreateFormRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> FormMessage:
    if not payload.title:
        raise InvalidArgument("Title is required")

    form = form_store.create_form(
        db, user_id=identity.user_id, title=payload.title, description=payload.description
    )
    return _to_message(form)


@router.post("/GetForm", response_model=FormMessage)
def get_form(
    payload: GetFormRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> FormMessage:
    parsed = parse_id(payload.form_id)
    form = form_store.get_form(db, parsed) if parsed is not None else None
    if form is None:
        raise _not_found(payload.form_id)
    return _to_message(form)


@router.post("/ListForms", response_model=ListFormsResponse)
def list_forms(
    payload: ListFormsRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ListFormsResponse:
    forms = form_store.list_forms_for_user(db, identity.user_id)
    return ListFormsResponse(forms=[_to_message(f) for f in forms])


@router.post("/UpdateForm", response_model=FormMessage)
def update_form(
    payload: UpdateFormRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> FormMessage:
    title = payload.title if supplied(payload, "title") else None
    description = payload.description if supplied(payload, "description") else None
    if title is not None and not title:
        raise InvalidArgument("Title cannot be empty")

    form = _get_owned_form_or_404(db, payload.form_id, identity.user_id)
    form = form_store.update_form(db, form, title=title, description=description)
    return _to_message(form)


@router.post("/DeleteForm", response_model=Ack)
def delete_form(
    payload: DeleteFormRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> Ack:
    form = _get_owned_form_or_404(db, payload.form_id, identity.user_id)
    form_store.delete_form(db, form)
    return Ack(success=True, message="Form deleted successfully")
