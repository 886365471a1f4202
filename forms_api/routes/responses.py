# forms_api/routes/responses.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import Field
from sqlalchemy.orm import Session

from forms_api.auth.sessions import Identity
from forms_api.clock import isoformat
from forms_api.data import forms as form_store
from forms_api.data import questions as question_store
from forms_api.data import responses as response_store
from forms_api.database import get_db
from forms_api.errors import InvalidArgument, NotFound
from forms_api.models.form import Form
from forms_api.models.response import Response
from forms_api.routes.auth import current_identity
from forms_api.routes.rpc import (
    Ack,
    AuthenticatedRequest,
    RpcId,
    RpcMessage,
    parse_id,
    supplied,
)

router = APIRouter(prefix="/forms.ResponsesService", tags=["responses"])


class Answer(RpcMessage):
    question_id: RpcId = ""
    answer: str = ""


class ResponseMessage(RpcMessage):
    id: str
    form_id: str
    respondent_name: str
    respondent_email: str
    answers: list[Answer]
    created_at: str
    updated_at: str


class CreateResponseRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    answers: list[Answer] = Field(default_factory=list)
    respondent_name: str = ""
    respondent_email: str = ""


class GetResponseRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    response_id: RpcId = ""


class ListResponsesRequest(AuthenticatedRequest):
    form_id: RpcId = ""


class ListResponsesResponse(RpcMessage):
    responses: list[ResponseMessage]


class UpdateResponseRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    response_id: RpcId = ""
    answers: list[Answer] = Field(default_factory=list)
    respondent_name: str = ""
    respondent_email: str = ""


class DeleteResponseRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    response_id: RpcId = ""


def _to_message(r: Response) -> ResponseMessage:
    return ResponseMessage(
        id=str(r.id),
        form_id=str(r.form_id),
        respondent_name=r.respondent_name or "",
        respondent_email=r.respondent_email or "",
        answers=[Answer(**a) for a in response_store.response_answers(r)],
        created_at=isoformat(r.created_at),
        updated_at=isoformat(r.updated_at),
    )


def _get_form_or_404(db: Session, form_id: str) -> Form:
    parsed = parse_id(form_id)
    form = form_store.get_form(db, parsed) if parsed is not None else None
    if form is None:
        raise NotFound("Form not found")
    return form


def _get_response_or_404(db: Session, form_id: str, response_id: str) -> Response:
    form_pk = parse_id(form_id)
    response_pk = parse_id(response_id)
    r = None
    if form_pk is not None and response_pk is not None:
        r = response_store.get_response(db, form_pk, response_pk)
    if r is None:
        raise NotFound(f"Response with ID {response_id} does not exist for form {form_id}")
    return r


def _checked_answers(db: Session, form_id: int, answers: list[Answer]) -> list[dict[str, str]]:
    """Every answer must point at a question of this form."""
    known = question_store.question_ids_for_form(db, form_id)
    checked = []
    for a in answers:
        question_pk = parse_id(a.question_id)
        if question_pk is None or question_pk not in known:
            raise InvalidArgument(f"Unknown question ID {a.question_id} for form {form_id}")
        checked.append({"questionId": str(question_pk), "answer": a.answer})
    return checked


@router.post("/CreateResponse", response_model=ResponseMessage)
def create_response(
    payload: CreateResponseRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ResponseMessage:
    if not payload.form_id or not payload.answers:
        raise InvalidArgument("Form ID and at least one answer are required")

    form = _get_form_or_404(db, payload.form_id)
    r = response_store.create_response(
        db,
        form_id=form.id,
        answers=_checked_answers(db, form.id, payload.answers),
        respondent_name=payload.respondent_name,
        respondent_email=payload.respondent_email,
    )
    return _to_message(r)


@router.post("/GetResponse", response_model=ResponseMessage)
def get_response(
    payload: GetResponseRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ResponseMessage:
    return _to_message(_get_response_or_404(db, payload.form_id, payload.response_id))


@router.post("/ListResponses", response_model=ListResponsesResponse)
def list_responses(
    payload: ListResponsesRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ListResponsesResponse:
    form = _get_form_or_404(db, payload.form_id)
    responses = response_store.list_responses(db, form.id)
    return ListResponsesResponse(responses=[_to_message(r) for r in responses])


@router.post("/UpdateResponse", response_model=ResponseMessage)
def update_response(
    payload: UpdateResponseRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ResponseMessage:
    r = _get_response_or_404(db, payload.form_id, payload.response_id)

    answers = None
    if supplied(payload, "answers"):
        if not payload.answers:
            raise InvalidArgument("At least one answer is required")
        answers = _checked_answers(db, r.form_id, payload.answers)

    r = response_store.update_response(
        db,
        r,
        answers=answers,
        respondent_name=payload.respondent_name if supplied(payload, "respondent_name") else None,
        respondent_email=payload.respondent_email if supplied(payload, "respondent_email") else None,
    )
    return _to_message(r)


@router.post("/DeleteResponse", response_model=Ack)
def delete_response(
    payload: DeleteResponseRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> Ack:
    r = _get_response_or_404(db, payload.form_id, payload.response_id)
    response_store.delete_response(db, r)
    return Ack(success=True, message="Response deleted successfully")
