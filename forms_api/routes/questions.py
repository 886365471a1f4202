# forms_api/routes/questions.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, Field
from sqlalchemy.orm import Session

from forms_api.auth.sessions import Identity
from forms_api.clock import isoformat
from forms_api.data import forms as form_store
from forms_api.data import questions as question_store
from forms_api.database import get_db
from forms_api.errors import InvalidArgument, NotFound
from forms_api.models.form import Form
from forms_api.models.question import Question
from forms_api.routes.auth import current_identity
from forms_api.routes.rpc import (
    Ack,
    AuthenticatedRequest,
    RpcId,
    RpcMessage,
    parse_id,
    supplied,
)

router = APIRouter(prefix="/forms.QuestionsService", tags=["questions"])


class QuestionMessage(RpcMessage):
    id: str
    text: str
    type: str
    options: list[str]
    required: bool
    created_at: str
    updated_at: str


class CreateQuestionRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    # older clients send questionText / questionType / isRequired
    text: str = Field(default="", validation_alias=AliasChoices("text", "questionText"))
    type: str = Field(default="", validation_alias=AliasChoices("type", "questionType"))
    options: list[str] = Field(default_factory=list)
    required: bool = Field(default=False, validation_alias=AliasChoices("required", "isRequired"))


class GetQuestionRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    question_id: RpcId = ""


class ListQuestionsRequest(AuthenticatedRequest):
    form_id: RpcId = ""


class ListQuestionsResponse(RpcMessage):
    questions: list[QuestionMessage]


class UpdateQuestionRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    question_id: RpcId = ""
    text: str = ""
    type: str = ""
    options: list[str] = Field(default_factory=list)
    required: bool = False


class DeleteQuestionRequest(AuthenticatedRequest):
    form_id: RpcId = ""
    question_id: RpcId = ""


def _to_message(q: Question) -> QuestionMessage:
    return QuestionMessage(
        id=str(q.id),
        text=q.text,
        type=q.type,
        options=question_store.question_options(q),
        required=bool(q.required),
        created_at=isoformat(q.created_at),
        updated_at=isoformat(q.updated_at),
    )


def _get_form_or_404(db: Session, form_id: str) -> Form:
    parsed = parse_id(form_id)
    form = form_store.get_form(db, parsed) if parsed is not None else None
    if form is None:
        raise NotFound("Form not found")
    return form


def _get_question_or_404(db: Session, form_id: str, question_id: str) -> Question:
    form_pk = parse_id(form_id)
    question_pk = parse_id(question_id)
    q = None
    if form_pk is not None and question_pk is not None:
        q = question_store.get_question(db, form_pk, question_pk)
    if q is None:
        raise NotFound(f"Question with ID {question_id} does not exist in form {form_id}")
    return q


@router.post("/CreateQuestion", response_model=QuestionMessage)
def create_question(
    payload: CreateQuestionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> QuestionMessage:
    if not payload.form_id or not payload.text or not payload.type:
        raise InvalidArgument("Form ID, question text, and question type are required")

    form = _get_form_or_404(db, payload.form_id)
    q = question_store.create_question(
        db,
        form_id=form.id,
        text=payload.text,
        type=payload.type,
        options=payload.options,
        required=payload.required,
    )
    return _to_message(q)


@router.post("/GetQuestion", response_model=QuestionMessage)
def get_question(
    payload: GetQuestionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> QuestionMessage:
    return _to_message(_get_question_or_404(db, payload.form_id, payload.question_id))


@router.post("/ListQuestions", response_model=ListQuestionsResponse)
def list_questions(
    payload: ListQuestionsRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> ListQuestionsResponse:
    form = _get_form_or_404(db, payload.form_id)
    questions = question_store.list_questions(db, form.id)
    return ListQuestionsResponse(questions=[_to_message(q) for q in questions])


@router.post("/UpdateQuestion", response_model=QuestionMessage)
def update_question(
    payload: UpdateQuestionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> QuestionMessage:
    fields = {
        name: getattr(payload, name)
        for name in ("text", "type", "options", "required")
        if supplied(payload, name)
    }
    if fields.get("text") == "" or fields.get("type") == "":
        raise InvalidArgument("Question text and type cannot be empty")

    q = _get_question_or_404(db, payload.form_id, payload.question_id)
    q = question_store.update_question(db, q, **fields)
    return _to_message(q)


@router.post("/DeleteQuestion", response_model=Ack)
def delete_question(
    payload: DeleteQuestionRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> Ack:
    q = _get_question_or_404(db, payload.form_id, payload.question_id)
    question_store.delete_question(db, q)
    return Ack(success=True, message="Question deleted successfully")
