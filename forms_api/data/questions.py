# forms_api/data/questions.py
from __future__ import annotations

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from forms_api.models.question import Question


def question_options(q: Question) -> list[str]:
    try:
        value = json.loads(q.options_json or "[]")
    except ValueError:
        return []
    return [str(v) for v in value] if isinstance(value, list) else []


def create_question(
    db: Session,
    *,
    form_id: int,
    text: str,
    type: str,
    options: list[str] | None = None,
    required: bool = False,
) -> Question:
    q = Question(
        form_id=int(form_id),
        text=text,
        type=type,
        options_json=json.dumps(list(options or [])),
        required=bool(required),
    )
    db.add(q)
    db.commit()
    db.refresh(q)
    return q


def get_question(db: Session, form_id: int, question_id: int) -> Question | None:
    return db.scalars(
        select(Question).where(Question.id == int(question_id), Question.form_id == int(form_id))
    ).first()


def list_questions(db: Session, form_id: int) -> list[Question]:
    return list(
        db.scalars(
            select(Question).where(Question.form_id == int(form_id)).order_by(Question.id.asc())
        )
    )


def question_ids_for_form(db: Session, form_id: int) -> set[int]:
    return set(db.scalars(select(Question.id).where(Question.form_id == int(form_id))))


def update_question(
    db: Session,
    q: Question,
    *,
    text: str | None = None,
    type: str | None = None,
    options: list[str] | None = None,
    required: bool | None = None,
) -> Question:
    if text is not None:
        q.text = text
    if type is not None:
        q.type = type
    if options is not None:
        q.options_json = json.dumps(list(options))
    if required is not None:
        q.required = bool(required)
    db.commit()
    db.refresh(q)
    return q


def delete_question(db: Session, q: Question) -> None:
    db.delete(q)
    db.commit()
