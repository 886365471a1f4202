# forms_api/data/responses.py
from __future__ import annotations

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from forms_api.models.response import Response


def response_answers(r: Response) -> list[dict[str, str]]:
    try:
        value = json.loads(r.answers_json or "[]")
    except ValueError:
        return []
    if not isinstance(value, list):
        return []
    return [
        {"questionId": str(a.get("questionId", "")), "answer": str(a.get("answer", ""))}
        for a in value
        if isinstance(a, dict)
    ]


def _dump_answers(answers: list[dict[str, Any]]) -> str:
    return json.dumps(
        [{"questionId": str(a["questionId"]), "answer": str(a.get("answer", ""))} for a in answers]
    )


def create_response(
    db: Session,
    *,
    form_id: int,
    answers: list[dict[str, Any]],
    respondent_name: str = "",
    respondent_email: str = "",
) -> Response:
    r = Response(
        form_id=int(form_id),
        answers_json=_dump_answers(answers),
        respondent_name=respondent_name or "",
        respondent_email=respondent_email or "",
    )
    db.add(r)
    db.commit()
    db.refresh(r)
    return r


def get_response(db: Session, form_id: int, response_id: int) -> Response | None:
    return db.scalars(
        select(Response).where(Response.id == int(response_id), Response.form_id == int(form_id))
    ).first()


def list_responses(db: Session, form_id: int) -> list[Response]:
    return list(
        db.scalars(
            select(Response).where(Response.form_id == int(form_id)).order_by(Response.id.asc())
        )
    )


def update_response(
    db: Session,
    r: Response,
    *,
    answers: list[dict[str, Any]] | None = None,
    respondent_name: str | None = None,
    respondent_email: str | None = None,
) -> Response:
    if answers is not None:
        r.answers_json = _dump_answers(answers)
    if respondent_name is not None:
        r.respondent_name = respondent_name
    if respondent_email is not None:
        r.respondent_email = respondent_email
    db.commit()
    db.refresh(r)
    return r


def delete_response(db: Session, r: Response) -> None:
    db.delete(r)
    db.commit()
