# forms_api/data/forms.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from forms_api.models.form import Form


def create_form(db: Session, *, user_id: int, title: str, description: str = "") -> Form:
    form = Form(user_id=int(user_id), title=title, description=description or "")
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def get_form(db: Session, form_id: int) -> Form | None:
    return db.get(Form, int(form_id))


def get_owned_form(db: Session, form_id: int, user_id: int) -> Form | None:
    return db.scalars(
        select(Form).where(Form.id == int(form_id), Form.user_id == int(user_id))
    ).first()


def list_forms_for_user(db: Session, user_id: int) -> list[Form]:
    return list(
        db.scalars(select(Form).where(Form.user_id == int(user_id)).order_by(Form.id.asc()))
    )


def update_form(
    db: Session,
    form: Form,
    *,
    title: str | None = None,
    description: str | None = None,
) -> Form:
    if title is not None:
        form.title = title
    if description is not None:
        form.description = description
    db.commit()
    db.refresh(form)
    return form


def delete_form(db: Session, form: Form) -> None:
    db.delete(form)
    db.commit()
