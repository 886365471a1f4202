# forms_api/data/users.py
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from forms_api.auth.passwords import burn_verify, hash_password, verify_password as check_password
from forms_api.errors import AlreadyExists
from forms_api.models.session import SessionToken
from forms_api.models.user import User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, int(user_id))


def find_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == normalize_email(email))).first()


def verify_password(db: Session, email: str, password: str) -> User | None:
    """Return the user when the password matches, else None.

    Unknown emails still pay for one hash verification so both failure
    paths take about the same time.
    """
    user = find_by_email(db, email)
    if user is None:
        burn_verify()
        return None
    if not check_password(password, user.password_hash):
        return None
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id.asc())))


def create_user(db: Session, *, email: str, password: str, name: str) -> User:
    email = normalize_email(email)
    if find_by_email(db, email) is not None:
        raise AlreadyExists("Email already exists")

    user = User(email=email, name=name, password_hash=hash_password(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration
        db.rollback()
        raise AlreadyExists("Email already exists")
    db.refresh(user)
    return user


def update_user(
    db: Session,
    user: User,
    *,
    email: str | None = None,
    password: str | None = None,
    name: str | None = None,
) -> User:
    if email is not None:
        email = normalize_email(email)
        other = find_by_email(db, email)
        if other is not None and other.id != user.id:
            raise AlreadyExists("Email already exists")
        user.email = email
    if password is not None:
        user.password_hash = hash_password(password)
    if name is not None:
        user.name = name

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyExists("Email already exists")
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    """Delete a user together with every session it holds.

    Forms, questions and responses go with it through ON DELETE CASCADE.
    """
    db.execute(delete(SessionToken).where(SessionToken.user_id == user.id))
    db.delete(user)
    db.commit()
