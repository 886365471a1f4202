# forms_api/auth/passwords.py
from __future__ import annotations

from passlib.context import CryptContext

# Pi-friendly hashing (no native deps)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def burn_verify() -> None:
    """Spend the same time a real verify would, for unknown accounts."""
    pwd_context.dummy_verify()
