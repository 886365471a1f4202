# forms_api/models/session.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from forms_api.clock import now_utc_naive
from forms_api.database import Base


class SessionToken(Base):
    """Server-side record that keeps an issued token honourable.

    A signed token only authenticates while its row exists here; deleting
    the row is how logout revokes it before natural expiry.
    """

    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(primary_key=True)

    # not unique: a user may hold several live sessions
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    token: Mapped[str] = mapped_column(String(512), unique=True, index=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    # copy of the token's exp claim, only used for purging dead rows
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
