# forms_api/models/question.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from forms_api.clock import now_utc_naive
from forms_api.database import Base


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True)

    form_id: Mapped[int] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"), index=True, nullable=False
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)
    # e.g. "shorttext", "paragraph", "multiplechoice", "checkbox", "dropdown"
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    options_json: Mapped[str] = mapped_column(Text, default="[]", server_default="[]", nullable=False)
    required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=now_utc_naive, onupdate=now_utc_naive, nullable=False
    )
