# forms_api/models/response.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from forms_api.clock import now_utc_naive
from forms_api.database import Base


class Response(Base):
    __tablename__ = "responses"

    id: Mapped[int] = mapped_column(primary_key=True)

    form_id: Mapped[int] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"), index=True, nullable=False
    )

    respondent_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    respondent_email: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    # [{"questionId": "...", "answer": "..."}]
    answers_json: Mapped[str] = mapped_column(Text, default="[]", server_default="[]", nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=now_utc_naive, onupdate=now_utc_naive, nullable=False
    )
