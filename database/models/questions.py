"""
Question Bank Models

Curated, company-scoped collections of reusable interview questions.
"""

import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    func,
    Text,
    JSON,
    Uuid,
    Index,
)
from database.engine import Base
from datetime import datetime
from typing import Any


class QuestionBank(Base):
    """A named collection of questions owned by one company."""

    __tablename__ = "question_banks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class Question(Base):
    """A single bank question; ``payload`` holds the type-specific body."""

    __tablename__ = "questions"
    __table_args__ = (
        Index("idx_questions_bank_type_difficulty", "bank_id", "question_type", "difficulty"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    bank_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("question_banks.id", ondelete="CASCADE"), nullable=False
    )
    question_type: Mapped[str] = mapped_column(String(50), nullable=False)
    difficulty: Mapped[str | None] = mapped_column(String(20))
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
