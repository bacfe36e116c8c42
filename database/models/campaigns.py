"""
Campaign Models

Hiring campaigns and the interview rounds configured for them. Both are owned
by campaign CRUD outside this service; the scheduling engine only reads them.
"""

import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    Integer,
    DateTime,
    func,
    Text,
    JSON,
    Uuid,
    Enum as SQLEnum,
    UniqueConstraint,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any


# ==================== Enums ===================== #
class InterviewType(str, PyEnum):
    """Interview format of a campaign round."""

    BEHAVIORAL = "behavioral"
    MCQ = "mcq"
    CODING = "coding"
    COMBO = "combo"


# ==================== JobCampaign Model ===================== #
class JobCampaign(Base):
    """
    A job opening with one or more configured interview rounds.
    """

    __tablename__ = "job_campaigns"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Campaign info
    campaign_name: Mapped[str | None] = mapped_column(String(255))
    job_title: Mapped[str] = mapped_column(String(255), nullable=False)
    job_description: Mapped[str | None] = mapped_column(Text)

    # Raw auto-scheduling settings, parsed by the engine with defaults
    auto_schedule_config: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    rounds: Mapped[list["InterviewRoundConfig"]] = relationship(
        back_populates="campaign",
        order_by="InterviewRoundConfig.round_number",
        lazy="selectin",
    )


# ==================== InterviewRoundConfig Model ===================== #
class InterviewRoundConfig(Base):
    """
    One interview round within a campaign. Immutable once live interviews
    reference it.
    """

    __tablename__ = "interview_round_configs"
    __table_args__ = (
        UniqueConstraint("campaign_id", "round_number", name="uq_round_campaign_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("job_campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Round info
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    round_name: Mapped[str] = mapped_column(String(255), nullable=False)
    interview_type: Mapped[InterviewType] = mapped_column(
        SQLEnum(
            InterviewType,
            native_enum=False,
            length=50,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    time_limit_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    difficulty: Mapped[str | None] = mapped_column(String(20), default="medium")
    question_count: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    # Question bank collection id; format is validated when questions are resolved
    question_source_id: Mapped[str | None] = mapped_column(String(64))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    campaign: Mapped[JobCampaign] = relationship(back_populates="rounds", lazy="raise")
