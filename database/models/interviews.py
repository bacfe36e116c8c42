"""
Interview Models

One row per candidate attempt at one interview, whatever created it. Direct,
coding and campaign interviews share this table and are told apart by
``kind``; per-kind differences are handled by the service-layer adapters.
"""

import uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    Integer,
    DateTime,
    func,
    Text,
    JSON,
    Uuid,
    Enum as SQLEnum,
    Index,
    text,
)
from database.engine import Base
from database.models.campaigns import JobCampaign, InterviewRoundConfig
from database.models.candidates import Candidate
from datetime import datetime
from enum import Enum as PyEnum
from typing import Any


# ==================== Interview Enums ===================== #
class InterviewKind(str, PyEnum):
    """Which interview family produced the instance."""

    DIRECT = "direct"
    CODING = "coding"
    CAMPAIGN = "campaign"


class InterviewStatus(str, PyEnum):
    """Lifecycle state of an interview instance."""

    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def _enum_column(enum_cls: type[PyEnum]) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        native_enum=False,
        length=50,
        values_callable=lambda e: [m.value for m in e],
    )


# ==================== InterviewInstance Model ===================== #
class InterviewInstance(Base):
    """
    A candidate's attempt at one interview round.

    Created in ``scheduled`` state, mutated only through the interview state
    machine and never deleted by the engine.
    """

    __tablename__ = "interview_instances"
    __table_args__ = (
        # At most one live instance per (candidate, campaign, round)
        Index(
            "uq_interview_candidate_campaign_round",
            "candidate_id",
            "campaign_id",
            "round_config_id",
            unique=True,
            postgresql_where=text("superseded_at IS NULL"),
            sqlite_where=text("superseded_at IS NULL"),
        ),
        Index("idx_interview_candidate_status", "candidate_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    kind: Mapped[InterviewKind] = mapped_column(
        _enum_column(InterviewKind), nullable=False, default=InterviewKind.CAMPAIGN
    )

    # Relationships
    candidate_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    campaign_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("job_campaigns.id", ondelete="CASCADE"), index=True
    )
    round_config_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("interview_round_configs.id")
    )

    # Interview details
    interview_type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[InterviewStatus] = mapped_column(
        _enum_column(InterviewStatus),
        nullable=False,
        default=InterviewStatus.SCHEDULED,
        index=True,
    )

    # Legacy direct / coding interview fields
    title: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    time_limit_minutes: Mapped[int | None] = mapped_column(Integer)

    # Scheduling
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="UTC")
    access_link: Mapped[str | None] = mapped_column(String(2048))

    # Progress
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    duration_seconds: Mapped[int | None] = mapped_column(Integer)

    # Results
    score: Mapped[int | None] = mapped_column(Integer)
    max_score: Mapped[int | None] = mapped_column(Integer)
    passed: Mapped[bool | None] = mapped_column(Boolean)

    # Versioned answer payload and frozen question set
    answers_payload: Mapped[dict[str, Any] | None] = mapped_column(JSON(none_as_null=True))
    question_snapshot: Mapped[dict[str, Any] | None] = mapped_column(JSON(none_as_null=True))

    # Administrative replacement; superseded rows no longer count as live
    superseded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

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

    candidate: Mapped[Candidate] = relationship(lazy="raise")
    campaign: Mapped[JobCampaign | None] = relationship(lazy="raise")
    round_config: Mapped[InterviewRoundConfig | None] = relationship(lazy="raise")
