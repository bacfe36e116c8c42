"""
Candidate Models

A candidate applied to one campaign. Profile enrichment and resume parsing
live elsewhere; the engine reads identity and moves the pipeline stage.
"""

import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    ForeignKey,
    DateTime,
    func,
    Uuid,
)
from database.engine import Base
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Candidate Enums ===================== #
class CandidateStatus(str, PyEnum):
    """Pipeline stage of a candidate within a campaign."""

    APPLIED = "applied"
    SCREENING = "screening"
    INTERVIEW = "interview"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


# ==================== Candidate Model ===================== #
class Candidate(Base):
    """Candidate attached to a hiring campaign."""

    __tablename__ = "candidates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("job_campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=CandidateStatus.APPLIED.value
    )

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
