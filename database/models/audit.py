import uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
    func,
    JSON,
    Uuid,
)
from database.engine import Base
from datetime import datetime
from typing import Any


# ==================== Models ===================== #
class AutoScheduleActivity(Base):
    """
    Append-only trail of auto-scheduling decisions.
    """

    __tablename__ = "auto_schedule_activities"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Subject
    candidate_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    campaign_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    # Decision
    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(JSON)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
