"""Append-only activity trail for auto-scheduling decisions."""

import json
import logging
import uuid
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.security import mask_pii
from database.models.audit import AutoScheduleActivity

logger = logging.getLogger("interviews.activity")

ACTION_ELIGIBILITY_CHECK_FAILED = "eligibility_check_failed"
ACTION_INTERVIEWS_AUTO_SCHEDULED = "interviews_auto_scheduled"
ACTION_AUTO_SCHEDULE_FAILED = "auto_schedule_failed"


class ActivityLog:
    """
    Passive sink for scheduling decisions.

    Every record is written in its own session so an audit failure can never
    roll back or fail the operation being audited.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def record(
        self,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
        action: str,
        details: Optional[dict[str, Any]] = None,
        success: bool = True,
    ) -> None:
        """
        Persist one activity row and emit a structured log line.

        Args:
            candidate_id: Candidate the decision concerns
            campaign_id: Campaign the decision concerns
            action: Activity name, e.g. ``interviews_auto_scheduled``
            details: JSON-serializable decision details
            success: Whether the decision was a successful scheduling
        """
        details = details or {}
        log_entry = {
            "candidate_id": str(candidate_id),
            "campaign_id": str(campaign_id),
            "action": action,
            "success": success,
            "details": mask_pii(details),
        }
        logger.info(f"AUTO_SCHEDULE: {json.dumps(log_entry, default=str)}")

        try:
            async with self.session_factory() as session:
                session.add(
                    AutoScheduleActivity(
                        candidate_id=candidate_id,
                        campaign_id=campaign_id,
                        action=action,
                        success=success,
                        details=json.loads(json.dumps(details, default=str)),
                    )
                )
                await session.commit()
        except SQLAlchemyError:
            logger.exception(f"Failed to record activity '{action}' for candidate {candidate_id}")
