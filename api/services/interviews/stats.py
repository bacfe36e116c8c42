"""Auto-scheduling statistics for a campaign."""

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.repositories import CandidateRepository, InterviewRepository


async def get_auto_schedule_stats(
    session_factory: async_sessionmaker[AsyncSession],
    campaign_id: uuid.UUID,
) -> dict[str, Any]:
    """
    Share of a campaign's candidates that have at least one interview.

    Args:
        session_factory: Session maker
        campaign_id: Campaign to report on

    Returns:
        Dictionary with candidate counts and the auto-schedule rate in percent
    """
    async with session_factory() as session:
        total = await CandidateRepository(session).count_for_campaign(campaign_id)
        with_interviews = await InterviewRepository(session).count_candidates_with_interviews(
            campaign_id
        )

    rate = round(with_interviews / total * 100, 2) if total else 0
    return {
        "campaign_id": str(campaign_id),
        "total_candidates": total,
        "candidates_with_interviews": with_interviews,
        "auto_schedule_rate": rate,
    }
