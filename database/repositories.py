"""
Repositories used by the interview engine.

Each repository wraps one session owned by the caller, so several of them
can take part in the same transaction.
"""

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.campaigns import InterviewRoundConfig, JobCampaign
from database.models.candidates import Candidate
from database.models.interviews import InterviewInstance, InterviewStatus


class CampaignRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, campaign_id: uuid.UUID) -> Optional[JobCampaign]:
        return await self.session.get(JobCampaign, campaign_id)


class RoundConfigRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_campaign(self, campaign_id: uuid.UUID) -> list[InterviewRoundConfig]:
        """Round configs of a campaign, lowest round number first."""
        result = await self.session.execute(
            select(InterviewRoundConfig)
            .where(InterviewRoundConfig.campaign_id == campaign_id)
            .order_by(InterviewRoundConfig.round_number.asc())
        )
        return list(result.scalars().all())

    async def get(self, round_config_id: uuid.UUID) -> Optional[InterviewRoundConfig]:
        return await self.session.get(InterviewRoundConfig, round_config_id)


class CandidateRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, candidate_id: uuid.UUID) -> Optional[Candidate]:
        return await self.session.get(Candidate, candidate_id)

    async def get_in_campaign(
        self, candidate_id: uuid.UUID, campaign_id: uuid.UUID
    ) -> Optional[Candidate]:
        result = await self.session.execute(
            select(Candidate).where(
                Candidate.id == candidate_id,
                Candidate.campaign_id == campaign_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_email(self, email: str) -> list[Candidate]:
        result = await self.session.execute(
            select(Candidate).where(func.lower(Candidate.email) == email.strip().lower())
        )
        return list(result.scalars().all())

    async def set_status(self, candidate_id: uuid.UUID, status: str) -> None:
        await self.session.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )

    async def count_for_campaign(self, campaign_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(Candidate.id)).where(Candidate.campaign_id == campaign_id)
        )
        return result.scalar_one()


class InterviewRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, interview_id: uuid.UUID) -> Optional[InterviewInstance]:
        return await self.session.get(InterviewInstance, interview_id, populate_existing=True)

    async def count_live_for_candidate(
        self, candidate_id: uuid.UUID, campaign_id: uuid.UUID
    ) -> int:
        """Count non-superseded instances of a candidate in a campaign, any round."""
        result = await self.session.execute(
            select(func.count(InterviewInstance.id)).where(
                InterviewInstance.candidate_id == candidate_id,
                InterviewInstance.campaign_id == campaign_id,
                InterviewInstance.superseded_at.is_(None),
            )
        )
        return result.scalar_one()

    async def count_candidates_with_interviews(self, campaign_id: uuid.UUID) -> int:
        result = await self.session.execute(
            select(func.count(func.distinct(InterviewInstance.candidate_id))).where(
                InterviewInstance.campaign_id == campaign_id,
                InterviewInstance.superseded_at.is_(None),
            )
        )
        return result.scalar_one()

    async def list_for_candidates(
        self, candidate_ids: Sequence[uuid.UUID]
    ) -> list[InterviewInstance]:
        if not candidate_ids:
            return []
        result = await self.session.execute(
            select(InterviewInstance)
            .where(
                InterviewInstance.candidate_id.in_(candidate_ids),
                InterviewInstance.superseded_at.is_(None),
            )
            .order_by(InterviewInstance.scheduled_at.asc(), InterviewInstance.created_at.asc())
        )
        return list(result.scalars().all())

    def add_all(self, instances: Sequence[InterviewInstance]) -> None:
        self.session.add_all(instances)

    async def transition(
        self,
        interview_id: uuid.UUID,
        values: dict[str, Any],
        from_statuses: Optional[Sequence[InterviewStatus]] = None,
        exclude_status: Optional[InterviewStatus] = None,
    ) -> bool:
        """
        Conditionally update one interview.

        The status guard is part of the UPDATE statement itself, so of two
        concurrent callers only one sees a matched row.

        Args:
            interview_id: Interview to update
            values: Column values to set
            from_statuses: Only update when the current status is one of these
            exclude_status: Only update when the current status differs from this

        Returns:
            True if a row was updated
        """
        stmt = update(InterviewInstance).where(InterviewInstance.id == interview_id)
        if from_statuses is not None:
            stmt = stmt.where(InterviewInstance.status.in_(list(from_statuses)))
        if exclude_status is not None:
            stmt = stmt.where(InterviewInstance.status != exclude_status)
        result = await self.session.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def store_question_snapshot(
        self, interview_id: uuid.UUID, snapshot: dict[str, Any]
    ) -> bool:
        """Store a resolved question set unless one is already stored."""
        result = await self.session.execute(
            update(InterviewInstance)
            .where(
                InterviewInstance.id == interview_id,
                InterviewInstance.question_snapshot.is_(None),
            )
            .values(question_snapshot=snapshot)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
