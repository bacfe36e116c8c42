"""Eligibility gate for auto-scheduling."""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Union

from sqlalchemy.ext.asyncio import AsyncSession

from api.services.interviews.config import AutoScheduleConfig
from database.models.campaigns import InterviewRoundConfig
from database.models.candidates import Candidate
from database.repositories import (
    CandidateRepository,
    InterviewRepository,
    RoundConfigRepository,
)

logger = logging.getLogger(__name__)

REASON_DISABLED = "auto_scheduling_disabled"
REASON_BELOW_THRESHOLD = "below_threshold"
REASON_CANDIDATE_NOT_FOUND = "candidate_not_found"
REASON_ALREADY_SCHEDULED = "already_scheduled"
REASON_NO_ROUNDS = "no_rounds"
REASON_CAMPAIGN_NOT_FOUND = "campaign_not_found"


@dataclass
class Eligible:
    candidate: Candidate
    rounds: list[InterviewRoundConfig]
    eligible: bool = field(default=True, init=False)


@dataclass
class Ineligible:
    reason: str
    detail: str
    extra: dict[str, Any] = field(default_factory=dict)
    eligible: bool = field(default=False, init=False)


EligibilityResult = Union[Eligible, Ineligible]


def format_score(value: float) -> str:
    """Render 85.0 as '85' and 85.5 as '85.5'."""
    return f"{value:g}"


class EligibilityEvaluator:
    """
    Decides whether a candidate may be auto-scheduled for a campaign.

    Checks run in a fixed order and the first failing one is reported.
    """

    async def evaluate(
        self,
        session: AsyncSession,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
        score: float,
        config: AutoScheduleConfig,
    ) -> EligibilityResult:
        """
        Run the full gate: configuration, threshold, then campaign state.

        Args:
            session: Session the lookups run in
            candidate_id: Candidate to check
            campaign_id: Campaign to schedule for
            score: Candidate score (0-100)
            config: Parsed campaign configuration

        Returns:
            Eligible with rounds sorted by round number, or Ineligible
        """
        if not config.enabled:
            return Ineligible(REASON_DISABLED, "Auto-scheduling is disabled for this campaign")

        if score < config.score_threshold:
            return Ineligible(
                REASON_BELOW_THRESHOLD,
                f"Score {format_score(score)}% is below threshold "
                f"{format_score(config.score_threshold)}%",
                {"score": score, "threshold": config.score_threshold},
            )

        return await self.check_candidate(session, candidate_id, campaign_id)

    async def check_candidate(
        self,
        session: AsyncSession,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
    ) -> EligibilityResult:
        """Run only the candidate, existing-interview and round checks."""
        candidate = await CandidateRepository(session).get_in_campaign(candidate_id, campaign_id)
        if candidate is None:
            return Ineligible(
                REASON_CANDIDATE_NOT_FOUND,
                "Candidate not found or not associated with campaign",
            )

        existing = await InterviewRepository(session).count_live_for_candidate(
            candidate_id, campaign_id
        )
        if existing > 0:
            return Ineligible(
                REASON_ALREADY_SCHEDULED,
                "Interviews already scheduled",
                {"existing_interviews": existing},
            )

        rounds = await RoundConfigRepository(session).list_for_campaign(campaign_id)
        if not rounds:
            return Ineligible(REASON_NO_ROUNDS, "No interview setups configured for campaign")

        return Eligible(candidate=candidate, rounds=sorted(rounds, key=lambda r: r.round_number))
