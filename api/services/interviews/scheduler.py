"""
Auto-scheduling of interview rounds.

A scheduling run reads campaign state, resolves questions outside of any
database transaction, then writes every round and the candidate's new
pipeline stage in one transaction. A concurrent run for the same candidate
trips the partial unique index on (candidate, campaign, round) and is
reported as already scheduled.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.concurrency import run_in_threadpool

from api.services.interviews.activity import (
    ACTION_AUTO_SCHEDULE_FAILED,
    ACTION_ELIGIBILITY_CHECK_FAILED,
    ACTION_INTERVIEWS_AUTO_SCHEDULED,
    ActivityLog,
)
from api.services.interviews.clock import ScheduleClock
from api.services.interviews.config import AutoScheduleConfig, parse_auto_schedule_config
from api.services.interviews.eligibility import (
    REASON_ALREADY_SCHEDULED,
    REASON_CAMPAIGN_NOT_FOUND,
    EligibilityEvaluator,
    EligibilityResult,
    Ineligible,
    format_score,
)
from api.services.interviews.errors import TransientPersistenceFailure
from api.services.interviews.links import AccessLinkService
from api.services.interviews.notifications import NotificationService
from api.services.interviews.questions import QuestionSourceResolver, RoundContext
from core.utils.datetime import to_iso
from database.models.campaigns import InterviewRoundConfig, JobCampaign
from database.models.candidates import CandidateStatus
from database.models.interviews import InterviewInstance, InterviewKind, InterviewStatus
from database.repositories import (
    CampaignRepository,
    CandidateRepository,
    InterviewRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ScheduledInterview:
    interview_id: uuid.UUID
    round_number: int
    round_name: str
    interview_type: str
    scheduled_at: datetime
    access_link: str
    question_source: str
    time_limit_minutes: int
    difficulty: Optional[str]
    question_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "interview_id": str(self.interview_id),
            "round_number": self.round_number,
            "round_name": self.round_name,
            "interview_type": self.interview_type,
            "scheduled_at": self.scheduled_at,
            "access_link": self.access_link,
            "question_source": self.question_source,
            "time_limit_minutes": self.time_limit_minutes,
            "difficulty": self.difficulty,
            "question_count": self.question_count,
        }


@dataclass
class ScheduledSet:
    candidate_id: uuid.UUID
    campaign_id: uuid.UUID
    score: float
    threshold: float
    interviews: list[ScheduledInterview]
    notification_warning: Optional[str] = None
    success: bool = field(default=True, init=False)

    @property
    def message(self) -> str:
        return (
            f"Successfully auto-scheduled {len(self.interviews)} interviews for candidate "
            f"with score {format_score(self.score)}% (threshold: {format_score(self.threshold)}%)"
        )


@dataclass
class Rejected:
    reason: str
    detail: str
    extra: dict[str, Any] = field(default_factory=dict)
    success: bool = field(default=False, init=False)


AutoScheduleResult = Union[ScheduledSet, Rejected]


class InterviewScheduler:
    """Creates one scheduled interview per campaign round, exactly once per candidate."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        evaluator: EligibilityEvaluator,
        clock: ScheduleClock,
        resolver: QuestionSourceResolver,
        links: AccessLinkService,
        activity: ActivityLog,
        notifications: Optional[NotificationService],
        default_config: AutoScheduleConfig,
        notification_timeout: float = 20.0,
    ):
        self.session_factory = session_factory
        self.evaluator = evaluator
        self.clock = clock
        self.resolver = resolver
        self.links = links
        self.activity = activity
        self.notifications = notifications
        self.default_config = default_config
        self.notification_timeout = notification_timeout

    def config_for(self, campaign: JobCampaign) -> AutoScheduleConfig:
        return parse_auto_schedule_config(campaign.auto_schedule_config, self.default_config)

    async def check_eligibility(
        self,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
        score: Optional[float] = None,
        threshold_override: Optional[float] = None,
    ) -> EligibilityResult:
        """
        Dry-run of the scheduling gate; nothing is written.

        Without a score only the candidate, existing-interview and round
        checks run.
        """
        async with self.session_factory() as session:
            campaign = await CampaignRepository(session).get(campaign_id)
            if campaign is None:
                return Ineligible(REASON_CAMPAIGN_NOT_FOUND, "Campaign not found")
            if score is None:
                return await self.evaluator.check_candidate(session, candidate_id, campaign_id)

            config = self.config_for(campaign)
            if threshold_override is not None:
                config = config.model_copy(update={"score_threshold": threshold_override})
            return await self.evaluator.evaluate(session, candidate_id, campaign_id, score, config)

    async def auto_schedule(
        self,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
        score: float,
        threshold_override: Optional[float] = None,
    ) -> AutoScheduleResult:
        """
        Auto-schedule every configured round for a candidate.

        Args:
            candidate_id: Candidate to schedule
            campaign_id: Campaign whose rounds are scheduled
            score: Candidate score (0-100) compared against the threshold
            threshold_override: Threshold used instead of the campaign's

        Returns:
            ScheduledSet on success, Rejected when the candidate is not eligible
            or another run already scheduled them

        Raises:
            TransientPersistenceFailure: If the batch could not be saved; nothing
                was written and the call may be retried
        """
        # 1. Gate
        async with self.session_factory() as session:
            campaign = await CampaignRepository(session).get(campaign_id)
            if campaign is not None:
                config = self.config_for(campaign)
                if threshold_override is not None:
                    config = config.model_copy(update={"score_threshold": threshold_override})

                eligibility = await self.evaluator.evaluate(
                    session, candidate_id, campaign_id, score, config
                )

        if campaign is None:
            rejected = Rejected(REASON_CAMPAIGN_NOT_FOUND, "Campaign not found")
            await self._record_rejection(candidate_id, campaign_id, score, None, rejected)
            return rejected

        if isinstance(eligibility, Ineligible):
            rejected = Rejected(eligibility.reason, eligibility.detail, eligibility.extra)
            await self._record_rejection(candidate_id, campaign_id, score, config, rejected)
            return rejected

        candidate = eligibility.candidate
        rounds = eligibility.rounds

        # 2. Timing
        instants = self.clock.generate(self.clock.now(), config, len(rounds))

        # 3. Content and instances
        instances: list[InterviewInstance] = []
        scheduled: list[ScheduledInterview] = []
        for round_config, scheduled_at in zip(rounds, instants):
            resolved = await self.resolver.resolve(self._round_context(campaign, round_config))
            interview_id = uuid.uuid4()
            access_link = self.links.build(interview_id, candidate.email)
            interview_type = _type_value(round_config.interview_type)

            instances.append(
                InterviewInstance(
                    id=interview_id,
                    kind=InterviewKind.CAMPAIGN,
                    candidate_id=candidate_id,
                    campaign_id=campaign_id,
                    round_config_id=round_config.id,
                    interview_type=interview_type,
                    status=InterviewStatus.SCHEDULED,
                    title=round_config.round_name,
                    time_limit_minutes=round_config.time_limit_minutes,
                    scheduled_at=scheduled_at,
                    timezone=config.timezone,
                    access_link=access_link,
                    question_snapshot=resolved.to_snapshot(),
                )
            )
            scheduled.append(
                ScheduledInterview(
                    interview_id=interview_id,
                    round_number=round_config.round_number,
                    round_name=round_config.round_name,
                    interview_type=interview_type,
                    scheduled_at=scheduled_at,
                    access_link=access_link,
                    question_source=resolved.source,
                    time_limit_minutes=round_config.time_limit_minutes,
                    difficulty=round_config.difficulty,
                    question_count=round_config.question_count,
                )
            )

        # 4 + 5. Atomic batch with the candidate stage change
        try:
            await self._persist(candidate_id, instances)
        except IntegrityError:
            logger.info(
                f"Concurrent auto-schedule detected for candidate {candidate_id} "
                f"in campaign {campaign_id}"
            )
            rejected = Rejected(REASON_ALREADY_SCHEDULED, "Interviews already scheduled")
            await self._record_rejection(candidate_id, campaign_id, score, config, rejected)
            return rejected
        except SQLAlchemyError as e:
            logger.error(f"Failed to persist scheduled interviews: {e}", exc_info=True)
            await self.activity.record(
                candidate_id,
                campaign_id,
                ACTION_AUTO_SCHEDULE_FAILED,
                {
                    "score": score,
                    "config": config.to_stored(),
                    "schedules": [to_iso(instant) for instant in instants],
                    "error": type(e).__name__,
                },
                success=False,
            )
            raise TransientPersistenceFailure() from e

        result = ScheduledSet(
            candidate_id=candidate_id,
            campaign_id=campaign_id,
            score=score,
            threshold=config.score_threshold,
            interviews=scheduled,
        )

        # 6. Best-effort notification
        if config.email_notification:
            result.notification_warning = await self._notify(candidate, campaign, score, scheduled)

        # 7. Audit
        await self.activity.record(
            candidate_id,
            campaign_id,
            ACTION_INTERVIEWS_AUTO_SCHEDULED,
            {
                "score": score,
                "scheduled_count": len(scheduled),
                "config": config.to_stored(),
                "schedules": [to_iso(item.scheduled_at) for item in scheduled],
                "question_sources": [item.question_source for item in scheduled],
                "notification_warning": result.notification_warning,
            },
            success=True,
        )
        logger.info(result.message)
        return result

    async def _persist(self, candidate_id: uuid.UUID, instances: list[InterviewInstance]) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                InterviewRepository(session).add_all(instances)
                await CandidateRepository(session).set_status(
                    candidate_id, CandidateStatus.INTERVIEW.value
                )

    async def _notify(
        self,
        candidate: Any,
        campaign: JobCampaign,
        score: float,
        scheduled: list[ScheduledInterview],
    ) -> Optional[str]:
        if self.notifications is None:
            return "Notification service is not configured"
        try:
            await asyncio.wait_for(
                run_in_threadpool(
                    self.notifications.send_interview_scheduled_email,
                    candidate,
                    campaign.job_title,
                    score,
                    [item.to_dict() for item in scheduled],
                ),
                timeout=self.notification_timeout,
            )
        except Exception as e:
            logger.warning(f"Interview schedule email could not be queued: {e!r}")
            return f"Interviews scheduled but the notification email failed: {type(e).__name__}"
        return None

    async def _record_rejection(
        self,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID,
        score: float,
        config: Optional[AutoScheduleConfig],
        rejected: Rejected,
    ) -> None:
        logger.info(
            f"Auto-schedule rejected for candidate {candidate_id}: "
            f"{rejected.reason} ({rejected.detail})"
        )
        await self.activity.record(
            candidate_id,
            campaign_id,
            ACTION_ELIGIBILITY_CHECK_FAILED,
            {
                "reason": rejected.reason,
                "detail": rejected.detail,
                "score": score,
                "config": config.to_stored() if config else None,
                **rejected.extra,
            },
            success=False,
        )

    @staticmethod
    def _round_context(campaign: JobCampaign, round_config: InterviewRoundConfig) -> RoundContext:
        return RoundContext(
            company_id=campaign.company_id,
            company_name=campaign.company_name,
            job_title=campaign.job_title,
            job_description=campaign.job_description,
            interview_type=_type_value(round_config.interview_type),
            difficulty=round_config.difficulty,
            question_count=round_config.question_count,
            question_source_id=round_config.question_source_id,
        )


def _type_value(interview_type: Any) -> str:
    return getattr(interview_type, "value", interview_type)
