"""
Interview lifecycle and auto-scheduling engine.

Components receive their collaborators through their constructors;
``build_interview_engine`` wires the production set from settings.
"""

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.services.interviews.activity import ActivityLog
from api.services.interviews.clock import ScheduleClock
from api.services.interviews.config import AutoScheduleConfig, parse_auto_schedule_config
from api.services.interviews.eligibility import EligibilityEvaluator, Eligible, Ineligible
from api.services.interviews.links import AccessLinkService
from api.services.interviews.notifications import NotificationService
from api.services.interviews.questions import QuestionSourceResolver, SqlQuestionBankService
from api.services.interviews.scheduler import InterviewScheduler, Rejected, ScheduledSet
from api.services.interviews.scoring import CompletionScorer
from api.services.interviews.state_machine import InterviewStateMachine
from core.integrations.question_generation import GeminiQuestionGenerator
from core.security import InterviewLinkSigner


@dataclass
class InterviewEngine:
    """The wired components shared by request handlers."""

    session_factory: async_sessionmaker[AsyncSession]
    scheduler: InterviewScheduler
    state_machine: InterviewStateMachine
    evaluator: EligibilityEvaluator
    default_config: AutoScheduleConfig


def build_interview_engine(
    settings: Any,
    session_factory: async_sessionmaker[AsyncSession],
    generator: Optional[GeminiQuestionGenerator] = None,
    notifications: Optional[NotificationService] = None,
    clock: Optional[ScheduleClock] = None,
) -> InterviewEngine:
    """
    Assemble the engine from settings and process-wide resources.

    Args:
        settings: Application settings
        session_factory: Session maker bound to the shared engine
        generator: AI question generator, None disables the AI tier
        notifications: Notification service, None disables emails
        clock: Clock override for tests

    Returns:
        InterviewEngine
    """
    clock = clock or ScheduleClock()
    default_config = AutoScheduleConfig.defaults_from_settings(settings)

    signer = InterviewLinkSigner(
        secret=settings.interview_link_secret,
        algorithm=settings.interview_link_algorithm,
        ttl_hours=settings.interview_link_ttl_hours,
    )
    links = AccessLinkService(
        base_url=settings.app_base_url,
        signer=signer,
        signing_enabled=settings.interview_link_signing_enabled,
    )
    resolver = QuestionSourceResolver(
        question_bank=SqlQuestionBankService(session_factory),
        generator=generator,
        timeout=settings.collaborator_timeout_seconds,
        max_retries=settings.collaborator_max_retries,
        retry_delay=settings.collaborator_retry_delay_seconds,
        now=clock.now,
    )
    evaluator = EligibilityEvaluator()

    scheduler = InterviewScheduler(
        session_factory=session_factory,
        evaluator=evaluator,
        clock=clock,
        resolver=resolver,
        links=links,
        activity=ActivityLog(session_factory),
        notifications=notifications,
        default_config=default_config,
        notification_timeout=settings.collaborator_timeout_seconds,
    )
    state_machine = InterviewStateMachine(
        session_factory=session_factory,
        links=links,
        scorer=CompletionScorer(),
        resolver=resolver,
        clock=clock,
    )
    return InterviewEngine(
        session_factory=session_factory,
        scheduler=scheduler,
        state_machine=state_machine,
        evaluator=evaluator,
        default_config=default_config,
    )


__all__ = [
    "AutoScheduleConfig",
    "Eligible",
    "Ineligible",
    "InterviewEngine",
    "InterviewScheduler",
    "InterviewStateMachine",
    "Rejected",
    "ScheduledSet",
    "build_interview_engine",
    "parse_auto_schedule_config",
]
