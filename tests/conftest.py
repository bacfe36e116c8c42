"""Shared fixtures and utilities for tests."""

import os

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("CELERY_BROKER_URL", "redis://localhost:6379/1")
os.environ.setdefault("CELERY_RESULT_BACKEND", "redis://localhost:6379/2")
os.environ.setdefault("INTERVIEW_LINK_SECRET", "test-interview-link-secret-32-chars-long")
os.environ.setdefault("APP_BASE_URL", "https://app.example.com")

import random
import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from api.services.interviews.activity import ActivityLog
from api.services.interviews.clock import ScheduleClock
from api.services.interviews.config import AutoScheduleConfig
from api.services.interviews.eligibility import EligibilityEvaluator
from api.services.interviews.links import AccessLinkService
from api.services.interviews.questions import QuestionSourceResolver, SqlQuestionBankService
from api.services.interviews.scheduler import InterviewScheduler
from api.services.interviews.scoring import CompletionScorer
from api.services.interviews.state_machine import InterviewStateMachine
from core.security import InterviewLinkSigner
from database.engine import Base, create_session_factory
from database.models import (
    Candidate,
    InterviewInstance,
    InterviewKind,
    InterviewRoundConfig,
    InterviewStatus,
    InterviewType,
    JobCampaign,
    Question,
    QuestionBank,
)

BASE_URL = "https://app.example.com"
LINK_SECRET = "test-interview-link-secret-32-chars-long"

# A Wednesday, so default delays never cross a weekend
WEDNESDAY_9AM = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


class FixedClock(ScheduleClock):
    """Clock frozen at a given instant, movable by tests."""

    def __init__(self, instant: datetime = WEDNESDAY_9AM):
        self.instant = instant
        super().__init__(now=lambda: self.instant)


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def signer():
    return InterviewLinkSigner(secret=LINK_SECRET, algorithm="HS256", ttl_hours=24)


@pytest.fixture
def links(signer):
    return AccessLinkService(base_url=BASE_URL, signer=signer, signing_enabled=True)


@pytest.fixture
def plain_links():
    """Links carrying the raw email, as with signing disabled."""
    return AccessLinkService(base_url=BASE_URL, signer=None, signing_enabled=False)


@pytest.fixture
def resolver(session_factory, clock):
    return QuestionSourceResolver(
        question_bank=SqlQuestionBankService(session_factory),
        generator=None,
        timeout=1.0,
        max_retries=0,
        retry_delay=0,
        rng=random.Random(7),
        now=clock.now,
    )


@pytest.fixture
def default_config():
    return AutoScheduleConfig()


@pytest.fixture
def notifications():
    """Notification double recording every queued email."""

    class RecordingNotifications:
        def __init__(self):
            self.sent = []

        def send_interview_scheduled_email(self, candidate, job_title, score, interviews):
            self.sent.append(
                {
                    "email": candidate.email,
                    "job_title": job_title,
                    "score": score,
                    "interviews": interviews,
                }
            )
            return "task-1"

    return RecordingNotifications()


@pytest.fixture
def scheduler(session_factory, clock, resolver, links, notifications, default_config):
    return InterviewScheduler(
        session_factory=session_factory,
        evaluator=EligibilityEvaluator(),
        clock=clock,
        resolver=resolver,
        links=links,
        activity=ActivityLog(session_factory),
        notifications=notifications,
        default_config=default_config,
        notification_timeout=1.0,
    )


@pytest.fixture
def state_machine(session_factory, clock, resolver, plain_links):
    return InterviewStateMachine(
        session_factory=session_factory,
        links=plain_links,
        scorer=CompletionScorer(),
        resolver=resolver,
        clock=clock,
    )


# ==================== Seed helpers ==================== #

class Seeder:
    """Creates committed rows for tests."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def campaign(
        self,
        rounds: list[dict] | None = None,
        auto_schedule_config: dict | None = None,
        company_id: uuid.UUID | None = None,
    ) -> JobCampaign:
        """Create a campaign with the given rounds (defaults to one behavioral round)."""
        if rounds is None:
            rounds = [{"round_name": "Behavioral", "interview_type": InterviewType.BEHAVIORAL}]

        campaign = JobCampaign(
            id=uuid.uuid4(),
            company_id=company_id or uuid.uuid4(),
            company_name="Acme",
            campaign_name="Backend hiring",
            job_title="Backend Engineer",
            job_description="Build APIs",
            auto_schedule_config=auto_schedule_config,
        )
        async with self.session_factory() as session:
            session.add(campaign)
            for number, round_def in enumerate(rounds, start=1):
                session.add(
                    InterviewRoundConfig(
                        id=uuid.uuid4(),
                        campaign_id=campaign.id,
                        round_number=round_def.get("round_number", number),
                        round_name=round_def["round_name"],
                        interview_type=round_def["interview_type"],
                        time_limit_minutes=round_def.get("time_limit_minutes", 30),
                        difficulty=round_def.get("difficulty", "medium"),
                        question_count=round_def.get("question_count", 5),
                        question_source_id=round_def.get("question_source_id"),
                    )
                )
            await session.commit()
        return campaign

    async def rounds(self, campaign_id: uuid.UUID) -> list[InterviewRoundConfig]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(InterviewRoundConfig)
                .where(InterviewRoundConfig.campaign_id == campaign_id)
                .order_by(InterviewRoundConfig.round_number)
            )
            return list(result.scalars().all())

    async def candidate(
        self,
        campaign_id: uuid.UUID,
        email: str = "ada@example.com",
        name: str = "Ada Lovelace",
    ) -> Candidate:
        candidate = Candidate(id=uuid.uuid4(), campaign_id=campaign_id, name=name, email=email)
        async with self.session_factory() as session:
            session.add(candidate)
            await session.commit()
        return candidate

    async def interview(
        self,
        candidate_id: uuid.UUID,
        campaign_id: uuid.UUID | None = None,
        round_config_id: uuid.UUID | None = None,
        status: InterviewStatus = InterviewStatus.SCHEDULED,
        interview_type: str = "behavioral",
        kind: InterviewKind = InterviewKind.CAMPAIGN,
        question_snapshot: dict | None = None,
        **values,
    ) -> InterviewInstance:
        instance = InterviewInstance(
            id=uuid.uuid4(),
            kind=kind,
            candidate_id=candidate_id,
            campaign_id=campaign_id,
            round_config_id=round_config_id,
            interview_type=interview_type,
            status=status,
            scheduled_at=WEDNESDAY_9AM,
            question_snapshot=question_snapshot,
            **values,
        )
        async with self.session_factory() as session:
            session.add(instance)
            await session.commit()
        return instance

    async def question_bank(self, company_id: uuid.UUID, questions: list[dict]) -> QuestionBank:
        """Create a bank whose questions are given as dicts with type, difficulty and payload."""
        bank = QuestionBank(id=uuid.uuid4(), company_id=company_id, name="Core questions")
        async with self.session_factory() as session:
            session.add(bank)
            for item in questions:
                session.add(
                    Question(
                        id=uuid.uuid4(),
                        bank_id=bank.id,
                        question_type=item["question_type"],
                        difficulty=item.get("difficulty", "medium"),
                        payload=item.get("payload", {"question": "Describe a project."}),
                    )
                )
            await session.commit()
        return bank

    async def reload(self, model, pk):
        async with self.session_factory() as session:
            return await session.get(model, pk)

    async def all(self, model) -> list:
        async with self.session_factory() as session:
            result = await session.execute(select(model))
            return list(result.scalars().all())


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)
