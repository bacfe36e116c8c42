"""
Lifecycle of a single interview instance.

    scheduled -> in_progress -> completed

Every transition is a conditional UPDATE whose WHERE clause carries the
status guard, so concurrent callers are serialized by the database: the
first writer wins and the others observe the state it left behind.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.services.interviews.adapters import InterviewView, to_view
from api.services.interviews.answers import build_payload, coerce_answers, McqAnswer
from api.services.interviews.clock import ScheduleClock
from api.services.interviews.errors import (
    AlreadyCompleted,
    InterviewAccessDenied,
    InterviewNotFound,
    InvalidAnswers,
    InvalidTransition,
)
from api.services.interviews.links import AccessLinkService
from api.services.interviews.questions import (
    QuestionSourceResolver,
    ResolvedQuestionSet,
    RoundContext,
)
from api.services.interviews.scoring import CompletionScorer
from core.utils.datetime import ensure_utc, to_iso
from database.models.campaigns import InterviewRoundConfig, JobCampaign
from database.models.interviews import InterviewInstance, InterviewStatus
from database.repositories import (
    CampaignRepository,
    CandidateRepository,
    InterviewRepository,
    RoundConfigRepository,
)

logger = logging.getLogger(__name__)

# Keys never sent to candidates
HIDDEN_QUESTION_KEYS = ("correctAnswer", "expectedAnswer")


@dataclass
class InterviewState:
    """Candidate-facing snapshot of an interview."""

    id: uuid.UUID
    kind: str
    status: str
    view: InterviewView
    scheduled_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    score: Optional[int] = None
    max_score: Optional[int] = None
    passed: Optional[bool] = None
    question_source: Optional[str] = None
    questions: Optional[list[dict[str, Any]]] = None
    saved_answers: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "kind": self.kind,
            "status": self.status,
            **self.view.to_dict(),
            "scheduled_at": to_iso(self.scheduled_at),
            "started_at": to_iso(self.started_at),
            "completed_at": to_iso(self.completed_at),
            "duration_seconds": self.duration_seconds,
            "score": self.score,
            "max_score": self.max_score,
            "passed": self.passed,
            "question_source": self.question_source,
            "questions": self.questions,
            "saved_answers": self.saved_answers,
        }


@dataclass
class StartResult:
    interview_id: uuid.UUID
    status: str
    started_at: Optional[datetime]
    already_started: bool


@dataclass
class SubmitResult:
    interview_id: uuid.UUID
    score: int
    max_score: int
    passed: bool
    completed_at: datetime
    duration_seconds: int


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


class InterviewStateMachine:
    """Start, save-progress, submit and read operations for one interview."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        links: AccessLinkService,
        scorer: CompletionScorer,
        resolver: QuestionSourceResolver,
        clock: Optional[ScheduleClock] = None,
    ):
        self.session_factory = session_factory
        self.links = links
        self.scorer = scorer
        self.resolver = resolver
        self.clock = clock or ScheduleClock()

    # ==================== Transitions ===================== #
    async def start(self, interview_id: uuid.UUID, credential: Optional[str]) -> StartResult:
        """
        Move a scheduled interview to in_progress.

        Starting an interview that is already in progress returns it unchanged.

        Raises:
            AlreadyCompleted: If the interview was completed
        """
        started_at = self.clock.now()
        async with self.session_factory() as session:
            repo = InterviewRepository(session)
            await self._load_authorized(session, interview_id, credential)

            changed = await repo.transition(
                interview_id,
                {"status": InterviewStatus.IN_PROGRESS, "started_at": started_at},
                from_statuses=[InterviewStatus.SCHEDULED],
            )
            await session.commit()
            if changed:
                logger.info(f"Interview {interview_id} started")
                return StartResult(interview_id, InterviewStatus.IN_PROGRESS.value, started_at, False)

            current = await repo.get(interview_id)
            if current.status == InterviewStatus.COMPLETED:
                raise AlreadyCompleted("Interview has already been completed and cannot be restarted")

            return StartResult(
                interview_id,
                _status_value(current.status),
                ensure_utc(current.started_at),
                True,
            )

    async def save_progress(
        self,
        interview_id: uuid.UUID,
        credential: Optional[str],
        answers: Any,
        time_spent: int,
    ) -> datetime:
        """
        Replace the saved partial answers and elapsed time.

        Returns:
            The time the progress was saved

        Raises:
            AlreadyCompleted: If the interview was completed
            InvalidTransition: If the interview has not been started
        """
        records = self._coerce(answers)
        saved_at = self.clock.now()
        payload = build_payload(records, saved_at=to_iso(saved_at), time_spent=time_spent)

        async with self.session_factory() as session:
            repo = InterviewRepository(session)
            await self._load_authorized(session, interview_id, credential)

            changed = await repo.transition(
                interview_id,
                {"answers_payload": payload, "duration_seconds": time_spent},
                from_statuses=[InterviewStatus.IN_PROGRESS],
            )
            await session.commit()
            if changed:
                return saved_at

            current = await repo.get(interview_id)
            if current.status == InterviewStatus.COMPLETED:
                raise AlreadyCompleted()
            raise InvalidTransition("Interview must be started before progress can be saved")

    async def submit(
        self,
        interview_id: uuid.UUID,
        credential: Optional[str],
        answers: Any,
        time_spent: int,
    ) -> SubmitResult:
        """
        Score and freeze the answers, completing the interview.

        ``time_spent`` is stored as reported by the client.

        Raises:
            AlreadyCompleted: If the interview was already completed, including
                by a concurrent submit that won the race
        """
        records = self._coerce(answers)

        async with self.session_factory() as session:
            repo = InterviewRepository(session)
            instance = await self._load_authorized(session, interview_id, credential)
            if instance.status == InterviewStatus.COMPLETED:
                raise AlreadyCompleted()

            records = _attach_answer_keys(records, instance.question_snapshot)
            result = self.scorer.score(instance.interview_type, records)
            completed_at = self.clock.now()
            payload = build_payload(
                records,
                submitted_at=to_iso(completed_at),
                interview_type=instance.interview_type,
                time_spent=time_spent,
                score=result.score,
                max_score=result.max_score,
            )

            changed = await repo.transition(
                interview_id,
                {
                    "status": InterviewStatus.COMPLETED,
                    "completed_at": completed_at,
                    "duration_seconds": time_spent,
                    "score": result.score,
                    "max_score": result.max_score,
                    "passed": result.passed,
                    "answers_payload": payload,
                },
                exclude_status=InterviewStatus.COMPLETED,
            )
            if not changed:
                await session.rollback()
                raise AlreadyCompleted()
            await session.commit()

        logger.info(
            f"Interview {interview_id} submitted: {result.score}/{result.max_score} "
            f"(passed={result.passed})"
        )
        return SubmitResult(
            interview_id=interview_id,
            score=result.score,
            max_score=result.max_score,
            passed=result.passed,
            completed_at=completed_at,
            duration_seconds=time_spent,
        )

    # ==================== Reads ===================== #
    async def get(self, interview_id: uuid.UUID, credential: Optional[str]) -> InterviewState:
        """
        Current state and question set of an interview.

        A missing question set is resolved on first fetch and stored; if two
        fetches race, the first stored set is kept and returned to both.
        """
        async with self.session_factory() as session:
            instance = await self._load_authorized(session, interview_id, credential)
            round_config, campaign = await self._load_context(session, instance)

        snapshot = instance.question_snapshot
        if not snapshot:
            resolved = await self.resolver.resolve(self._round_context(instance, round_config, campaign))
            async with self.session_factory() as session:
                repo = InterviewRepository(session)
                stored = await repo.store_question_snapshot(interview_id, resolved.to_snapshot())
                await session.commit()
                if stored:
                    logger.info(
                        f"Resolved questions for interview {interview_id} from {resolved.source}"
                    )
                instance = await repo.get(interview_id)
            snapshot = instance.question_snapshot

        question_set = ResolvedQuestionSet.from_snapshot(snapshot)
        state = self._state(instance, round_config, campaign)
        state.question_source = question_set.source
        state.questions = [_candidate_question(q) for q in question_set.questions]
        if instance.status == InterviewStatus.IN_PROGRESS and instance.answers_payload:
            state.saved_answers = list(instance.answers_payload.get("answers") or [])
        return state

    async def get_results(self, interview_id: uuid.UUID, credential: Optional[str]) -> dict[str, Any]:
        """
        Frozen answers and summary of a completed interview.

        Raises:
            InvalidTransition: If the interview is not completed yet
        """
        async with self.session_factory() as session:
            instance = await self._load_authorized(session, interview_id, credential)
            round_config, campaign = await self._load_context(session, instance)

        if instance.status != InterviewStatus.COMPLETED:
            raise InvalidTransition("Interview has not been completed yet")

        payload = instance.answers_payload or {}
        answers = list(payload.get("answers") or [])
        questions = (instance.question_snapshot or {}).get("questions") or []
        total_questions = len(questions) or len(answers)
        answered = len(answers)

        return {
            "interview": self._state(instance, round_config, campaign).to_dict(),
            "answers": answers,
            "summary": {
                "total_questions": total_questions,
                "answered": answered,
                "score": instance.score,
                "max_score": instance.max_score,
                "passed": instance.passed,
                "completion_rate": round(answered / total_questions * 100) if total_questions else 0,
                "time_spent": instance.duration_seconds,
                "submitted_at": payload.get("submitted_at"),
            },
        }

    async def list_for_candidate(self, credential: Optional[str]) -> list[InterviewState]:
        """All live interviews of the candidate behind ``credential``, by scheduled time."""
        email = self.links.resolve_email(credential)

        async with self.session_factory() as session:
            candidates = await CandidateRepository(session).list_by_email(email)
            instances = await InterviewRepository(session).list_for_candidates(
                [candidate.id for candidate in candidates]
            )
            states = []
            for instance in instances:
                round_config, campaign = await self._load_context(session, instance)
                states.append(self._state(instance, round_config, campaign))
        return states

    # ==================== Helpers ===================== #
    async def _load_authorized(
        self,
        session: AsyncSession,
        interview_id: uuid.UUID,
        credential: Optional[str],
    ) -> InterviewInstance:
        email = self.links.resolve_email(credential, interview_id)

        instance = await InterviewRepository(session).get(interview_id)
        if instance is None:
            raise InterviewNotFound()

        candidate = await CandidateRepository(session).get(instance.candidate_id)
        if candidate is None or candidate.email.strip().lower() != email.strip().lower():
            logger.warning(f"Credential mismatch for interview {interview_id}")
            raise InterviewAccessDenied()
        return instance

    async def _load_context(
        self, session: AsyncSession, instance: InterviewInstance
    ) -> tuple[Optional[InterviewRoundConfig], Optional[JobCampaign]]:
        round_config = None
        campaign = None
        if instance.round_config_id:
            round_config = await RoundConfigRepository(session).get(instance.round_config_id)
        if instance.campaign_id:
            campaign = await CampaignRepository(session).get(instance.campaign_id)
        return round_config, campaign

    @staticmethod
    def _round_context(
        instance: InterviewInstance,
        round_config: Optional[InterviewRoundConfig],
        campaign: Optional[JobCampaign],
    ) -> RoundContext:
        return RoundContext(
            company_id=campaign.company_id if campaign else None,
            company_name=campaign.company_name if campaign else "",
            job_title=campaign.job_title if campaign else (instance.title or ""),
            job_description=campaign.job_description if campaign else instance.description,
            interview_type=instance.interview_type,
            difficulty=round_config.difficulty if round_config else None,
            question_count=round_config.question_count if round_config else 5,
            question_source_id=round_config.question_source_id if round_config else None,
        )

    @staticmethod
    def _state(
        instance: InterviewInstance,
        round_config: Optional[InterviewRoundConfig],
        campaign: Optional[JobCampaign],
    ) -> InterviewState:
        return InterviewState(
            id=instance.id,
            kind=_status_value(instance.kind),
            status=_status_value(instance.status),
            view=to_view(instance, round_config, campaign),
            scheduled_at=ensure_utc(instance.scheduled_at),
            started_at=ensure_utc(instance.started_at),
            completed_at=ensure_utc(instance.completed_at),
            duration_seconds=instance.duration_seconds,
            score=instance.score,
            max_score=instance.max_score,
            passed=instance.passed,
        )

    @staticmethod
    def _coerce(answers: Any) -> list:
        try:
            return coerce_answers(answers)
        except ValidationError as e:
            raise InvalidAnswers(f"Submitted answers could not be read ({e.error_count()} errors)") from e


def _candidate_question(question: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in question.items() if key not in HIDDEN_QUESTION_KEYS}


def _attach_answer_keys(records: list, snapshot: Optional[dict[str, Any]]) -> list:
    """Take MCQ correct options from the stored question set when it has them."""
    keys = {
        str(question.get("id")): question.get("correctAnswer")
        for question in (snapshot or {}).get("questions") or []
        if question.get("correctAnswer") is not None
    }
    if not keys:
        return records
    return [
        record.model_copy(update={"correct_option": str(keys[record.question_id])})
        if isinstance(record, McqAnswer) and record.question_id in keys
        else record
        for record in records
    ]
