"""
Question resolution for interview rounds.

Questions come from the first usable source in a fixed cascade:

1. the round's question bank collection
2. AI generation
3. a single static question

Resolution never raises and never returns an empty set. A lower tier is
reported through the ``source`` tag only.
"""

import logging
import random
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.services.interviews.errors import InvalidCollectionId
from core.integrations.question_generation import (
    GeminiQuestionGenerator,
    GenerationContext,
    normalize_interview_type,
)
from core.utils import datetime as dt_utils
from core.utils.retry import retry_async
from database.models.questions import Question, QuestionBank

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

SOURCE_QUESTION_BANK = "question_bank"
SOURCE_AI_FALLBACK = "ai_fallback"
SOURCE_DEFAULT_FALLBACK = "default_fallback"

DEFAULT_QUESTION_COUNT = 5


def is_valid_collection_id(value: Optional[str]) -> bool:
    return bool(value) and bool(UUID_PATTERN.match(value))


# ==================== Question Bank interface ===================== #
class QuestionBankService(ABC):
    """Company-scoped access to curated question collections."""

    @abstractmethod
    async def fetch_questions(
        self,
        company_id: Any,
        collection_id: str,
        question_type: str,
        difficulty: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Return every matching question of the collection."""


# ==================== Resolved sets ===================== #
@dataclass
class RoundContext:
    """What the resolver needs to know about a round and its campaign."""

    company_id: Any
    company_name: str
    job_title: str
    interview_type: str
    job_description: Optional[str] = None
    difficulty: Optional[str] = None
    question_count: int = DEFAULT_QUESTION_COUNT
    question_source_id: Optional[str] = None


@dataclass
class ResolvedQuestionSet:
    questions: List[Dict[str, Any]]
    source: str
    resolved_at: datetime = field(default_factory=dt_utils.now)

    def to_snapshot(self) -> Dict[str, Any]:
        return {
            "questions": self.questions,
            "source": self.source,
            "resolved_at": dt_utils.to_iso(self.resolved_at),
        }

    @classmethod
    def from_snapshot(cls, snapshot: Dict[str, Any]) -> "ResolvedQuestionSet":
        resolved_at = snapshot.get("resolved_at")
        return cls(
            questions=list(snapshot.get("questions") or []),
            source=snapshot.get("source", SOURCE_DEFAULT_FALLBACK),
            resolved_at=datetime.fromisoformat(resolved_at) if resolved_at else dt_utils.now(),
        )


def default_question(interview_type: str) -> Dict[str, Any]:
    """The static last-resort question."""
    return {
        "id": "fallback_1",
        "question": f"Tell me about your experience with {interview_type} related work.",
        "expectedAnswer": "Look for relevant experience and specific examples.",
        "questionType": interview_type,
        "category": "General",
        "difficultyLevel": "medium",
    }


# ==================== Question Bank Service ===================== #
class SqlQuestionBankService(QuestionBankService):
    """Question bank lookups against the ``questions`` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def fetch_questions(
        self,
        company_id: Any,
        collection_id: str,
        question_type: str,
        difficulty: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch all questions of a company's collection matching type and difficulty.

        Raises:
            InvalidCollectionId: If ``collection_id`` is not UUID-shaped; no
                query is issued in that case
        """
        if not is_valid_collection_id(collection_id):
            raise InvalidCollectionId(f"Invalid question bank id format: {collection_id!r}")

        query = (
            select(Question)
            .join(QuestionBank, Question.bank_id == QuestionBank.id)
            .where(
                QuestionBank.id == uuid.UUID(collection_id),
                QuestionBank.company_id == company_id,
                Question.question_type == question_type,
            )
        )
        if difficulty:
            query = query.where(Question.difficulty == difficulty)

        async with self.session_factory() as session:
            result = await session.execute(query)
            rows = result.scalars().all()

        return [
            {
                **(row.payload or {}),
                "id": str(row.id),
                "questionType": row.question_type,
                "difficultyLevel": row.difficulty,
            }
            for row in rows
        ]


# ==================== Resolver ===================== #
class QuestionSourceResolver:
    """Resolves a non-empty question set for a round through the fallback cascade."""

    def __init__(
        self,
        question_bank: QuestionBankService,
        generator: Optional[GeminiQuestionGenerator] = None,
        timeout: float = 20.0,
        max_retries: int = 2,
        retry_delay: float = 0.5,
        rng: Optional[random.Random] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.question_bank = question_bank
        self.generator = generator
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.rng = rng or random.Random()
        self._now = now or dt_utils.now

    async def resolve(self, context: RoundContext) -> ResolvedQuestionSet:
        """
        Resolve questions for one round.

        Args:
            context: Round and campaign details

        Returns:
            A non-empty ResolvedQuestionSet tagged with the tier that produced it
        """
        questions = await self._from_question_bank(context)
        if questions:
            return ResolvedQuestionSet(questions, SOURCE_QUESTION_BANK, self._now())

        questions = await self._from_generator(context)
        if questions:
            return ResolvedQuestionSet(questions, SOURCE_AI_FALLBACK, self._now())

        logger.warning(
            f"Using default fallback question for {context.interview_type} round "
            f"of '{context.job_title}'"
        )
        return ResolvedQuestionSet(
            [default_question(context.interview_type)], SOURCE_DEFAULT_FALLBACK, self._now()
        )

    async def _from_question_bank(self, context: RoundContext) -> List[Dict[str, Any]]:
        collection_id = context.question_source_id
        if not collection_id:
            logger.info("No question bank configured for round, skipping bank tier")
            return []
        if not is_valid_collection_id(collection_id):
            logger.warning(f"Invalid question bank id format: {collection_id!r}, skipping bank tier")
            return []

        try:
            questions = await retry_async(
                lambda: self.question_bank.fetch_questions(
                    context.company_id,
                    collection_id,
                    context.interview_type,
                    context.difficulty,
                ),
                max_retries=self.max_retries,
                initial_delay=self.retry_delay,
                timeout=self.timeout,
                operation="question bank fetch",
            )
        except InvalidCollectionId as e:
            logger.warning(f"Question bank rejected collection id: {e.message}")
            return []
        except Exception as e:
            logger.warning(f"Question bank unavailable for {collection_id}: {e!r}")
            return []

        if not questions:
            logger.warning(f"Question bank {collection_id} has no matching questions")
            return []

        count = context.question_count if context.question_count > 0 else DEFAULT_QUESTION_COUNT
        selected = self.rng.sample(questions, min(count, len(questions)))
        logger.info(f"Resolved {len(selected)} questions from question bank {collection_id}")
        return selected

    async def _from_generator(self, context: RoundContext) -> List[Dict[str, Any]]:
        if self.generator is None:
            logger.info("No question generator configured, skipping AI tier")
            return []

        generation_context = GenerationContext(
            job_title=context.job_title,
            company_name=context.company_name,
            job_description=context.job_description,
            interview_type=normalize_interview_type(context.interview_type),
            difficulty=context.difficulty or "medium",
            count=context.question_count or DEFAULT_QUESTION_COUNT,
        )
        try:
            questions = await retry_async(
                lambda: self.generator.generate(generation_context),
                max_retries=self.max_retries,
                initial_delay=self.retry_delay,
                timeout=self.timeout,
                operation="question generation",
            )
        except Exception as e:
            logger.warning(f"AI question generation failed: {e!r}")
            return []

        if not questions:
            logger.warning("AI question generation returned no questions")
            return []

        logger.info(f"Resolved {len(questions)} questions from AI fallback")
        return questions
