"""Completion scoring for submitted interviews."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from api.services.interviews.answers import CodeAnswer, FreeTextAnswer, McqAnswer

PASS_RATIO = 0.6
MIN_ANSWER_LENGTH = 10

Answer = Union[McqAnswer, FreeTextAnswer, CodeAnswer]


@dataclass(frozen=True)
class ScoreResult:
    score: int
    max_score: int
    passed: bool


class FreeTextScoringStrategy(ABC):
    """Decides whether a non-MCQ answer counts towards the score."""

    @abstractmethod
    def counts(self, answer: Answer) -> bool:
        """Return True when the answer earns its point."""


class CompletionHeuristic(FreeTextScoringStrategy):
    """
    Counts an answer when its trimmed text is longer than ten characters.

    This measures completion, not correctness.
    """

    def counts(self, answer: Answer) -> bool:
        if isinstance(answer, CodeAnswer):
            text = answer.code
        elif isinstance(answer, McqAnswer):
            text = answer.selected_option or ""
        else:
            text = answer.response
        return len(text.strip()) > MIN_ANSWER_LENGTH


class CompletionScorer:
    """Scores answers per interview type. Deterministic, no external calls."""

    def __init__(self, free_text_strategy: Optional[FreeTextScoringStrategy] = None):
        self.free_text_strategy = free_text_strategy or CompletionHeuristic()

    def score(self, interview_type: str, answers: Sequence[Answer]) -> ScoreResult:
        """
        Compute score, max score and pass flag.

        Args:
            interview_type: Interview type of the instance (``mcq``, ``behavioral``, ...)
            answers: Tagged answer records

        Returns:
            ScoreResult where max_score is the number of answers
        """
        max_score = len(answers)
        if interview_type == "mcq":
            score = sum(1 for answer in answers if self._mcq_correct(answer))
        else:
            score = sum(1 for answer in answers if self.free_text_strategy.counts(answer))

        passed = max_score > 0 and (score / max_score) >= PASS_RATIO
        return ScoreResult(score=score, max_score=max_score, passed=passed)

    @staticmethod
    def _mcq_correct(answer: Answer) -> bool:
        if not isinstance(answer, McqAnswer):
            return False
        return answer.selected_option is not None and answer.selected_option == answer.correct_option
