"""
Answer records submitted by candidates.

Answers are a tagged union discriminated on ``kind``. The stored payload
carries a version so older shapes can be recognised and converted.
"""

import logging
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

logger = logging.getLogger(__name__)

ANSWERS_PAYLOAD_VERSION = 1


class _AnswerBase(BaseModel):
    question_id: str
    is_correct: Optional[bool] = None
    score: Optional[float] = None
    max_score: Optional[float] = None
    time_spent: Optional[int] = None


class McqAnswer(_AnswerBase):
    kind: Literal["mcq"] = "mcq"
    selected_option: Optional[str] = None
    correct_option: Optional[str] = None


class FreeTextAnswer(_AnswerBase):
    kind: Literal["free_text"] = "free_text"
    response: str = ""


class CodeAnswer(_AnswerBase):
    kind: Literal["code"] = "code"
    code: str = ""
    language: Optional[str] = None


AnswerRecord = Annotated[
    Union[McqAnswer, FreeTextAnswer, CodeAnswer],
    Field(discriminator="kind"),
]

_answer_list = TypeAdapter(list[AnswerRecord])


def _coerce_one(index: int, item: Any) -> dict[str, Any]:
    """Map a single legacy answer shape onto a tagged record dict."""
    fallback_id = f"q_{index + 1}"

    if isinstance(item, BaseModel):
        return item.model_dump()

    if isinstance(item, str):
        return {"kind": "free_text", "question_id": fallback_id, "response": item}

    if not isinstance(item, dict):
        return {"kind": "free_text", "question_id": fallback_id, "response": str(item)}

    if "kind" in item:
        return item

    question_id = str(item.get("question_id") or item.get("questionId") or fallback_id)
    common = {
        "question_id": question_id,
        "is_correct": item.get("isCorrect", item.get("is_correct")),
        "time_spent": item.get("timeSpent", item.get("time_spent")),
    }

    if "selectedOption" in item or "correctAnswer" in item or "selected" in item:
        selected = item.get("selectedOption", item.get("selected"))
        correct = item.get("correctAnswer", item.get("correct"))
        return {
            "kind": "mcq",
            "selected_option": None if selected is None else str(selected),
            "correct_option": None if correct is None else str(correct),
            **common,
        }

    if "code" in item:
        return {
            "kind": "code",
            "code": str(item.get("code") or ""),
            "language": item.get("language"),
            **common,
        }

    text = item.get("response", item.get("answer", item.get("text", "")))
    return {"kind": "free_text", "response": "" if text is None else str(text), **common}


def coerce_answers(raw: Any) -> list[Union[McqAnswer, FreeTextAnswer, CodeAnswer]]:
    """
    Convert submitted or stored answers into tagged records.

    Accepts tagged records, a versioned payload dict, or the legacy untagged
    shapes: plain strings become ``free_text``, dicts carrying
    ``selectedOption``/``correctAnswer`` become ``mcq`` and dicts carrying
    ``code`` become ``code``.

    Args:
        raw: Answers as received from a client or read from storage

    Returns:
        List of validated answer records
    """
    if raw is None:
        return []
    if isinstance(raw, dict):
        if "answers" in raw:
            raw = raw["answers"]
        else:
            # Legacy map of question id -> response
            raw = [
                {"question_id": str(key), **value} if isinstance(value, dict)
                else {"question_id": str(key), "response": value}
                for key, value in raw.items()
            ]
    if not isinstance(raw, list):
        raw = [raw]

    return _answer_list.validate_python([_coerce_one(i, item) for i, item in enumerate(raw)])


def build_payload(answers: list, **extra: Any) -> dict[str, Any]:
    """Wrap answer records in the versioned storage envelope."""
    return {
        "version": ANSWERS_PAYLOAD_VERSION,
        "answers": [answer.model_dump(mode="json") for answer in answers],
        **extra,
    }
