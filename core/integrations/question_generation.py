"""
Question generation through Google Gemini.

Used as the fallback question source when a round has no usable question
bank. Model output is parsed tolerantly since it frequently arrives wrapped
in markdown code fences or with surrounding prose.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTION = """You are an experienced technical recruiter who writes interview questions.

Return ONLY a JSON array. Each element must be an object with these keys:
- "question": the question text
- "expectedAnswer": what a strong answer covers
- "questionType": the interview type
- "category": a short topic label
- "difficultyLevel": "easy", "medium" or "hard"

For "mcq" interviews also include "options" (a list of four strings) and
"correctAnswer" (the exact text of the correct option).
Do not add commentary before or after the array."""


class QuestionGenerationError(Exception):
    """Raised when the model returns no usable questions."""


@dataclass
class GenerationContext:
    """Role and round context sent to the model."""

    job_title: str
    company_name: str
    interview_type: str
    job_description: Optional[str] = None
    difficulty: str = "medium"
    count: int = 5

    def to_prompt(self) -> str:
        lines = [
            f"Generate {self.count} {self.difficulty} {self.interview_type} interview questions.",
            f"Role: {self.job_title}",
            f"Company: {self.company_name}",
        ]
        if self.job_description:
            lines.append(f"Job description:\n{self.job_description}")
        return "\n".join(lines)


def normalize_interview_type(interview_type: Optional[str]) -> str:
    """Map legacy type names onto ones the generator understands."""
    if not interview_type or interview_type == "technical":
        return "behavioral"
    return interview_type


def parse_question_list(text: Optional[str]) -> List[Dict[str, Any]]:
    """
    Extract a JSON array of questions from model output.

    Strips code-fence markers, trims, and keeps the text between the first
    ``[`` and the last ``]``.

    Args:
        text: Raw model response

    Returns:
        Non-empty list of question dicts, each with an ``id``

    Raises:
        QuestionGenerationError: If no non-empty array can be parsed
    """
    if not text:
        raise QuestionGenerationError("Empty response from question generator")

    cleaned = text.replace("```json", "").replace("```", "").strip()
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end <= start:
        raise QuestionGenerationError("No JSON array found in generator response")

    try:
        parsed = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise QuestionGenerationError(f"Generator returned invalid JSON: {e}") from e

    questions = [item for item in parsed if isinstance(item, dict)] if isinstance(parsed, list) else []
    if not questions:
        raise QuestionGenerationError("Generator returned no questions")

    for index, question in enumerate(questions, start=1):
        question.setdefault("id", f"ai_{index}")
    return questions


class GeminiQuestionGenerator:
    """Question Generation Service backed by the Gemini API."""

    def __init__(self, client: genai.Client, model: str = "gemini-2.0-flash"):
        """
        Args:
            client: Shared genai client created at process start
            model: Gemini model name
        """
        self.client = client
        self.model = model

    async def generate(self, context: GenerationContext) -> List[Dict[str, Any]]:
        """Generate questions for a round. Raises on transport or parse failure."""
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=context.to_prompt(),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
            ),
        )
        questions = parse_question_list(response.text)
        logger.info(
            f"Generated {len(questions)} {context.interview_type} questions "
            f"for '{context.job_title}'"
        )
        return questions[: context.count] if context.count > 0 else questions
