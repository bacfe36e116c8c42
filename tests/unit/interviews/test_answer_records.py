"""
Tests for answer coercion and the versioned answers payload.
"""

import pytest
from pydantic import ValidationError

from api.services.interviews.answers import (
    ANSWERS_PAYLOAD_VERSION,
    CodeAnswer,
    FreeTextAnswer,
    McqAnswer,
    build_payload,
    coerce_answers,
)


class TestCoerceAnswers:
    """Legacy and tagged answer shapes."""

    def test_none_is_empty(self):
        assert coerce_answers(None) == []

    def test_plain_strings_become_free_text(self):
        records = coerce_answers(["I led a migration", "Second answer"])

        assert all(isinstance(record, FreeTextAnswer) for record in records)
        assert [record.question_id for record in records] == ["q_1", "q_2"]
        assert records[0].response == "I led a migration"

    def test_mcq_shape(self):
        records = coerce_answers([
            {"questionId": "ai_1", "selectedOption": "B", "correctAnswer": "B", "timeSpent": 12},
        ])

        record = records[0]
        assert isinstance(record, McqAnswer)
        assert record.question_id == "ai_1"
        assert record.selected_option == "B"
        assert record.correct_option == "B"
        assert record.time_spent == 12

    def test_numeric_options_are_strings(self):
        record = coerce_answers([{"selected": 2, "correctAnswer": 2}])[0]
        assert record.selected_option == "2"
        assert record.correct_option == "2"

    def test_code_shape(self):
        record = coerce_answers([{"code": "print('hi')", "language": "python"}])[0]

        assert isinstance(record, CodeAnswer)
        assert record.code == "print('hi')"
        assert record.language == "python"

    def test_dict_with_answer_text(self):
        record = coerce_answers([{"question_id": "q9", "answer": "Because"}])[0]

        assert isinstance(record, FreeTextAnswer)
        assert record.question_id == "q9"
        assert record.response == "Because"

    def test_tagged_records_pass_through(self):
        records = coerce_answers([
            {"kind": "free_text", "question_id": "a", "response": "text"},
            {"kind": "mcq", "question_id": "b", "selected_option": "A"},
            {"kind": "code", "question_id": "c", "code": "x = 1"},
        ])

        assert [type(record) for record in records] == [FreeTextAnswer, McqAnswer, CodeAnswer]

    def test_versioned_payload(self):
        payload = build_payload([FreeTextAnswer(question_id="a", response="hello")])
        records = coerce_answers(payload)

        assert records == [FreeTextAnswer(question_id="a", response="hello")]

    def test_legacy_map_of_responses(self):
        records = coerce_answers({"q1": "first", "q2": {"selectedOption": "C"}})

        assert records[0] == FreeTextAnswer(question_id="q1", response="first")
        assert isinstance(records[1], McqAnswer)
        assert records[1].question_id == "q2"

    def test_single_value_is_wrapped(self):
        records = coerce_answers("only answer")
        assert len(records) == 1
        assert records[0].response == "only answer"

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            coerce_answers([{"kind": "essay", "question_id": "a"}])


class TestBuildPayload:
    def test_envelope(self):
        payload = build_payload(
            [McqAnswer(question_id="a", selected_option="B")],
            submitted_at="2025-01-15T10:00:00+00:00",
            score=1,
        )

        assert payload["version"] == ANSWERS_PAYLOAD_VERSION
        assert payload["submitted_at"] == "2025-01-15T10:00:00+00:00"
        assert payload["score"] == 1
        assert payload["answers"][0]["kind"] == "mcq"
        assert payload["answers"][0]["selected_option"] == "B"
