"""
Tests for the interview schedule email.

Tests:
- Template content and HTML escaping
- Task delivery through the SMTP service
- Retry when delivery fails
"""

from unittest.mock import patch

import pytest

from core.integrations.email import EmailTemplates
from workers.tasks.emails import EmailDeliveryError, send_interview_scheduled_email

INTERVIEWS = [
    {
        "round_name": "Behavioral",
        "interview_type": "behavioral",
        "scheduled_at": "2025-01-16T10:00:00+00:00",
        "time_limit_minutes": 30,
        "difficulty": "medium",
        "question_count": 5,
        "access_link": "https://app.example.com/candidate/interview/1/lobby?email=abc",
    },
    {
        "round_name": "Coding",
        "interview_type": "coding",
        "scheduled_at": "2025-01-17T10:00:00+00:00",
        "time_limit_minutes": 60,
        "difficulty": None,
        "question_count": 3,
        "access_link": "https://app.example.com/candidate/interview/2/lobby?email=def",
    },
]


class TestInterviewsScheduledTemplate:
    """Test the schedule email template."""

    def test_lists_every_round(self):
        template = EmailTemplates.interviews_scheduled("Ada", "Backend Engineer", 87.5, INTERVIEWS)

        assert template["subject"] == "Interviews Scheduled - Backend Engineer Position"
        assert template["html"] is True
        assert "Round 1: Behavioral" in template["body"]
        assert "Round 2: Coding" in template["body"]
        assert "Thursday, January 16, 2025 at 10:00" in template["body"]
        assert "87.5%" in template["body"]
        assert 'href="https://app.example.com/candidate/interview/2/lobby?email=def"' in template["body"]

    def test_missing_difficulty_defaults_to_medium(self):
        template = EmailTemplates.interviews_scheduled("Ada", "Backend Engineer", 90, INTERVIEWS[1:])

        assert "<strong>Difficulty:</strong> medium" in template["body"]

    def test_candidate_values_are_escaped(self):
        template = EmailTemplates.interviews_scheduled(
            "<script>alert(1)</script>", "Backend Engineer", 90, INTERVIEWS
        )

        assert "<script>" not in template["body"]
        assert "&lt;script&gt;" in template["body"]


class TestSendInterviewScheduledEmail:
    """Test the Celery email task."""

    def _send(self):
        return send_interview_scheduled_email(
            to="ada@example.com",
            candidate_name="Ada",
            job_title="Backend Engineer",
            score=87.5,
            interviews=INTERVIEWS,
        )

    def test_sends_html_email(self):
        with patch("workers.tasks.emails.EmailService") as email_service:
            email_service.from_settings.return_value.send_email.return_value = True

            result = self._send()

        assert result == {"status": "sent", "interviews": 2}
        call = email_service.from_settings.return_value.send_email.call_args
        assert call.kwargs["to_email"] == "ada@example.com"
        assert call.kwargs["subject"] == "Interviews Scheduled - Backend Engineer Position"
        assert call.kwargs["html"] is True

    def test_failed_delivery_is_retried(self):
        with patch("workers.tasks.emails.EmailService") as email_service, patch(
            "celery.app.task.Task.retry", side_effect=RuntimeError("retry scheduled")
        ) as retry:
            email_service.from_settings.return_value.send_email.return_value = False

            with pytest.raises(RuntimeError, match="retry scheduled"):
                self._send()

        assert isinstance(retry.call_args.kwargs["exc"], EmailDeliveryError)
        assert retry.call_args.kwargs["countdown"] == 120
        assert retry.call_args.kwargs["max_retries"] == 5
