"""Email sending tasks."""

import logging
from typing import List

from celery import Task

from core.config import settings
from core.integrations.email import EmailService, EmailTemplates
from workers.celery_app import celery_app

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the SMTP server did not accept a message."""


@celery_app.task(name="workers.tasks.emails.send_interview_scheduled_email", bind=True)
def send_interview_scheduled_email(
    self: Task,
    to: str,
    candidate_name: str,
    job_title: str,
    score: float,
    interviews: List[dict],
) -> dict:
    """Send the interview schedule to a candidate.

    Args:
        to: Candidate email address
        candidate_name: Name used in the greeting
        job_title: Position the interviews are for
        score: Score that qualified the candidate
        interviews: One dict per scheduled round (see EmailTemplates.interviews_scheduled)

    Returns:
        Dictionary with send status
    """
    template = EmailTemplates.interviews_scheduled(
        candidate_name=candidate_name,
        job_title=job_title,
        score=score,
        interviews=interviews,
    )
    try:
        email_service = EmailService.from_settings(settings)
        sent = email_service.send_email(
            to_email=to,
            subject=template["subject"],
            body=template["body"],
            html=template["html"],
        )
        if not sent:
            raise EmailDeliveryError(f"SMTP delivery failed for {len(interviews)} interview(s)")
    except EmailDeliveryError as e:
        logger.warning(f"Retrying interview schedule email: {e}")
        raise self.retry(exc=e, countdown=120, max_retries=5)

    return {
        "status": "sent",
        "interviews": len(interviews),
    }
