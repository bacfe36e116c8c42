"""Notification Service used by the scheduler."""

import logging
from typing import Any, Callable, Optional

from core.utils.datetime import to_iso

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Enqueues candidate emails on the Celery notification queue.

    Delivery happens in the worker; from the engine's point of view a
    notification succeeded once the task was accepted by the broker.
    """

    def __init__(self, enqueue: Optional[Callable[..., Any]] = None):
        if enqueue is None:
            from workers.tasks.emails import send_interview_scheduled_email

            enqueue = send_interview_scheduled_email.delay
        self._enqueue = enqueue

    def send_interview_scheduled_email(
        self,
        candidate: Any,
        job_title: str,
        score: float,
        interviews: list[dict[str, Any]],
    ) -> str:
        """
        Queue the schedule email for a candidate.

        Args:
            candidate: Candidate with ``name`` and ``email``
            job_title: Position the interviews are for
            score: Score that triggered auto-scheduling
            interviews: Per-round schedule details

        Returns:
            Celery task id
        """
        payload = [
            {**interview, "scheduled_at": to_iso(interview.get("scheduled_at"))}
            for interview in interviews
        ]
        result = self._enqueue(
            to=candidate.email,
            candidate_name=candidate.name,
            job_title=job_title,
            score=score,
            interviews=payload,
        )
        task_id = getattr(result, "id", None)
        logger.info(f"Queued interview schedule email ({len(payload)} rounds), task {task_id}")
        return task_id
