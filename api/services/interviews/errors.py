"""Exceptions raised by the interview engine.

Expected outcomes (ineligible candidates, rejected scheduling runs, degraded
question sources, failed emails) are returned as values, not raised.
"""

from typing import Optional


class InterviewEngineError(Exception):
    """Base class for interview engine errors."""

    code = "INTERVIEW_ERROR"
    status_code = 400
    default_message = "Interview operation failed"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class InterviewNotFound(InterviewEngineError):
    code = "INTERVIEW_NOT_FOUND"
    status_code = 404
    default_message = "Interview not found"


class InterviewAccessDenied(InterviewEngineError):
    code = "INTERVIEW_ACCESS_DENIED"
    status_code = 403
    default_message = "You don't have access to this interview"


class InvalidTransition(InterviewEngineError):
    code = "INVALID_TRANSITION"
    status_code = 409
    default_message = "Interview is not in a state that allows this action"


class AlreadyCompleted(InvalidTransition):
    """A completed interview can be neither restarted nor resubmitted."""

    code = "ALREADY_COMPLETED"
    default_message = "Interview has already been completed and cannot be resubmitted"


class TransientPersistenceFailure(InterviewEngineError):
    """The scheduling batch was rolled back; the whole call may be retried."""

    code = "TRANSIENT_FAILURE"
    status_code = 503
    default_message = "Interviews could not be saved, please retry"


class InvalidCollectionId(InterviewEngineError):
    code = "INVALID_COLLECTION_ID"
    default_message = "Question collection id is not a valid UUID"


class InvalidAnswers(InterviewEngineError):
    code = "INVALID_ANSWERS"
    status_code = 422
    default_message = "Submitted answers could not be read"
