"""FastAPI dependencies for dependency injection."""

from fastapi import HTTPException, Request, status

from api.services.interviews import InterviewEngine
from api.services.interviews.scheduler import InterviewScheduler
from api.services.interviews.state_machine import InterviewStateMachine


def get_interview_engine(request: Request) -> InterviewEngine:
    """Engine wired at startup by the application lifespan."""
    engine = getattr(request.app.state, "interview_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Interview engine is not initialized",
        )
    return engine


def get_scheduler(request: Request) -> InterviewScheduler:
    return get_interview_engine(request).scheduler


def get_state_machine(request: Request) -> InterviewStateMachine:
    return get_interview_engine(request).state_machine
