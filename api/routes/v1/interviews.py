"""
Interview scheduling and candidate lifecycle endpoints.

Recruiter-side: eligibility dry runs, auto-scheduling and statistics.
Candidate-side: the interview lobby flow, authorized by the credential
carried in the access link's ``email`` parameter.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Body, Path

from api.dependencies import get_interview_engine, get_scheduler, get_state_machine
from api.schemas.common import ERROR_RESPONSES, ErrorResponse
from api.schemas.interviews import (
    AnswersRequest,
    AutoScheduleRequest,
    AutoScheduleResponse,
    AutoScheduleStatsResponse,
    CandidateCredential,
    EligibilityResponse,
    SaveProgressResponse,
    StartResponse,
    SubmitResponse,
)
from api.services.interviews import InterviewEngine
from api.services.interviews.eligibility import Ineligible
from api.services.interviews.scheduler import InterviewScheduler, Rejected
from api.services.interviews.state_machine import InterviewStateMachine
from api.services.interviews.stats import get_auto_schedule_stats
from core.utils.datetime import to_iso

router = APIRouter(prefix="/interviews", tags=["interviews"])


# ==================== Scheduling ===================== #
@router.get(
    "/eligibility",
    response_model=EligibilityResponse,
    summary="Check Auto-Schedule Eligibility",
    description=(
        "Dry-run the auto-scheduling gate. Without a score only the candidate, "
        "existing-interview and round checks run."
    ),
)
async def check_eligibility(
    candidate_id: uuid.UUID = Query(..., description="Candidate to check"),
    campaign_id: uuid.UUID = Query(..., description="Campaign to schedule for"),
    score: Optional[float] = Query(None, ge=0, le=100, description="Candidate score (0-100)"),
    threshold: Optional[float] = Query(None, ge=0, le=100, description="Threshold override"),
    scheduler: InterviewScheduler = Depends(get_scheduler),
):
    """Report whether the candidate would be auto-scheduled."""
    result = await scheduler.check_eligibility(candidate_id, campaign_id, score, threshold)
    if isinstance(result, Ineligible):
        return EligibilityResponse(
            eligible=False,
            reason=result.reason,
            message=result.detail,
            details=result.extra,
        )
    return EligibilityResponse(
        eligible=True,
        message="Candidate is eligible for auto-scheduling",
        rounds=len(result.rounds),
    )


@router.post(
    "/schedule/auto",
    response_model=AutoScheduleResponse,
    summary="Auto-Schedule Interviews",
    description=(
        "Schedule every configured round for a candidate whose score meets the "
        "campaign threshold. Rejections are returned with success=false."
    ),
    responses={503: {"model": ErrorResponse, "description": "Transient failure, safe to retry"}},
)
async def auto_schedule(
    request: AutoScheduleRequest = Body(...),
    scheduler: InterviewScheduler = Depends(get_scheduler),
):
    """Create the candidate's interview rounds."""
    result = await scheduler.auto_schedule(
        candidate_id=request.candidate_id,
        campaign_id=request.campaign_id,
        score=request.score,
        threshold_override=request.threshold,
    )
    if isinstance(result, Rejected):
        return AutoScheduleResponse(
            success=False,
            message=result.detail,
            reason=result.reason,
            details=result.extra,
        )
    return AutoScheduleResponse(
        success=True,
        message=result.message,
        interviews=[item.to_dict() for item in result.interviews],
        notification_warning=result.notification_warning,
    )


@router.get(
    "/campaigns/{campaign_id}/auto-schedule/stats",
    response_model=AutoScheduleStatsResponse,
    summary="Auto-Schedule Statistics",
)
async def auto_schedule_stats(
    campaign_id: uuid.UUID = Path(..., description="Campaign ID"),
    engine: InterviewEngine = Depends(get_interview_engine),
):
    """Share of the campaign's candidates with at least one interview."""
    return await get_auto_schedule_stats(engine.session_factory, campaign_id)


# ==================== Candidate lifecycle ===================== #
@router.get(
    "/candidate",
    summary="List Candidate Interviews",
    responses=ERROR_RESPONSES,
)
async def list_candidate_interviews(
    email: str = Query(..., min_length=1, description="Email or signed token from the access link"),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """All live interviews of the candidate, ordered by scheduled time."""
    states = await state_machine.list_for_candidate(email)
    return {"interviews": [state.to_dict() for state in states], "total": len(states)}


@router.get(
    "/{interview_id}",
    summary="Get Interview",
    description="Interview state and its question set, without answer keys.",
    responses=ERROR_RESPONSES,
)
async def get_interview(
    interview_id: uuid.UUID = Path(..., description="Interview ID"),
    email: str = Query(..., min_length=1, description="Email or signed token from the access link"),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """Retrieve an interview for the candidate holding its link."""
    state = await state_machine.get(interview_id, email)
    return state.to_dict()


@router.post(
    "/{interview_id}/start",
    response_model=StartResponse,
    summary="Start Interview",
    responses=ERROR_RESPONSES,
)
async def start_interview(
    interview_id: uuid.UUID = Path(..., description="Interview ID"),
    request: CandidateCredential = Body(...),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """Move a scheduled interview to in progress; repeated starts are no-ops."""
    result = await state_machine.start(interview_id, request.email)
    return StartResponse(
        interview_id=str(result.interview_id),
        status=result.status,
        started_at=to_iso(result.started_at),
        already_started=result.already_started,
    )


@router.post(
    "/{interview_id}/save-progress",
    response_model=SaveProgressResponse,
    summary="Save Interview Progress",
    responses=ERROR_RESPONSES,
)
async def save_progress(
    interview_id: uuid.UUID = Path(..., description="Interview ID"),
    request: AnswersRequest = Body(...),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """Replace the saved partial answers of an in-progress interview."""
    saved_at = await state_machine.save_progress(
        interview_id, request.email, request.answers, request.time_spent
    )
    return SaveProgressResponse(interview_id=str(interview_id), saved_at=to_iso(saved_at))


@router.post(
    "/{interview_id}/submit",
    response_model=SubmitResponse,
    summary="Submit Interview",
    responses=ERROR_RESPONSES,
)
async def submit_interview(
    interview_id: uuid.UUID = Path(..., description="Interview ID"),
    request: AnswersRequest = Body(...),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """Score and complete the interview. A second submit is rejected with 409."""
    result = await state_machine.submit(
        interview_id, request.email, request.answers, request.time_spent
    )
    return SubmitResponse(
        interview_id=str(result.interview_id),
        score=result.score,
        max_score=result.max_score,
        passed=result.passed,
        completed_at=to_iso(result.completed_at),
        duration_seconds=result.duration_seconds,
    )


@router.get(
    "/{interview_id}/results",
    summary="Get Interview Results",
    responses=ERROR_RESPONSES,
)
async def get_results(
    interview_id: uuid.UUID = Path(..., description="Interview ID"),
    email: str = Query(..., min_length=1, description="Email or signed token from the access link"),
    state_machine: InterviewStateMachine = Depends(get_state_machine),
):
    """Frozen answers and summary of a completed interview."""
    return await state_machine.get_results(interview_id, email)
