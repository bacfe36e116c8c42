"""Interview scheduling and lifecycle schemas."""

import uuid
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    """Accepts both snake_case names and the camelCase aliases browsers send."""

    model_config = ConfigDict(populate_by_name=True)


class AutoScheduleRequest(CamelModel):
    """Request to auto-schedule every round of a campaign for a candidate."""

    candidate_id: uuid.UUID = Field(alias="candidateId", description="Candidate to schedule")
    campaign_id: uuid.UUID = Field(alias="campaignId", description="Campaign whose rounds are scheduled")
    score: float = Field(
        alias="resumeScore", ge=0, le=100, description="Candidate score (0-100)"
    )
    threshold: Optional[float] = Field(
        None,
        alias="scoreThreshold",
        ge=0,
        le=100,
        description="Overrides the campaign's score threshold",
    )


class CandidateCredential(CamelModel):
    """Body of candidate-side transitions; ``email`` carries the link credential."""

    email: str = Field(min_length=1, max_length=2048, description="Email or signed link token")

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class AnswersRequest(CandidateCredential):
    """Answers with elapsed time, used by save-progress and submit."""

    answers: Any = Field(default_factory=list, description="Answer records, versioned payload or legacy map")
    time_spent: int = Field(0, alias="timeSpent", ge=0, description="Elapsed seconds reported by the client")


class ScheduledInterviewResponse(BaseModel):
    interview_id: str
    round_number: int
    round_name: str
    interview_type: str
    scheduled_at: datetime
    access_link: str
    question_source: str
    time_limit_minutes: int
    difficulty: Optional[str] = None
    question_count: int


class AutoScheduleResponse(BaseModel):
    """Outcome of an auto-schedule request; rejections are not errors."""

    success: bool
    message: str
    reason: Optional[str] = None
    details: dict[str, Any] = Field(default_factory=dict)
    interviews: list[ScheduledInterviewResponse] = Field(default_factory=list)
    notification_warning: Optional[str] = None


class EligibilityResponse(BaseModel):
    eligible: bool
    reason: Optional[str] = None
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    rounds: int = 0


class AutoScheduleStatsResponse(BaseModel):
    campaign_id: str
    total_candidates: int
    candidates_with_interviews: int
    auto_schedule_rate: float


class StartResponse(BaseModel):
    interview_id: str
    status: str
    started_at: Optional[str] = None
    already_started: bool


class SaveProgressResponse(BaseModel):
    interview_id: str
    saved_at: str


class SubmitResponse(BaseModel):
    interview_id: str
    status: str = "completed"
    score: int
    max_score: int
    passed: bool
    completed_at: str
    duration_seconds: int
