"""
Per-kind translation of interview instances into one common view.

Direct, coding and campaign interviews are stored in the same table but
historically described themselves differently: campaign interviews take
their title and limits from the round configuration, coding interviews
default to an hour, direct interviews to half an hour.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from database.models.campaigns import InterviewRoundConfig, JobCampaign
from database.models.interviews import InterviewInstance, InterviewKind

DIRECT_DEFAULT_MINUTES = 30
CODING_DEFAULT_MINUTES = 60


@dataclass
class InterviewView:
    kind: str
    title: str
    description: Optional[str]
    interview_type: str
    duration_minutes: int
    question_count: int
    difficulty: Optional[str] = None
    round_number: Optional[int] = None
    job_title: Optional[str] = None
    company_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "description": self.description,
            "interview_type": self.interview_type,
            "duration_minutes": self.duration_minutes,
            "question_count": self.question_count,
            "difficulty": self.difficulty,
            "round_number": self.round_number,
            "job_title": self.job_title,
            "company_name": self.company_name,
        }


def _snapshot_count(instance: InterviewInstance) -> int:
    snapshot = instance.question_snapshot or {}
    return len(snapshot.get("questions") or [])


def adapt_campaign(
    instance: InterviewInstance,
    round_config: Optional[InterviewRoundConfig],
    campaign: Optional[JobCampaign],
) -> InterviewView:
    round_name = round_config.round_name if round_config else None
    job_title = campaign.job_title if campaign else None
    title = instance.title or round_name or f"{instance.interview_type.title()} Interview"
    if job_title and round_name:
        title = f"{round_name} - {job_title}"

    return InterviewView(
        kind=InterviewKind.CAMPAIGN.value,
        title=title,
        description=campaign.job_description if campaign else instance.description,
        interview_type=instance.interview_type,
        duration_minutes=(
            round_config.time_limit_minutes if round_config
            else instance.time_limit_minutes or DIRECT_DEFAULT_MINUTES
        ),
        question_count=_snapshot_count(instance) or (round_config.question_count if round_config else 0),
        difficulty=round_config.difficulty if round_config else None,
        round_number=round_config.round_number if round_config else None,
        job_title=job_title,
        company_name=campaign.company_name if campaign else None,
    )


def adapt_coding(instance: InterviewInstance, *_: Any) -> InterviewView:
    return InterviewView(
        kind=InterviewKind.CODING.value,
        title=instance.title or "Coding Interview",
        description=instance.description,
        interview_type=instance.interview_type or "coding",
        duration_minutes=instance.time_limit_minutes or CODING_DEFAULT_MINUTES,
        question_count=_snapshot_count(instance),
    )


def adapt_direct(instance: InterviewInstance, *_: Any) -> InterviewView:
    return InterviewView(
        kind=InterviewKind.DIRECT.value,
        title=instance.title or f"{(instance.interview_type or 'behavioral').title()} Interview",
        description=instance.description,
        interview_type=instance.interview_type or "behavioral",
        duration_minutes=instance.time_limit_minutes or DIRECT_DEFAULT_MINUTES,
        question_count=_snapshot_count(instance),
    )


ADAPTERS: dict[InterviewKind, Callable[..., InterviewView]] = {
    InterviewKind.CAMPAIGN: adapt_campaign,
    InterviewKind.CODING: adapt_coding,
    InterviewKind.DIRECT: adapt_direct,
}


def to_view(
    instance: InterviewInstance,
    round_config: Optional[InterviewRoundConfig] = None,
    campaign: Optional[JobCampaign] = None,
) -> InterviewView:
    """Describe any interview instance in the common shape."""
    return ADAPTERS[InterviewKind(instance.kind)](instance, round_config, campaign)
