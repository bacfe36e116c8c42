from database.models.campaigns import InterviewRoundConfig, InterviewType, JobCampaign
from database.models.candidates import Candidate, CandidateStatus
from database.models.interviews import InterviewInstance, InterviewKind, InterviewStatus
from database.models.questions import Question, QuestionBank
from database.models.audit import AutoScheduleActivity

__all__ = [
    "AutoScheduleActivity",
    "Candidate",
    "CandidateStatus",
    "InterviewInstance",
    "InterviewKind",
    "InterviewRoundConfig",
    "InterviewStatus",
    "InterviewType",
    "JobCampaign",
    "Question",
    "QuestionBank",
]
