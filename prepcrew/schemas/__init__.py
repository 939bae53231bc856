"""Public schema exports."""

from .analysis import (
    IndustryInsightRequest,
    InterviewFeedbackRequest,
    InterviewFeedbackResult,
    InterviewMetadata,
    InterviewSummary,
    QAPair,
    ResumeCrewRequest,
)
from .crew import (
    CrewState,
    CrewStatus,
    CrewTask,
    ErrorResponse,
    KickoffAccepted,
    PollConfig,
)

__all__ = [
    "CrewState",
    "CrewStatus",
    "CrewTask",
    "ErrorResponse",
    "IndustryInsightRequest",
    "InterviewFeedbackRequest",
    "InterviewFeedbackResult",
    "InterviewMetadata",
    "InterviewSummary",
    "KickoffAccepted",
    "PollConfig",
    "QAPair",
    "ResumeCrewRequest",
]
