"""Service layer exports."""

from .crew_output import (
    extract_output_payload,
    is_detailed_analysis_payload,
    shape_payload_response,
    shape_status_response,
)
from .crew_poller import CrewPoller, EmptyOutputError, JobFailedError, PollTimeoutError
from .crew_runs import CrewRunService

__all__ = [
    "CrewPoller",
    "CrewRunService",
    "EmptyOutputError",
    "JobFailedError",
    "PollTimeoutError",
    "extract_output_payload",
    "is_detailed_analysis_payload",
    "shape_payload_response",
    "shape_status_response",
]
