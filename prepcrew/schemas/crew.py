"""
Pydantic models describing the crew orchestration service wire format.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CrewState:
    """Run states reported by the orchestration service.

    The vocabulary is not closed upstream; unknown values are treated as
    still in progress.
    """

    STARTED = "STARTED"
    RUNNING = "RUNNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    TERMINAL = frozenset({SUCCESS, FAILED})


class PollConfig(BaseModel):
    """Immutable per-request settings for talking to one crew deployment."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str
    max_attempts: int = Field(60, ge=1)
    interval_ms: int = Field(5000, ge=0)
    label: str = "CrewAI"

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000


class CrewTask(BaseModel):
    """Subset of the last executed task we care about."""

    model_config = ConfigDict(extra="ignore")

    output: Any = None


class CrewStatus(BaseModel):
    """Parsed body of ``GET /status/{kickoff_id}``."""

    model_config = ConfigDict(extra="ignore")

    state: str
    last_executed_task: Optional[CrewTask] = None

    @property
    def last_output(self) -> Any:
        if self.last_executed_task is None:
            return None
        return self.last_executed_task.output

    @property
    def is_terminal(self) -> bool:
        return self.state in CrewState.TERMINAL


class KickoffAccepted(BaseModel):
    """Response returned when a run is submitted without waiting."""

    success: bool = True
    kickoff_id: str
    status: str = CrewState.STARTED


class ErrorResponse(BaseModel):
    """Uniform error envelope for failed requests."""

    success: bool = False
    error: str
    details: Optional[Dict[str, Any]] = None


__all__ = [
    "CrewState",
    "CrewStatus",
    "CrewTask",
    "ErrorResponse",
    "KickoffAccepted",
    "PollConfig",
]
