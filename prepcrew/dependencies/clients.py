"""
Factory functions providing crew services as FastAPI dependencies.

Services are built per request so every request resolves its own poll
config; missing credentials fail here, before any network call.
"""

from fastapi import Depends

from prepcrew.clients import CrewClient
from prepcrew.core.config import (
    AppSettings,
    CrewSettings,
    require_configured,
    resolve_poll_config,
)
from prepcrew.dependencies.config import get_app_settings
from prepcrew.services import CrewRunService


def build_crew_service(crew: CrewSettings) -> CrewRunService:
    """Resolve, validate and wrap a crew deployment's configuration."""
    config = require_configured(resolve_poll_config(crew))
    return CrewRunService(CrewClient(config))


def get_resume_crew_service(
    settings: AppSettings = Depends(get_app_settings),
) -> CrewRunService:
    """Resume analysis crew."""
    return build_crew_service(settings.resume_crew)


def get_interview_crew_service(
    settings: AppSettings = Depends(get_app_settings),
) -> CrewRunService:
    """Interview answer evaluation crew."""
    return build_crew_service(settings.interview_crew)


def get_insight_crew_service(
    settings: AppSettings = Depends(get_app_settings),
) -> CrewRunService:
    """Industry insight crew."""
    return build_crew_service(settings.insight_crew)


__all__ = [
    "build_crew_service",
    "get_insight_crew_service",
    "get_interview_crew_service",
    "get_resume_crew_service",
]
