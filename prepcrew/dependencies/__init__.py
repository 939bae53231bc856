"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    build_crew_service,
    get_insight_crew_service,
    get_interview_crew_service,
    get_resume_crew_service,
)
from .config import get_app_settings

__all__ = [
    "build_crew_service",
    "get_app_settings",
    "get_insight_crew_service",
    "get_interview_crew_service",
    "get_resume_crew_service",
]
