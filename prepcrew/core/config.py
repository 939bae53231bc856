"""
Application configuration models and helpers.

Centralizes settings management for the FastAPI app and the CLI scripts.
Every crew deployment the service talks to gets its own settings model so
base URLs, credentials and poll budgets can be tuned independently.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import ClassVar

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from prepcrew.core.logging import mask_secret
from prepcrew.schemas.crew import PollConfig

logger = logging.getLogger(__name__)

DEFAULT_RESUME_CREW_BASE = (
    "https://holistic-interview-evaluator-with-reference-ae2ff779.crewai.com"
)
DEFAULT_INTERVIEW_CREW_BASE = (
    "https://holistic-interview-evaluation-with-advanced-750b8ccd.crewai.com"
)

_BASE_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
)


class ConfigurationError(RuntimeError):
    """Raised when a crew deployment cannot be reached with current settings."""

    status_code = 500


class CrewSettings(BaseSettings):
    """Common shape for a single crew deployment."""

    model_config = SettingsConfigDict(**_BASE_CONFIG, env_prefix="CREW_")

    # Human readable name used in logs and configuration errors.
    label: ClassVar[str] = "CrewAI"

    base_url: str = ""
    api_key: str = ""
    max_attempts: int = 60
    interval_ms: int = 5000


class ResumeCrewSettings(CrewSettings):
    """Resume analysis crew."""

    base_url: str = Field(
        DEFAULT_RESUME_CREW_BASE,
        validation_alias=AliasChoices("CREWAI_RESUME_BASE_URL"),
    )
    api_key: str = Field(
        "",
        validation_alias=AliasChoices("CREWAI_API_KEY3", "CREWAI_API_KEY"),
    )
    max_attempts: int = Field(
        60,
        validation_alias=AliasChoices("CREW_POLL_MAX_ATTEMPTS"),
    )
    interval_ms: int = Field(
        5000,
        validation_alias=AliasChoices("CREW_POLL_INTERVAL_MS"),
    )


class InterviewCrewSettings(CrewSettings):
    """Interview answer evaluation crew."""

    label: ClassVar[str] = "CrewAI interview"

    base_url: str = Field(
        DEFAULT_INTERVIEW_CREW_BASE,
        validation_alias=AliasChoices("CREWAI_INTERVIEW_BASE_URL"),
    )
    api_key: str = Field(
        "",
        validation_alias=AliasChoices("CREWAI_API_KEY2", "CREWAI_API_KEY"),
    )
    max_attempts: int = Field(
        60,
        validation_alias=AliasChoices("CREW_POLL_MAX_ATTEMPTS"),
    )
    interval_ms: int = Field(
        5000,
        validation_alias=AliasChoices("CREW_POLL_INTERVAL_MS"),
    )


class InsightCrewSettings(CrewSettings):
    """Industry insight research crew; polls faster with a smaller budget."""

    label: ClassVar[str] = "CrewAI industry insight"

    base_url: str = Field(
        "",
        validation_alias=AliasChoices("CREW_AI_API_URL4"),
    )
    api_key: str = Field(
        "",
        validation_alias=AliasChoices("CREW_AI_API_KEY4", "CREW_AI_API_KEY"),
    )
    max_attempts: int = Field(
        30,
        validation_alias=AliasChoices("CREW_AI_POLL_MAX_ATTEMPTS4"),
    )
    interval_ms: int = Field(
        2000,
        validation_alias=AliasChoices("CREW_AI_POLL_INTERVAL_MS4"),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = _BASE_CONFIG

    environment: str = Field(
        "development", validation_alias=AliasChoices("APP_ENV")
    )
    log_level: str = Field(
        "INFO", validation_alias=AliasChoices("APP_LOG_LEVEL")
    )
    resume_crew: ResumeCrewSettings = Field(default_factory=ResumeCrewSettings)
    interview_crew: InterviewCrewSettings = Field(
        default_factory=InterviewCrewSettings
    )
    insight_crew: InsightCrewSettings = Field(default_factory=InsightCrewSettings)


def load_settings(env_file: str | Path | None = None) -> AppSettings:
    """Build settings, optionally reading a specific env file."""
    if env_file is None:
        return AppSettings()
    env_path = str(env_file)
    return AppSettings(
        _env_file=env_path,
        resume_crew=ResumeCrewSettings(_env_file=env_path),
        interview_crew=InterviewCrewSettings(_env_file=env_path),
        insight_crew=InsightCrewSettings(_env_file=env_path),
    )


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return load_settings()


def normalize_base_url(raw: str) -> str:
    """Strip trailing slashes and a trailing ``/kickoff`` segment."""
    url = raw.strip().rstrip("/")
    if url.endswith("/kickoff"):
        url = url[: -len("/kickoff")].rstrip("/")
    return url


def resolve_poll_config(crew: CrewSettings) -> PollConfig:
    """Turn crew settings into the immutable config threaded through clients."""
    config = PollConfig(
        base_url=normalize_base_url(crew.base_url),
        api_key=crew.api_key.strip(),
        max_attempts=crew.max_attempts,
        interval_ms=crew.interval_ms,
        label=crew.label,
    )
    logger.info(
        "Crew config resolved: label=%s base_url=%s api_key=%s",
        config.label,
        config.base_url or "<unset>",
        mask_secret(config.api_key),
    )
    return config


def require_configured(config: PollConfig) -> PollConfig:
    """Fail fast when the resolved config cannot authenticate a request."""
    if not config.api_key:
        raise ConfigurationError(f"{config.label} API key is not configured.")
    if not config.base_url:
        raise ConfigurationError(f"{config.label} base URL is not configured.")
    return config


__all__ = [
    "AppSettings",
    "ConfigurationError",
    "CrewSettings",
    "DEFAULT_INTERVIEW_CREW_BASE",
    "DEFAULT_RESUME_CREW_BASE",
    "InsightCrewSettings",
    "InterviewCrewSettings",
    "ResumeCrewSettings",
    "get_settings",
    "load_settings",
    "normalize_base_url",
    "require_configured",
    "resolve_poll_config",
]
