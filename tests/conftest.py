"""Pytest configuration shared across the suite."""

import pytest

CREW_ENV_KEYS = (
    "CREWAI_RESUME_BASE_URL",
    "CREWAI_INTERVIEW_BASE_URL",
    "CREWAI_API_KEY",
    "CREWAI_API_KEY2",
    "CREWAI_API_KEY3",
    "CREW_AI_API_URL4",
    "CREW_AI_API_KEY",
    "CREW_AI_API_KEY4",
    "CREW_POLL_MAX_ATTEMPTS",
    "CREW_POLL_INTERVAL_MS",
)


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def clean_crew_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Remove crew settings from the environment and hide any local .env."""
    for key in CREW_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
