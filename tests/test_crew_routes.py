try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json
from contextlib import asynccontextmanager

import httpx
import pytest

from prepcrew.clients import CrewClient
from prepcrew.core.config import AppSettings
from prepcrew.main import app
from prepcrew.schemas.crew import PollConfig
from prepcrew.services import CrewRunService


class FakeCrew:
    """In-memory stand-in for a crew deployment behind a MockTransport."""

    def __init__(self, *states: dict, kickoff_id: str = "abc123") -> None:
        self.kickoff_id = kickoff_id
        self.states = list(states) or [{"state": "RUNNING"}]
        self.kickoff_bodies: list[dict] = []
        self.status_calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/kickoff"):
            self.kickoff_bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"kickoff_id": self.kickoff_id})
        self.status_calls += 1
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        return httpx.Response(200, json=state)


async def _no_sleep(_: float) -> None:
    return None


def _service(crew: FakeCrew, max_attempts: int = 5) -> CrewRunService:
    config = PollConfig(
        base_url="https://crew.example.com",
        api_key="test-key",
        max_attempts=max_attempts,
        interval_ms=0,
    )
    return CrewRunService(
        CrewClient(config, transport=httpx.MockTransport(crew)), sleep=_no_sleep
    )


@asynccontextmanager
async def _client(**overrides):
    from prepcrew import dependencies

    app.dependency_overrides.clear()
    for name, factory in overrides.items():
        app.dependency_overrides[getattr(dependencies, name)] = factory
    try:
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://testserver",
        ) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


pytestmark = pytest.mark.anyio

RESUME_BODY = {
    "resume_text": "Seven years of Python",
    "target_role": "Backend Engineer",
    "job_posting_url": "https://jobs.example.com/1",
}


async def test_health() -> None:
    async with _client() as client:
        response = await client.get("/api/health")
    assert response.json() == {"status": "ok"}


async def test_resume_submit_returns_kickoff_id() -> None:
    crew = FakeCrew()
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.post("/api/resume-crew", json=RESUME_BODY)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "kickoff_id": "abc123",
        "status": "STARTED",
    }
    assert crew.kickoff_bodies == [{"inputs": RESUME_BODY}]
    assert crew.status_calls == 0


async def test_resume_submit_requires_all_fields() -> None:
    crew = FakeCrew()
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.post(
            "/api/resume-crew", json={**RESUME_BODY, "target_role": "  "}
        )

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "resume_text, target_role, and job_posting_url are required.",
    }
    assert crew.kickoff_bodies == []


async def test_resume_submit_wait_returns_detailed_analysis() -> None:
    output = '```json\n{"analysis_metadata": {"model": "x"}, "resume_analysis": {"score": 82},}\n```'
    crew = FakeCrew(
        {"state": "RUNNING"},
        {"state": "SUCCESS", "last_executed_task": {"output": output}},
    )
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.post(
            "/api/resume-crew", params={"wait": "true"}, json=RESUME_BODY
        )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "kickoff_id": "abc123",
        "status": "SUCCESS",
        "analysis_metadata": {"model": "x"},
        "resume_analysis": {"score": 82},
    }
    assert crew.status_calls == 2


async def test_resume_status_nests_plain_payload() -> None:
    crew = FakeCrew(
        {"state": "SUCCESS", "last_executed_task": {"output": {"summary": "ok"}}}
    )
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.get("/api/resume-crew/abc123")

    assert response.json() == {
        "kickoff_id": "abc123",
        "status": "SUCCESS",
        "analysis": {"summary": "ok"},
    }


async def test_resume_status_while_running() -> None:
    crew = FakeCrew({"state": "RUNNING"})
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.get("/api/resume-crew/abc123")

    assert response.json() == {"kickoff_id": "abc123", "status": "RUNNING"}


async def test_failed_run_surfaces_error_body() -> None:
    crew = FakeCrew({"state": "FAILED"})
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.post(
            "/api/resume-crew", params={"wait": "true"}, json=RESUME_BODY
        )

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "CrewAI run failed"}


async def test_poll_timeout_surfaces_error_body() -> None:
    crew = FakeCrew({"state": "RUNNING"})
    async with _client(
        get_resume_crew_service=lambda: _service(crew, max_attempts=2)
    ) as client:
        response = await client.post(
            "/api/resume-crew", params={"wait": "true"}, json=RESUME_BODY
        )

    assert response.status_code == 500
    assert response.json()["error"] == "CrewAI run timed out"
    assert crew.status_calls == 2


async def test_missing_api_key_is_a_configuration_error(clean_crew_env) -> None:
    settings = AppSettings()
    async with _client(get_app_settings=lambda: settings) as client:
        response = await client.post("/api/resume-crew", json=RESUME_BODY)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "CrewAI API key is not configured.",
    }


async def test_interview_feedback_waits_for_result() -> None:
    crew = FakeCrew(
        {"state": "STARTED"},
        {
            "state": "SUCCESS",
            "last_executed_task": {"output": '{"overall_performance": {"score": 7}}'},
        },
    )
    body = {
        "sessionId": "session-1",
        "metadata": {
            "topic": "System design",
            "difficulty": "medium",
            "expected_keywords": ["cache", "queue"],
        },
        "qaPairs": [{"question": "How would you scale X?", "answer": "Add a cache"}],
        "interviewSummary": {
            "totalQuestions": 1,
            "topic": "System design",
            "difficulty": "medium",
            "expectedKeywords": ["cache", "queue"],
        },
    }
    async with _client(get_interview_crew_service=lambda: _service(crew)) as client:
        response = await client.post("/api/crew/kickoff", json=body)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"overall_performance": {"score": 7}},
        "session_id": "session-1",
        "message": "Interview analysis completed successfully",
    }
    assert crew.kickoff_bodies[0]["inputs"]["interview_data"] == {
        "topic": "System design",
        "difficulty": "medium",
        "expected_keywords": ["cache", "queue"],
        "questions_and_answers": [
            {"question": "How would you scale X?", "answer": "Add a cache"}
        ],
    }


async def test_interview_feedback_requires_answers() -> None:
    crew = FakeCrew()
    body = {
        "sessionId": "session-1",
        "metadata": {"topic": "t", "difficulty": "easy", "expected_keywords": []},
        "qaPairs": [],
        "interviewSummary": {"totalQuestions": 0},
    }
    async with _client(get_interview_crew_service=lambda: _service(crew)) as client:
        response = await client.post("/api/crew/kickoff", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "qaPairs must be a non-empty array"


async def test_industry_insight_round_trip() -> None:
    crew = FakeCrew(
        {
            "state": "SUCCESS",
            "last_executed_task": {
                "output": 'Report follows: {"industry": "Cloud Developer", "advice": "Get certified"}'
            },
        }
    )
    async with _client(get_insight_crew_service=lambda: _service(crew)) as client:
        submitted = await client.post(
            "/api/industry-insight", json={"targetRole": "Cloud Developer"}
        )
        status = await client.get(
            "/api/industry-insight", params={"kickoffId": "abc123"}
        )
        missing = await client.get("/api/industry-insight")

    assert submitted.json() == {"industry": "Cloud Developer", "advice": "Get certified"}
    assert crew.kickoff_bodies == [{"inputs": {"job_title": "Cloud Developer"}}]
    assert status.json()["analysis"] == {
        "industry": "Cloud Developer",
        "advice": "Get certified",
    }
    assert missing.status_code == 400


async def test_null_text_field_is_a_bad_request() -> None:
    crew = FakeCrew()
    async with _client(get_resume_crew_service=lambda: _service(crew)) as client:
        response = await client.post(
            "/api/resume-crew", json={**RESUME_BODY, "resume_text": None}
        )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request: resume_text:")
    assert body["details"] == {"fields": ["resume_text"]}
    assert crew.kickoff_bodies == []


async def test_missing_body_is_a_bad_request() -> None:
    crew = FakeCrew()
    async with _client(get_insight_crew_service=lambda: _service(crew)) as client:
        response = await client.post("/api/industry-insight")

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid request: body:")
    assert body["details"] == {"fields": ["body"]}
    assert crew.kickoff_bodies == []


async def test_rejected_kickoff_reports_upstream_status() -> None:
    def reject(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="invalid token")

    config = PollConfig(base_url="https://crew.example.com", api_key="bad-key")
    service = CrewRunService(CrewClient(config, transport=httpx.MockTransport(reject)))
    async with _client(get_resume_crew_service=lambda: service) as client:
        response = await client.post("/api/resume-crew", json=RESUME_BODY)

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "CrewAI kickoff failed (401): invalid token",
        "details": {"upstream_status": 401},
    }
