"""
FastAPI routes for the interview preparation crew gateway.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from prepcrew.dependencies import (
    get_insight_crew_service,
    get_interview_crew_service,
    get_resume_crew_service,
)
from prepcrew.schemas import (
    ErrorResponse,
    IndustryInsightRequest,
    InterviewFeedbackRequest,
    InterviewFeedbackResult,
    KickoffAccepted,
    ResumeCrewRequest,
)
from prepcrew.services import CrewRunService

router = APIRouter()
logger = logging.getLogger(__name__)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/resume-crew", status_code=HTTPStatus.OK)
async def submit_resume_analysis(
    payload: ResumeCrewRequest,
    service: Annotated[CrewRunService, Depends(get_resume_crew_service)],
    wait: bool = Query(
        default=False,
        description="When true, block until the run finishes and return its output.",
    ),
) -> Any:
    """Start a resume analysis run.

    By default the kickoff id is returned immediately so the browser can poll
    the status endpoint. With ``wait=true`` the request is held open until the
    run is terminal.
    """
    if payload.missing_fields():
        return _bad_request(
            "resume_text, target_role, and job_posting_url are required."
        )

    if wait:
        result = await service.run_shaped(payload.to_inputs())
        return {"success": True, **result}

    kickoff_id = await service.submit(payload.to_inputs())
    return KickoffAccepted(kickoff_id=kickoff_id)


@router.get("/resume-crew/{kickoff_id}", status_code=HTTPStatus.OK)
async def get_resume_analysis_status(
    kickoff_id: str,
    service: Annotated[CrewRunService, Depends(get_resume_crew_service)],
) -> Any:
    """Report the state of a resume analysis run."""
    if not kickoff_id.strip():
        return _bad_request("kickoffId param is required.")
    return await service.snapshot(kickoff_id.strip())


@router.post("/crew/kickoff", status_code=HTTPStatus.OK)
async def evaluate_interview(
    payload: InterviewFeedbackRequest,
    service: Annotated[CrewRunService, Depends(get_interview_crew_service)],
) -> Any:
    """Evaluate interview answers and wait for the crew's feedback."""
    if (
        not payload.session_id.strip()
        or payload.metadata is None
        or payload.interview_summary is None
    ):
        return _bad_request(
            "Missing required fields: sessionId, metadata, qaPairs, or interviewSummary"
        )
    if not payload.qa_pairs:
        return _bad_request("qaPairs must be a non-empty array")

    logger.info(
        "Interview evaluation requested: session=%s questions=%d topic=%s",
        payload.session_id,
        len(payload.qa_pairs),
        payload.metadata.topic,
    )
    _, analysis = await service.run(payload.to_inputs())
    return InterviewFeedbackResult(data=analysis, session_id=payload.session_id)


@router.post("/industry-insight", status_code=HTTPStatus.OK)
async def request_industry_insight(
    payload: IndustryInsightRequest,
    service: Annotated[CrewRunService, Depends(get_insight_crew_service)],
) -> Any:
    """Research a role's market and wait for the crew's report."""
    if not payload.target_role.strip():
        return _bad_request("targetRole is required")
    _, insight = await service.run(payload.to_inputs())
    return insight


@router.get("/industry-insight", status_code=HTTPStatus.OK)
async def get_industry_insight_status(
    service: Annotated[CrewRunService, Depends(get_insight_crew_service)],
    kickoff_id: str | None = Query(default=None, alias="kickoffId"),
) -> Any:
    """Report the state of an industry insight run."""
    if not kickoff_id or not kickoff_id.strip():
        return _bad_request("Missing kickoffId")
    return await service.snapshot(kickoff_id.strip())


__all__ = ["router"]
