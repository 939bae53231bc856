"""
FastAPI application entrypoint for the interview preparation crew gateway.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from prepcrew.api.routes import router as api_router
from prepcrew.clients import CrewError
from prepcrew.core.config import ConfigurationError, get_settings
from prepcrew.core.logging import configure_logging
from prepcrew.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_body(message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    return ErrorResponse(error=message, details=details).model_dump(exclude_none=True)


async def _crew_error_handler(
    request: Request, exc: CrewError | ConfigurationError
) -> JSONResponse:
    """Render crew and configuration failures as the uniform error body."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    upstream_status = getattr(exc, "upstream_status", None)
    details = None
    if upstream_status is not None:
        details = {"upstream_status": upstream_status}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc), details),
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400s instead of FastAPI's 422."""
    fields: List[str] = []
    problems: List[str] = []
    for error in exc.errors():
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        ) or "body"
        fields.append(location)
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    message = "Invalid request: " + "; ".join(problems)
    logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=HTTPStatus.BAD_REQUEST,
        content=_error_body(message, {"fields": fields}),
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Interview Prep Crew Gateway",
        version="0.1.0",
        description="Kicks off and tracks crew runs for resume and interview analysis.",
    )
    app.add_exception_handler(CrewError, _crew_error_handler)
    app.add_exception_handler(ConfigurationError, _crew_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
