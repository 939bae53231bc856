"""Client for the crew orchestration service (kickoff and status endpoints)."""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from prepcrew.schemas.crew import CrewStatus, PollConfig
from prepcrew.utils.http import (
    DEFAULT_TIMEOUT,
    bearer_headers,
    join_url,
    response_excerpt,
)

logger = logging.getLogger(__name__)


class CrewError(RuntimeError):
    """Base class for failures talking to or reported by a crew deployment."""

    status_code = 500


class KickoffError(CrewError):
    """Raised when the kickoff request is rejected or cannot be sent."""

    def __init__(self, upstream_status: int | None, body: str = "") -> None:
        self.upstream_status = upstream_status
        self.body = body
        if upstream_status is None:
            message = f"CrewAI kickoff failed: {body}"
        else:
            message = f"CrewAI kickoff failed ({upstream_status}): {body}"
        super().__init__(message)


class MissingHandleError(CrewError):
    """Raised when a kickoff succeeds without returning a ``kickoff_id``."""

    def __init__(self) -> None:
        super().__init__("CrewAI did not return a kickoff_id")


class StatusCheckError(CrewError):
    """Raised when a single status request fails."""

    def __init__(self, upstream_status: int | None, reason: str = "") -> None:
        self.upstream_status = upstream_status
        if upstream_status is not None:
            message = f"Status check failed ({upstream_status})"
        else:
            message = f"Status check failed: {reason or 'no response'}"
        super().__init__(message)


class CrewClient:
    """Submit runs to and read run status from one crew deployment.

    Each call performs exactly one HTTP round trip; retrying is left to the
    caller.
    """

    def __init__(
        self,
        config: PollConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: httpx.Timeout | float = DEFAULT_TIMEOUT,
    ) -> None:
        self._config = config
        self._transport = transport
        self._timeout = timeout

    @property
    def config(self) -> PollConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    async def kickoff(self, inputs: Mapping[str, Any]) -> str:
        """Start a run and return its kickoff id."""
        url = join_url(self._config.base_url, "kickoff")
        logger.info("Kicking off %s run at %s", self._config.label, url)

        try:
            async with self._client() as client:
                response = await client.post(
                    url,
                    json={"inputs": dict(inputs)},
                    headers=bearer_headers(self._config.api_key, json_body=True),
                )
        except httpx.HTTPError as exc:
            logger.error("%s kickoff transport error: %s", self._config.label, exc)
            raise KickoffError(None, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            body = response_excerpt(response)
            logger.error(
                "%s kickoff rejected (%s): %s",
                self._config.label,
                response.status_code,
                body,
            )
            raise KickoffError(response.status_code, body)

        try:
            payload = response.json()
        except ValueError as exc:
            raise KickoffError(
                response.status_code, response_excerpt(response)
            ) from exc

        kickoff_id = payload.get("kickoff_id") if isinstance(payload, dict) else None
        if not kickoff_id:
            raise MissingHandleError()

        kickoff_id = str(kickoff_id)
        logger.info("%s run started: kickoff_id=%s", self._config.label, kickoff_id)
        return kickoff_id

    async def fetch_status(self, kickoff_id: str) -> CrewStatus:
        """Read the current state of a run."""
        url = join_url(self._config.base_url, "status", quote(kickoff_id, safe=""))

        try:
            async with self._client() as client:
                response = await client.get(
                    url, headers=bearer_headers(self._config.api_key)
                )
        except httpx.HTTPError as exc:
            raise StatusCheckError(None, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            logger.warning(
                "%s status check for %s failed (%s)",
                self._config.label,
                kickoff_id,
                response.status_code,
            )
            raise StatusCheckError(response.status_code)

        try:
            return CrewStatus.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise StatusCheckError(None, "malformed status payload") from exc


__all__ = [
    "CrewClient",
    "CrewError",
    "KickoffError",
    "MissingHandleError",
    "StatusCheckError",
]
