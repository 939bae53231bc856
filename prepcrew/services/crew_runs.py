"""
Service combining the crew client and poller for request handlers.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from prepcrew.clients.crew import CrewClient
from prepcrew.schemas.crew import CrewState
from prepcrew.services.crew_output import shape_payload_response, shape_status_response
from prepcrew.services.crew_poller import CrewPoller, Sleeper, StatusObserver

logger = logging.getLogger(__name__)


class CrewRunService:
    """Submit crew runs and follow them to completion."""

    def __init__(
        self,
        client: CrewClient,
        *,
        sleep: Optional[Sleeper] = None,
        on_status: Optional[StatusObserver] = None,
    ) -> None:
        self._client = client
        self._sleep = sleep
        self._on_status = on_status

    @property
    def label(self) -> str:
        return self._client.config.label

    def _poller(self) -> CrewPoller:
        kwargs: Dict[str, Any] = {"on_status": self._on_status}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return CrewPoller.from_config(
            self._client.fetch_status, self._client.config, **kwargs
        )

    async def submit(self, inputs: Mapping[str, Any]) -> str:
        """Kick off a run and return its id without waiting."""
        return await self._client.kickoff(inputs)

    async def wait(self, kickoff_id: str) -> Dict[str, Any]:
        """Poll an existing run until it is terminal."""
        return await self._poller().poll(kickoff_id)

    async def run(self, inputs: Mapping[str, Any]) -> tuple[str, Dict[str, Any]]:
        """Kick off a run and block until its output is available."""
        kickoff_id = await self.submit(inputs)
        payload = await self.wait(kickoff_id)
        return kickoff_id, payload

    async def run_shaped(self, inputs: Mapping[str, Any]) -> Dict[str, Any]:
        """Run to completion and shape the output like the status endpoint."""
        kickoff_id, payload = await self.run(inputs)
        return shape_payload_response(kickoff_id, CrewState.SUCCESS, payload)

    async def snapshot(self, kickoff_id: str) -> Dict[str, Any]:
        """Single status check shaped for the UI."""
        status = await self._client.fetch_status(kickoff_id)
        return shape_status_response(kickoff_id, status)


__all__ = ["CrewRunService"]
