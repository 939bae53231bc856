"""
Poll a crew run until it finishes and extract its final output.

The loop is a small state machine over the reported run state:

* ``SUCCESS`` ends the loop and returns the extracted task output.
* ``FAILED`` ends the loop with :class:`JobFailedError`.
* anything else (``STARTED``, ``RUNNING`` or an unknown state) waits one
  interval and checks again.

Running out of attempts raises :class:`PollTimeoutError`. A failed status
request is not retried; it propagates from the loop as-is.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional

from prepcrew.clients.crew import CrewError
from prepcrew.schemas.crew import CrewState, CrewStatus, PollConfig
from prepcrew.services.crew_output import extract_output_payload, has_output

logger = logging.getLogger(__name__)

StatusFetcher = Callable[[str], Awaitable[CrewStatus]]
Sleeper = Callable[[float], Awaitable[Any]]
StatusObserver = Callable[[int, CrewStatus], Any]


class JobFailedError(CrewError):
    """The crew reported that the run failed."""

    def __init__(self, kickoff_id: str) -> None:
        self.kickoff_id = kickoff_id
        super().__init__("CrewAI run failed")


class PollTimeoutError(CrewError):
    """The run did not finish within the attempt budget."""

    def __init__(self, kickoff_id: str, attempts: int) -> None:
        self.kickoff_id = kickoff_id
        self.attempts = attempts
        super().__init__("CrewAI run timed out")


class EmptyOutputError(CrewError):
    """The run reported success without any task output."""

    def __init__(self, kickoff_id: str) -> None:
        self.kickoff_id = kickoff_id
        super().__init__("CrewAI finished without output payload")


class CrewPoller:
    """Drive status checks for a single run at a fixed interval.

    There is no sleep after the final attempt, so a timed out run makes
    ``max_attempts`` status checks and ``max_attempts - 1`` sleeps. The wall
    clock budget is therefore ``(max_attempts - 1) * interval_seconds`` plus
    request time.
    """

    def __init__(
        self,
        fetch_status: StatusFetcher,
        *,
        max_attempts: int = 60,
        interval_seconds: float = 5.0,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        extractor: Callable[[Any], Dict[str, Any]] = extract_output_payload,
        on_status: Optional[StatusObserver] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._fetch_status = fetch_status
        self._max_attempts = max_attempts
        self._interval_seconds = interval_seconds
        self._sleep = sleep
        self._clock = clock
        self._extractor = extractor
        self._on_status = on_status

    @classmethod
    def from_config(
        cls, fetch_status: StatusFetcher, config: PollConfig, **kwargs: Any
    ) -> "CrewPoller":
        return cls(
            fetch_status,
            max_attempts=config.max_attempts,
            interval_seconds=config.interval_seconds,
            **kwargs,
        )

    async def poll(self, kickoff_id: str) -> Dict[str, Any]:
        """Block until the run is terminal and return its extracted output."""
        started_at = self._clock()
        previous_state: Optional[str] = None

        for attempt in range(1, self._max_attempts + 1):
            status = await self._fetch_status(kickoff_id)
            logger.debug(
                "Poll %d/%d for %s: %s",
                attempt,
                self._max_attempts,
                kickoff_id,
                status.state,
            )
            if status.state != previous_state:
                logger.info("Run %s is %s", kickoff_id, status.state)
                previous_state = status.state
            if self._on_status is not None:
                self._on_status(attempt, status)

            if status.state == CrewState.SUCCESS:
                if not has_output(status.last_output):
                    raise EmptyOutputError(kickoff_id)
                logger.info(
                    "Run %s finished after %d checks in %.1fs",
                    kickoff_id,
                    attempt,
                    self._clock() - started_at,
                )
                return self._extractor(status.last_output)

            if status.state == CrewState.FAILED:
                logger.warning("Run %s reported FAILED", kickoff_id)
                raise JobFailedError(kickoff_id)

            if attempt < self._max_attempts:
                await self._sleep(self._interval_seconds)

        logger.warning(
            "Run %s still %s after %d checks; giving up",
            kickoff_id,
            previous_state,
            self._max_attempts,
        )
        raise PollTimeoutError(kickoff_id, self._max_attempts)


__all__ = [
    "CrewPoller",
    "EmptyOutputError",
    "JobFailedError",
    "PollTimeoutError",
    "Sleeper",
    "StatusObserver",
    "StatusFetcher",
]
