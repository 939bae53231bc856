"""Follow a crew run from the terminal.

Either attaches to an existing run or kicks off a new one, then prints every
state change until the run finishes::

    python -m scripts.watch_kickoff --crew resume --kickoff-id abc123
    python -m scripts.watch_kickoff --crew insight --inputs '{"job_title": "SRE"}'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from typing import Any, Dict

from prepcrew.clients import CrewClient, CrewError
from prepcrew.core.config import (
    AppSettings,
    ConfigurationError,
    get_settings,
    require_configured,
    resolve_poll_config,
)
from prepcrew.core.logging import configure_logging
from prepcrew.schemas.crew import CrewStatus
from prepcrew.services import CrewRunService

EXIT_OK = 0
EXIT_CREW_ERROR = 1
EXIT_USAGE_ERROR = 2


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


class StatePrinter:
    """Print a line whenever the reported state changes."""

    def __init__(self, stream=None) -> None:
        self._stream = stream or sys.stdout
        self._last_state: str | None = None

    def __call__(self, attempt: int, status: CrewStatus) -> None:
        if status.state == self._last_state:
            return
        self._last_state = status.state
        print(
            f"[{_timestamp()}] check #{attempt} state → {status.state}",
            file=self._stream,
        )


def _select_crew(settings: AppSettings, name: str):
    return {
        "resume": settings.resume_crew,
        "interview": settings.interview_crew,
        "insight": settings.insight_crew,
    }[name]


def _parse_inputs(raw: str) -> Dict[str, Any]:
    inputs = json.loads(raw)
    if not isinstance(inputs, dict):
        raise ValueError("--inputs must be a JSON object")
    return inputs


async def watch(
    service: CrewRunService,
    *,
    kickoff_id: str | None,
    inputs: Dict[str, Any] | None,
) -> Dict[str, Any]:
    if kickoff_id is None:
        kickoff_id = await service.submit(inputs or {})
        print(f"[{_timestamp()}] kicked off {kickoff_id}")
    return await service.wait(kickoff_id)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Watch a crew run until it finishes.")
    parser.add_argument(
        "--crew",
        choices=("resume", "interview", "insight"),
        default="resume",
        help="Which crew deployment to talk to.",
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--kickoff-id", help="Attach to an existing run.")
    target.add_argument("--inputs", help="JSON object submitted as a new run's inputs.")
    return parser


def main(argv: list[str] | None = None, *, transport=None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        inputs = _parse_inputs(args.inputs) if args.inputs else None
    except ValueError as exc:
        print(f"Invalid inputs: {exc}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    try:
        config = require_configured(
            resolve_poll_config(_select_crew(settings, args.crew))
        )
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE_ERROR

    service = CrewRunService(
        CrewClient(config, transport=transport), on_status=StatePrinter()
    )
    try:
        payload = asyncio.run(
            watch(service, kickoff_id=args.kickoff_id, inputs=inputs)
        )
    except CrewError as exc:
        print(f"[{_timestamp()}] {exc}", file=sys.stderr)
        return EXIT_CREW_ERROR

    print(json.dumps(payload, indent=2, default=str))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover - manual execution path
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nStopped watching.")
