"""Utility for verifying that every crew deployment is configured.

Loads the same settings the API uses (process environment plus an optional
``.env`` file) and reports, per crew, the resolved base URL and whether a
credential is present.

Example usages::

    # Check the process environment and ./.env when present.
    python -m scripts.check_env

    # Check a specific env file, e.g. from a deploy hook.
    python -m scripts.check_env --env-file /opt/prepcrew/.env
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from prepcrew.core.config import (
    AppSettings,
    CrewSettings,
    load_settings,
    resolve_poll_config,
)
from prepcrew.core.logging import mask_secret

EXIT_OK = 0
EXIT_VALIDATION_ERROR = 2
EXIT_UNCONFIGURED = 3
EXIT_RUNTIME_ERROR = 5


def _crews(settings: AppSettings) -> dict[str, CrewSettings]:
    return {
        "resume": settings.resume_crew,
        "interview": settings.interview_crew,
        "insight": settings.insight_crew,
    }


def _report(settings: AppSettings) -> int:
    """Print one line per crew and return the resulting exit code."""
    missing: list[str] = []
    for name, crew in _crews(settings).items():
        config = resolve_poll_config(crew)
        problems = []
        if not config.api_key:
            problems.append("api key")
        if not config.base_url:
            problems.append("base url")
        state = "OK" if not problems else "MISSING " + ", ".join(problems)
        print(
            f"{name:<10} {state:<24} base_url={config.base_url or '-'} "
            f"api_key={mask_secret(config.api_key)} "
            f"poll={config.max_attempts}x{config.interval_ms}ms"
        )
        if problems:
            missing.append(name)

    if missing:
        print(
            f"Unconfigured crews: {', '.join(missing)}",
            file=sys.stderr,
        )
        return EXIT_UNCONFIGURED
    return EXIT_OK


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report which crew deployments are configured."
    )
    parser.add_argument(
        "--env-file",
        default=None,
        type=Path,
        help="Optional environment file to read in addition to the process env.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    env_file: Path | None = args.env_file
    if env_file is not None and not env_file.exists():
        print(
            f"Environment file {env_file} does not exist. "
            "Ensure the path is correct or create it before running this tool.",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    try:
        settings = load_settings(env_file)
    except ValidationError as exc:
        print(
            "Settings validation failed. Missing or invalid values detected:\n"
            f"{exc.json(indent=2)}",
            file=sys.stderr,
        )
        return EXIT_VALIDATION_ERROR

    return _report(settings)


if __name__ == "__main__":  # pragma: no cover - script entry point
    sys.exit(main())
