"""
Logging utilities for the FastAPI application and the CLI scripts.

Provides a consistent logging format and configuration.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Render a credential for log output without leaking it."""
    if not value:
        return "<unset>"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{'*' * (len(value) - visible)}{value[-visible:]}"


__all__ = ["configure_logging", "mask_secret"]
