"""Expose constructed client wrappers."""

from .crew import CrewClient, CrewError, KickoffError, MissingHandleError, StatusCheckError

__all__ = [
    "CrewClient",
    "CrewError",
    "KickoffError",
    "MissingHandleError",
    "StatusCheckError",
]
