"""
FastAPI dependency for injecting configuration.

Overriding :func:`get_app_settings` swaps the settings every crew service is
built from.
"""

from prepcrew.core.config import AppSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning the process-wide settings."""
    return get_settings()


__all__ = ["get_app_settings"]
