"""HTTP helpers shared by the crew client."""

from __future__ import annotations

import httpx

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


def bearer_headers(api_key: str, *, json_body: bool = False) -> dict[str, str]:
    """Build authorization headers for the orchestration service."""
    headers = {"Authorization": f"Bearer {api_key}"}
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def join_url(base_url: str, *segments: str) -> str:
    """Append path segments to a base URL without doubling slashes."""
    url = base_url.rstrip("/")
    for segment in segments:
        url = f"{url}/{segment.strip('/')}"
    return url


def response_excerpt(response: httpx.Response, limit: int = 500) -> str:
    """Return a bounded slice of a response body for error messages."""
    try:
        text = response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError):  # pragma: no cover - defensive
        return ""
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


__all__ = ["DEFAULT_TIMEOUT", "bearer_headers", "join_url", "response_excerpt"]
