"""
Normalize free-form crew task output into dictionaries the UI can render.

Crew tasks report their output as already-parsed objects, JSON strings,
JSON wrapped in Markdown fences, or JSON buried in prose. Everything is
funnelled through :func:`extract_output_payload`, which always returns a
``dict`` and never raises.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, Dict

from prepcrew.schemas.crew import CrewState, CrewStatus

RAW_OUTPUT_KEY = "raw_output"

_FENCE_JSON = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE = re.compile(r"```\s*")
_BLANK_LINES = re.compile(r"\n\s*\n+")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def clean_json_string(raw: str) -> str:
    """Drop Markdown fences, collapse blank lines and trim whitespace."""
    cleaned = _FENCE_JSON.sub("", raw)
    cleaned = _FENCE.sub("", cleaned)
    cleaned = _BLANK_LINES.sub("\n", cleaned)
    return cleaned.strip()


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA.sub(r"\1", text)


def find_json_object_span(text: str) -> tuple[int, int] | None:
    """Locate the first balanced ``{...}`` block, ignoring braces in strings.

    Returns ``(start, end)`` slice bounds. When the object never closes
    (truncated output) the span runs to the last ``}`` in the text, if any.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return start, index + 1

    last_close = text.rfind("}")
    if last_close > start:
        return start, last_close + 1
    return None


def _parse_object(text: str) -> Dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def extract_output_payload(output: Any) -> Dict[str, Any]:
    """Best-effort conversion of a task output into a dictionary.

    Strings go through increasingly aggressive passes: strict parse, fence
    cleanup, narrowing to the first balanced object, then trailing comma
    removal. If nothing parses the cleaned text is returned under
    ``raw_output``.
    """
    if isinstance(output, Mapping):
        return dict(output)

    if not isinstance(output, str):
        return {RAW_OUTPUT_KEY: output}

    try:
        strict = json.loads(output.strip())
    except (ValueError, RecursionError):
        pass
    else:
        if isinstance(strict, dict):
            return strict
        # Valid JSON that is not an object is kept whole rather than narrowed.
        return {RAW_OUTPUT_KEY: clean_json_string(output)}

    cleaned = clean_json_string(output)
    candidate = cleaned
    span = find_json_object_span(cleaned)
    if span is not None:
        candidate = cleaned[span[0] : span[1]]

    parsed = _parse_object(candidate)
    if parsed is None:
        parsed = _parse_object(strip_trailing_commas(candidate))
    if parsed is None:
        return {RAW_OUTPUT_KEY: cleaned}
    return parsed


def is_detailed_analysis_payload(payload: Mapping[str, Any]) -> bool:
    """True when the payload carries both resume analysis sections."""
    return "analysis_metadata" in payload and "resume_analysis" in payload


def has_output(value: Any) -> bool:
    """Whether a task produced anything worth extracting."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def shape_payload_response(
    kickoff_id: str, state: str, payload: Mapping[str, Any]
) -> Dict[str, Any]:
    """Spread detailed analyses at top level, nest anything else."""
    if is_detailed_analysis_payload(payload):
        return {"kickoff_id": kickoff_id, "status": state, **payload}
    return {"kickoff_id": kickoff_id, "status": state, "analysis": dict(payload)}


def shape_status_response(kickoff_id: str, status: CrewStatus) -> Dict[str, Any]:
    """Build the status endpoint body from a status snapshot.

    Output is only read once the run reports success; interim output is
    ignored.
    """
    if status.state != CrewState.SUCCESS or not has_output(status.last_output):
        return {"kickoff_id": kickoff_id, "status": status.state}
    return shape_payload_response(
        kickoff_id, status.state, extract_output_payload(status.last_output)
    )


__all__ = [
    "RAW_OUTPUT_KEY",
    "clean_json_string",
    "extract_output_payload",
    "find_json_object_span",
    "has_output",
    "is_detailed_analysis_payload",
    "shape_payload_response",
    "shape_status_response",
    "strip_trailing_commas",
]
