"""
JSON serialization for token headers and payloads.

Uses the compact form every JWT library emits (no whitespace after
separators). Key order is preserved in both directions so a decoded header or
payload echoes the original field order, unknown fields included.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import ParseError

__all__ = ["serialize", "parse", "parse_object"]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name!r}")


def serialize(value: Any) -> str:
    """Serialize *value* to compact JSON text.

    Raises:
        ParseError: If *value* contains something JSON cannot represent.
    """
    try:
        return json.dumps(value, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"Value is not JSON serializable: {exc}") from exc


def parse(text: str | bytes) -> Any:
    """Parse JSON *text* (``str`` or UTF-8 ``bytes``).

    Raises:
        ParseError: On invalid UTF-8, invalid JSON, or NaN/Infinity literals.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Not valid UTF-8: {exc}") from exc
    # JSONDecodeError is a ValueError, as is the NaN/Infinity rejection
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc


def parse_object(text: str | bytes, label: str = "value") -> dict[str, Any]:
    """Parse *text* and require a JSON object."""
    value = parse(text)
    if not isinstance(value, dict):
        raise ParseError(
            f"The {label} must be a JSON object, got {type(value).__name__}"
        )
    return value
