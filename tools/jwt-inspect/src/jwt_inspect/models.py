"""
Data models for decoded tokens, validation reports and security issues.

All models are derived values: they are rebuilt on every call and carry no
state between calls.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from . import base64url

__all__ = [
    "HMAC_ALGORITHMS",
    "ASYMMETRIC_PREFIXES",
    "NONE_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "SEVERITIES",
    "Severity",
    "DecodedToken",
    "ValidationReport",
    "SecurityIssue",
    "numeric_date",
    "format_timestamp",
    "format_time_remaining",
]


# ---------------------------------------------------------------------------
# Algorithms
# ---------------------------------------------------------------------------

NONE_ALGORITHM = "none"
HMAC_ALGORITHMS: tuple[str, ...] = ("HS256", "HS384", "HS512")
SUPPORTED_ALGORITHMS: tuple[str, ...] = HMAC_ALGORITHMS + (NONE_ALGORITHM,)

# Recognised for reporting only; nothing here signs with them.
ASYMMETRIC_PREFIXES: tuple[str, ...] = ("RS", "ES", "PS")

Severity = Literal["critical", "high", "medium", "low"]
SEVERITIES: tuple[str, ...] = ("critical", "high", "medium", "low")


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------

def numeric_date(payload: dict, claim: str) -> int | float | None:
    """Return the numeric value of a time claim, or None if absent or not a number.

    ``bool`` is rejected even though it is an ``int`` subclass, and so are
    non-finite floats (JSON ``1e400`` parses to infinity).
    """
    value = payload.get(claim)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def format_timestamp(ts: int | float) -> str:
    """Render Unix seconds as an ISO-8601 UTC string (``2018-01-18T01:30:22Z``)."""
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    except (OverflowError, OSError, ValueError):
        return f"{ts} (out of range)"


def format_time_remaining(seconds: int | float) -> str:
    """Compact remaining-time label: ``1d 2h``, ``3h 4m``, ``5m`` or ``Expired``."""
    if seconds <= 0:
        return "Expired"
    seconds = int(seconds)
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60

    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


# ---------------------------------------------------------------------------
# Decoded token
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecodedToken:
    """The decoded parts of a token plus time-derived status at ``now``."""

    header: dict[str, Any]
    payload: dict[str, Any]
    header_segment: str
    payload_segment: str
    signature_segment: str
    is_expired: bool
    time_remaining: int | float | None     # exp - now, None without exp
    issued_at: int | float | None          # iat, None without iat

    @property
    def algorithm(self) -> str | None:
        alg = self.header.get("alg")
        return alg if isinstance(alg, str) else None

    @property
    def signing_input(self) -> str:
        return f"{self.header_segment}.{self.payload_segment}"

    @property
    def signature(self) -> bytes:
        """Raw signature bytes (empty for unsigned tokens)."""
        return base64url.decode(self.signature_segment)

    @property
    def expires_in(self) -> str | None:
        if self.time_remaining is None:
            return None
        return format_time_remaining(self.time_remaining)

    @property
    def issued_at_iso(self) -> str | None:
        if self.issued_at is None:
            return None
        return format_timestamp(self.issued_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header,
            "payload": self.payload,
            "signature": self.signature_segment,
            "is_expired": self.is_expired,
            "time_remaining": self.time_remaining,
            "expires_in": self.expires_in,
            "issued_at": self.issued_at_iso,
        }


# ---------------------------------------------------------------------------
# Validation report
# ---------------------------------------------------------------------------

@dataclass
class ValidationReport:
    """Ordered validation messages. Valid means no errors."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    info: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "info": list(self.info),
        }


# ---------------------------------------------------------------------------
# Security issue
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SecurityIssue:
    """A single advisory finding from the security analyzer."""

    id: str
    title: str
    severity: Severity
    category: str
    description: str
    recommendation: str
    impact: str = ""
    attack_scenario: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
