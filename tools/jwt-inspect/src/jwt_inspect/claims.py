"""
Claims validation.

Each check is a small rule object; :func:`validate` runs them in order and
collects their messages into a :class:`ValidationReport`. Rule order only
affects the order of messages, never the verdict. New rules can be appended
to ``DEFAULT_RULES`` without touching the existing ones.

The current time is always passed in. Nothing here reads the system clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .models import (
    ASYMMETRIC_PREFIXES,
    HMAC_ALGORITHMS,
    NONE_ALGORITHM,
    DecodedToken,
    ValidationReport,
    format_timestamp,
    numeric_date,
)

__all__ = [
    "RuleContext",
    "ClaimRule",
    "ExpiryRule",
    "NotBeforeRule",
    "IssuedAtRule",
    "AlgorithmRule",
    "AudienceRule",
    "DEFAULT_RULES",
    "validate",
    "describe_remaining",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by every rule in one validation pass."""

    now: int
    key: str | bytes | None = None


def describe_remaining(seconds: int | float) -> str:
    """Remaining time in the largest non-zero unit: days, else hours, else minutes."""
    seconds = int(seconds)
    days = seconds // 86400
    hours = seconds // 3600
    minutes = seconds // 60
    if days > 0:
        return f"{days} day{'s' if days != 1 else ''}"
    if hours > 0:
        return f"{hours} hour{'s' if hours != 1 else ''}"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    return "less than a minute"


def _not_numeric(decoded: DecodedToken, claim: str) -> bool:
    return claim in decoded.payload and numeric_date(decoded.payload, claim) is None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

class ClaimRule:
    """Base class for a single validation rule."""

    name = "rule"

    def check(self, decoded: DecodedToken, ctx: RuleContext, report: ValidationReport) -> None:
        raise NotImplementedError


class ExpiryRule(ClaimRule):
    """``exp``: expired at or before now is an error."""

    name = "expiry"

    def check(self, decoded, ctx, report):
        if _not_numeric(decoded, "exp"):
            report.errors.append("Expiration (exp) claim is not a numeric timestamp")
            return

        exp = numeric_date(decoded.payload, "exp")
        if exp is None:
            report.warnings.append("No expiration (exp) claim found")
        elif exp <= ctx.now:
            report.errors.append(f"Token expired on {format_timestamp(exp)}")
        else:
            report.info.append(f"Token valid for {describe_remaining(exp - ctx.now)}")


class NotBeforeRule(ClaimRule):
    """``nbf``: a start time in the future is an error."""

    name = "not-before"

    def check(self, decoded, ctx, report):
        if _not_numeric(decoded, "nbf"):
            report.errors.append("Not-before (nbf) claim is not a numeric timestamp")
            return

        nbf = numeric_date(decoded.payload, "nbf")
        if nbf is not None and nbf > ctx.now:
            report.errors.append(f"Token not yet valid until {format_timestamp(nbf)}")


class IssuedAtRule(ClaimRule):
    name = "issued-at"

    def check(self, decoded, ctx, report):
        if _not_numeric(decoded, "iat"):
            report.errors.append("Issued-at (iat) claim is not a numeric timestamp")
            return

        iat = numeric_date(decoded.payload, "iat")
        if iat is None:
            report.warnings.append("No issued-at (iat) claim found")
        else:
            report.info.append(f"Token issued on {format_timestamp(iat)}")


class AlgorithmRule(ClaimRule):
    """Header ``alg``: ``none`` is insecure; HMAC needs a key to verify."""

    name = "algorithm"

    def check(self, decoded, ctx, report):
        alg = decoded.algorithm or ""
        has_signature = bool(decoded.signature_segment)

        if alg == NONE_ALGORITHM:
            report.errors.append('Insecure algorithm: "none" - the token is not signed')
            if has_signature:
                report.warnings.append('Algorithm is "none" but a signature segment is present')
            return

        if alg in HMAC_ALGORITHMS:
            report.info.append(f"Using HMAC (symmetric) algorithm: {alg}")
            if not ctx.key:
                report.warnings.append("Secret key required to verify the HMAC signature")
        elif alg.startswith(ASYMMETRIC_PREFIXES):
            report.info.append(f"Using asymmetric algorithm: {alg}")
        else:
            report.warnings.append(f"Unrecognized algorithm: {alg!r}")

        if not has_signature:
            report.errors.append(f"Signature segment is empty but algorithm is {alg}")


class AudienceRule(ClaimRule):
    """Registered identity claims: subject, issuer and audience."""

    name = "audience"

    def check(self, decoded, ctx, report):
        payload = decoded.payload
        if "sub" not in payload and "user_id" not in payload:
            report.warnings.append("No subject (sub) or user_id claim found")
        if "iss" not in payload:
            report.warnings.append("No issuer (iss) claim found")
        if "aud" not in payload:
            report.warnings.append("No audience (aud) claim found")


DEFAULT_RULES: tuple[ClaimRule, ...] = (
    ExpiryRule(),
    NotBeforeRule(),
    IssuedAtRule(),
    AlgorithmRule(),
    AudienceRule(),
)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def validate(
    decoded: DecodedToken,
    now: int,
    key: str | bytes | None = None,
    rules: Sequence[ClaimRule] = DEFAULT_RULES,
) -> ValidationReport:
    """Evaluate *rules* against *decoded* at time *now*.

    Never raises for a structurally valid token. Problems are reported as
    errors, warnings or info entries.
    """
    ctx = RuleContext(now=now, key=key)
    report = ValidationReport()
    for rule in rules:
        rule.check(decoded, ctx, report)

    logger.debug(
        "Validation: %d error(s), %d warning(s), %d info",
        len(report.errors), len(report.warnings), len(report.info),
    )
    return report
