"""
Security heuristics for decoded tokens.

Produces advisory :class:`SecurityIssue` objects. There is no pass/fail
verdict here, and an empty list only means no heuristic fired.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from .models import (
    HMAC_ALGORITHMS,
    NONE_ALGORITHM,
    SEVERITIES,
    DecodedToken,
    SecurityIssue,
    numeric_date,
)

__all__ = [
    "DEFAULT_MAX_LIFETIME_SECONDS",
    "DEFAULT_SENSITIVE_CLAIMS",
    "AnalysisPolicy",
    "analyze",
    "summarize",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIFETIME_SECONDS = 86400

DEFAULT_SENSITIVE_CLAIMS: frozenset[str] = frozenset({
    "password",
    "secret",
    "ssn",
    "credit_card",
    "api_key",
})


@dataclass(frozen=True)
class AnalysisPolicy:
    """Tunable thresholds for the analyzer."""

    max_lifetime_seconds: int = DEFAULT_MAX_LIFETIME_SECONDS
    sensitive_claims: frozenset[str] = DEFAULT_SENSITIVE_CLAIMS

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "sensitive_claims", frozenset(name.lower() for name in self.sensitive_claims),
        )

    @classmethod
    def build(
        cls,
        max_lifetime_seconds: int = DEFAULT_MAX_LIFETIME_SECONDS,
        sensitive_claims: Iterable[str] = DEFAULT_SENSITIVE_CLAIMS,
    ) -> AnalysisPolicy:
        """Create a policy from loosely typed values (e.g. parsed config)."""
        return cls(
            max_lifetime_seconds=int(max_lifetime_seconds),
            sensitive_claims=frozenset(sensitive_claims),
        )


DEFAULT_POLICY = AnalysisPolicy()


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------

def _check_algorithm(decoded: DecodedToken) -> list[SecurityIssue]:
    alg = decoded.algorithm
    if alg == NONE_ALGORITHM:
        return [SecurityIssue(
            id="jwt-alg-none",
            title='Algorithm set to "none"',
            severity="critical",
            category="algorithm",
            description="The JWT uses no signature algorithm, making it completely unverified.",
            recommendation='Always use a signing algorithm such as HS256 or RS256. Never accept "none".',
            impact="Any attacker can forge tokens with arbitrary claims.",
            attack_scenario=(
                "An attacker modifies the payload to escalate privileges, removes the "
                "signature, and the server accepts it."
            ),
        )]
    if alg in HMAC_ALGORITHMS:
        return [SecurityIssue(
            id="jwt-symmetric-alg",
            title="Symmetric algorithm in use",
            severity="medium",
            category="algorithm",
            description=f"{alg} requires the same shared secret on every party that signs or verifies.",
            recommendation="Consider asymmetric algorithms (RS256, ES256) for better key management.",
            impact="If the secret leaks, attackers can forge valid tokens.",
            attack_scenario="A secret exposed in source code or logs allows token forgery.",
        )]
    return []


def _lifetime(decoded: DecodedToken, exp, iat) -> int | float | None:
    """Seconds between iat (or now) and exp. ``math.inf`` when not representable."""
    if iat is None:
        return decoded.time_remaining
    try:
        lifetime = exp - iat
    except OverflowError:
        return math.inf
    return lifetime


def _check_lifetime(decoded: DecodedToken, policy: AnalysisPolicy) -> list[SecurityIssue]:
    payload = decoded.payload
    if "exp" not in payload:
        return [SecurityIssue(
            id="jwt-no-exp",
            title="Missing expiration claim",
            severity="high",
            category="lifetime",
            description="The token has no expiration time (exp claim).",
            recommendation=(
                "Always set an exp claim with a reasonable lifetime "
                "(e.g. 15 minutes for access tokens)."
            ),
            impact="Tokens remain valid indefinitely, increasing replay attack risk.",
            attack_scenario="Stolen tokens can be used forever unless manually revoked.",
        )]

    exp = numeric_date(payload, "exp")
    if exp is None:
        return []

    lifetime = _lifetime(decoded, exp, numeric_date(payload, "iat"))
    if lifetime is None or lifetime <= policy.max_lifetime_seconds:
        return []
    span = "unbounded" if lifetime == math.inf else f"{int(lifetime // 3600)} hours"

    return [SecurityIssue(
        id="jwt-long-lifetime",
        title="Excessive token lifetime",
        severity="medium",
        category="lifetime",
        description=(
            f"Token lifetime is {span} "
            f"(limit {policy.max_lifetime_seconds // 3600} hours)."
        ),
        recommendation="Use short-lived access tokens (15-60 minutes) with refresh token rotation.",
        impact="Long-lived tokens increase the window for replay attacks.",
        attack_scenario=(
            "A stolen token remains valid for an extended period, allowing "
            "prolonged unauthorized access."
        ),
    )]


def _check_issued_at(decoded: DecodedToken) -> list[SecurityIssue]:
    if "iat" in decoded.payload:
        return []
    return [SecurityIssue(
        id="jwt-no-iat",
        title="Missing issued-at claim",
        severity="low",
        category="claims",
        description="The token lacks an iat (issued at) claim.",
        recommendation="Include an iat claim to track when tokens were issued.",
        impact="Token age cannot be tracked or used in time-based security policies.",
        attack_scenario="Replay of old tokens cannot be detected by freshness checks.",
    )]


def _check_sensitive(decoded: DecodedToken, policy: AnalysisPolicy) -> list[SecurityIssue]:
    found = [k for k in decoded.payload if k.lower() in policy.sensitive_claims]
    if not found:
        return []
    return [SecurityIssue(
        id="jwt-sensitive-data",
        title="Sensitive data in payload",
        severity="high",
        category="sensitive-data",
        description=f"Potentially sensitive fields detected: {', '.join(found)}",
        recommendation=(
            "Never store sensitive data in JWT payloads. "
            "Use opaque tokens or encrypt sensitive claims."
        ),
        impact="JWT payloads are base64url-encoded, not encrypted. Anyone can decode and read them.",
        attack_scenario="An attacker intercepts the token and reads sensitive values from the payload.",
    )]


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def analyze(decoded: DecodedToken, policy: AnalysisPolicy | None = None) -> list[SecurityIssue]:
    """Run every heuristic against *decoded* and return the issues found."""
    policy = policy or DEFAULT_POLICY
    issues: list[SecurityIssue] = []
    issues += _check_algorithm(decoded)
    issues += _check_lifetime(decoded, policy)
    issues += _check_issued_at(decoded)
    issues += _check_sensitive(decoded, policy)

    logger.debug("Analysis found %d issue(s): %s",
                 len(issues), ", ".join(i.id for i in issues) or "none")
    return issues


def summarize(issues: Iterable[SecurityIssue]) -> dict[str, int]:
    """Count issues per severity (every severity is present, possibly 0)."""
    counts = {sev: 0 for sev in SEVERITIES}
    for issue in issues:
        counts[issue.severity] += 1
    return counts
