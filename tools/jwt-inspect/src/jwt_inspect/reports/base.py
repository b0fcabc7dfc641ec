"""
Report data container holding everything the renderers need.

The CLI builds a ReportData instance once; each renderer (text, markdown, json)
consumes it without recomputing anything.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from ..analysis import AnalysisPolicy, analyze, summarize
from ..claims import validate
from ..models import DecodedToken, SecurityIssue, ValidationReport

__all__ = ["ReportData"]


@dataclass
class ReportData:
    """Snapshot of one token inspection."""

    decoded: DecodedToken
    now: int
    policy: AnalysisPolicy | None = None

    # Computed (populated by .build())
    validation: ValidationReport = field(default_factory=ValidationReport)
    issues: list[SecurityIssue] = field(default_factory=list)
    severity_counts: dict[str, int] = field(default_factory=dict)
    generated_at: str = ""

    # Injectable clock for testability
    _clock: Callable[[], datetime] | None = field(default=None, repr=False)

    def build(self, key: str | bytes | None = None) -> ReportData:
        """Compute derived fields. *key* is only used for the validation pass."""
        self.validation = validate(self.decoded, self.now, key)
        self.issues = analyze(self.decoded, self.policy)
        self.severity_counts = summarize(self.issues)
        clock = self._clock or (lambda: datetime.now(timezone.utc))
        self.generated_at = clock().strftime("%Y-%m-%d %H:%M:%S UTC")
        return self
