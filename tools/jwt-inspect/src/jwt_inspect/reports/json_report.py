"""
JSON report renderer.
"""

from __future__ import annotations

import json

from .base import ReportData

__all__ = ["generate_json_report"]


def generate_json_report(data: ReportData) -> str:
    """Generate a JSON inspection report."""
    d = data
    report: dict = {
        "report_metadata": {
            "generated_at": d.generated_at,
            "evaluated_at": d.now,
            "algorithm": d.decoded.algorithm,
        },
        "token": d.decoded.to_dict(),
        "validation": d.validation.to_dict(),
        "security_issues": [issue.to_dict() for issue in d.issues],
        "severity_counts": d.severity_counts,
    }
    return json.dumps(report, indent=2, default=str)
