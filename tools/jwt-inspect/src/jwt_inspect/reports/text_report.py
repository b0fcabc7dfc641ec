"""
Plain-text report renderer, used for terminal output.
"""

from __future__ import annotations

from .base import ReportData

__all__ = ["generate_text_report"]


def generate_text_report(data: ReportData) -> str:
    """Generate a plain-text inspection report."""
    d = data
    c = d.severity_counts
    lines = [
        "JWT Inspection Report",
        "=====================",
        f"Generated : {d.generated_at}",
        f"Algorithm : {d.decoded.algorithm}",
        f"Expires in: {d.decoded.expires_in or 'no expiration'}",
        f"Verdict   : {'VALID' if d.validation.is_valid else 'INVALID'}",
        "",
    ]

    for label, messages in (
        ("ERROR", d.validation.errors),
        ("WARN", d.validation.warnings),
        ("INFO", d.validation.info),
    ):
        for msg in messages:
            lines.append(f"[{label:<5}] {msg}")

    lines += [
        "",
        f"Security issues: {len(d.issues)} "
        f"({c.get('critical', 0)} critical, {c.get('high', 0)} high, "
        f"{c.get('medium', 0)} medium, {c.get('low', 0)} low)",
    ]
    for issue in d.issues:
        lines += [
            "",
            f"  [{issue.severity.upper()}] {issue.title} ({issue.category})",
            f"    {issue.description}",
            f"    -> {issue.recommendation}",
        ]
    return "\n".join(lines) + "\n"
