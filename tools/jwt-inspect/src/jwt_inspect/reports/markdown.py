"""
Markdown report renderer.

Consumes a ReportData instance and renders to Markdown string.
"""

from __future__ import annotations

import json

from .base import ReportData

__all__ = ["generate_markdown_report"]

_SEVERITY_LABEL = {
    "critical": "CRITICAL",
    "high": "HIGH",
    "medium": "MEDIUM",
    "low": "LOW",
}


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _summary(d: ReportData) -> list[str]:
    v = d.validation
    c = d.severity_counts
    verdict = "VALID" if v.is_valid else "INVALID"
    expiry = d.decoded.expires_in or "no expiration"

    return [
        "## Summary", "",
        f"**Verdict: {verdict}**", "",
        "| Metric | Value |", "|--------|-------|",
        f"| Algorithm | `{d.decoded.algorithm}` |",
        f"| Expires In | {expiry} |",
        f"| Issued At | {d.decoded.issued_at_iso or 'N/A'} |",
        f"| Errors / Warnings | {len(v.errors)} / {len(v.warnings)} |",
        f"| Issues | {c.get('critical', 0)} critical, {c.get('high', 0)} high, "
        f"{c.get('medium', 0)} medium, {c.get('low', 0)} low |",
        "",
    ]


def _json_block(title: str, data: dict) -> list[str]:
    return [f"## {title}", "", "```json", json.dumps(data, indent=2), "```", ""]


def _validation(d: ReportData) -> list[str]:
    lines = ["## Validation", ""]
    v = d.validation
    for label, messages in (("Error", v.errors), ("Warning", v.warnings), ("Info", v.info)):
        for msg in messages:
            lines.append(f"- **{label}:** {msg}")
    if len(lines) == 2:
        lines.append("_No messages._")
    lines.append("")
    return lines


def _issues(d: ReportData) -> list[str]:
    lines = ["## Security Issues", ""]
    if not d.issues:
        return lines + ["_No issues detected._", ""]

    for issue in d.issues:
        lines += [
            f"### [{_SEVERITY_LABEL[issue.severity]}] {issue.title}", "",
            f"- **Category:** {issue.category}",
            f"- **Description:** {issue.description}",
        ]
        if issue.impact:
            lines.append(f"- **Impact:** {issue.impact}")
        lines += [f"- **Recommendation:** {issue.recommendation}", ""]
    return lines


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------

def generate_markdown_report(data: ReportData) -> str:
    """Generate a Markdown inspection report."""
    lines = [
        "# JWT Inspection Report", "",
        f"*Generated: {data.generated_at}*", "",
    ]
    lines += _summary(data)
    lines += _json_block("Header", data.decoded.header)
    lines += _json_block("Payload", data.decoded.payload)
    lines += _validation(data)
    lines += _issues(data)
    return "\n".join(lines)
