"""Report generators for the JWT inspection tool."""

from .base import ReportData
from .markdown import generate_markdown_report
from .json_report import generate_json_report
from .text_report import generate_text_report
from .save import save_report

__all__ = [
    "ReportData",
    "generate_markdown_report",
    "generate_json_report",
    "generate_text_report",
    "save_report",
]
