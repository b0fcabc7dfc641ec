"""
Report file I/O: save generated reports to disk.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path

__all__ = ["save_report"]

logger = logging.getLogger(__name__)

# Only allow safe characters in filename components.
_SAFE_FILENAME = re.compile(r'[^\w\-.]')

_EXTENSIONS = {"json": "json", "markdown": "md", "text": "txt"}


def _sanitize_filename_part(value: str, max_len: int = 40) -> str:
    """Sanitise a value for use in a filename by replacing unsafe chars."""
    return _SAFE_FILENAME.sub('_', value)[:max_len]


def save_report(content: str, output_dir: str, fmt: str, label: str = "") -> str:
    """Save report to disk and return the absolute file path."""
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    # Use UTC for consistent timestamps everywhere
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")

    name = f"jwt_report_{_sanitize_filename_part(label)}_" if label else "jwt_report_"
    ext = _EXTENSIONS.get(fmt, "txt")
    filepath = os.path.join(output_dir, f"{name}{timestamp}.{ext}")

    with open(filepath, "w", encoding="utf-8") as f:
        f.write(content)

    # Resolve to absolute path so callers can build clickable file:// URIs
    filepath = os.path.abspath(filepath)
    logger.debug("Wrote %d bytes to %s", len(content), filepath)
    return filepath
