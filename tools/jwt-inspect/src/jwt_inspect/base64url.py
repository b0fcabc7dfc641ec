"""
Base64url codec (RFC 4648 section 5) without padding.

Decoding accepts padded and unpadded input but rejects anything outside the
URL-safe alphabet instead of silently skipping it.
"""

from __future__ import annotations

import base64
import binascii
import re

from .errors import DecodeError

__all__ = ["encode", "decode"]

_ALPHABET_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def encode(data: bytes) -> str:
    """Encode *data* as unpadded base64url text."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _add_base64_padding(data: str) -> str:
    """Add padding characters for base64url decoding."""
    padding = len(data) % 4
    if padding:
        data += "=" * (4 - padding)
    return data


def decode(text: str) -> bytes:
    """Decode base64url *text* (padded or not) into bytes.

    Raises:
        DecodeError: If *text* contains characters outside the URL-safe
            alphabet, has misplaced padding, or has an impossible length.
    """
    stripped = text.rstrip("=")
    pad_len = len(text) - len(stripped)

    if not _ALPHABET_RE.match(stripped):
        bad = sorted({c for c in stripped if not _ALPHABET_RE.match(c)})
        raise DecodeError(
            f"Invalid base64url character(s): {''.join(bad)!r}"
        )
    if len(stripped) % 4 == 1:
        raise DecodeError(f"Invalid base64url length: {len(stripped)} characters")
    if pad_len and (pad_len > 2 or len(text) % 4):
        raise DecodeError("Invalid base64url padding")

    try:
        return base64.urlsafe_b64decode(_add_base64_padding(stripped))
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64url data: {exc}") from exc
