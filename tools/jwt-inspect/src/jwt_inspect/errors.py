"""
Error taxonomy for token decoding, signing and verification.

Every failure is raised to the immediate caller as a typed exception.
Semantically weak tokens (expired, ``alg: none``) are never errors here,
they are reported as data by the validator and the analyzer.
"""

from __future__ import annotations

__all__ = [
    "TokenError",
    "MalformedTokenError",
    "DecodeError",
    "ParseError",
    "UnsupportedAlgorithmError",
    "KeyMaterialError",
]


class TokenError(Exception):
    """Base class for all token errors."""


class MalformedTokenError(TokenError):
    """Raised when a token does not have exactly three dot-separated segments."""


class DecodeError(TokenError):
    """Raised when a segment is not valid base64url."""


class ParseError(TokenError):
    """Raised when a header or payload is not a valid JSON object."""


class UnsupportedAlgorithmError(TokenError):
    """Raised when signing or verification is requested for an unknown algorithm."""


class KeyMaterialError(TokenError):
    """Raised when the key is missing or unusable for the requested algorithm."""
