"""
Core token codec.

Splits a token into its three segments, decodes the header and payload, and
builds the signing input and the final token string when signing.
Decoding does not verify the signature; see :mod:`jwt_inspect.signer`.
"""

from __future__ import annotations

import logging
from typing import Any

from . import base64url
from .errors import DecodeError, MalformedTokenError, ParseError
from .models import DecodedToken, numeric_date
from .serializer import parse_object, serialize

__all__ = ["split", "decode_segment", "decode_signature", "decode", "encode", "assemble"]

logger = logging.getLogger(__name__)


def split(token: str) -> tuple[str, str, str]:
    """Split *token* into ``(header, payload, signature)`` segments.

    Raises:
        MalformedTokenError: If the token is empty or does not have exactly
            three dot-separated parts.
    """
    token = token.strip()

    if not token:
        raise MalformedTokenError("Token is empty.")

    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError(
            f"Invalid JWT format: expected 3 parts (header.payload.signature), "
            f"got {len(parts)}."
        )
    return parts[0], parts[1], parts[2]


def decode_segment(segment: str, label: str) -> dict[str, Any]:
    """Decode a single base64url-encoded JWT segment into a dict."""
    try:
        raw = base64url.decode(segment)
    except DecodeError as exc:
        raise DecodeError(f"Could not decode {label}: {exc}") from exc
    try:
        return parse_object(raw, label)
    except ParseError as exc:
        raise ParseError(f"Could not parse {label}: {exc}") from exc


def decode_signature(segment: str) -> bytes:
    """Decode the signature segment into raw bytes (empty for unsigned tokens)."""
    try:
        return base64url.decode(segment)
    except DecodeError as exc:
        raise DecodeError(f"Could not decode signature: {exc}") from exc


def decode(token: str, now: int) -> DecodedToken:
    """
    Decode a JWT token string into its components, evaluated at *now*.

    *now* is the current time in Unix seconds. It only feeds the derived
    ``is_expired`` and ``time_remaining`` fields, so decoding the same token
    at the same instant always gives an equal result.
    Signature verification is **not** performed.

    Raises:
        MalformedTokenError: Wrong number of segments.
        DecodeError: A segment is not valid base64url.
        ParseError: Header or payload is not a JSON object, or the header
            has no string ``alg``.
    """
    header_seg, payload_seg, signature_seg = split(token)

    header = decode_segment(header_seg, "header")
    if not isinstance(header.get("alg"), str):
        raise ParseError("Could not parse header: missing or non-string 'alg' field")
    payload = decode_segment(payload_seg, "payload")

    decode_signature(signature_seg)

    exp = numeric_date(payload, "exp")
    iat = numeric_date(payload, "iat")

    decoded = DecodedToken(
        header=header,
        payload=payload,
        header_segment=header_seg,
        payload_segment=payload_seg,
        signature_segment=signature_seg,
        is_expired=exp is not None and exp <= now,
        time_remaining=exp - now if exp is not None else None,
        issued_at=iat,
    )
    logger.debug(
        "Decoded token: alg=%s, %d payload claims, signature %d chars",
        header["alg"], len(payload), len(signature_seg),
    )
    return decoded


def encode(header: dict[str, Any], payload: dict[str, Any]) -> str:
    """Build the signing input ``b64(header) + "." + b64(payload)``."""
    header_seg = base64url.encode(serialize(header).encode("utf-8"))
    payload_seg = base64url.encode(serialize(payload).encode("utf-8"))
    return f"{header_seg}.{payload_seg}"


def assemble(signing_input: str, signature: bytes) -> str:
    """Append the signature segment; an empty signature leaves a bare trailing dot."""
    return f"{signing_input}.{base64url.encode(signature)}"
