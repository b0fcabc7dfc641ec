"""
HMAC signing and verification.

The keyed-hash primitives come from PyJWT's ``HMACAlgorithm``. The algorithm
is always chosen by the caller. It is never taken from the token header,
because the header is attacker-controlled (algorithm confusion).
"""

from __future__ import annotations

import hmac
import logging
from typing import Any

from jwt.algorithms import HMACAlgorithm
from jwt.exceptions import InvalidKeyError

from .codec import assemble, decode_segment, decode_signature, encode, split
from .errors import KeyMaterialError, UnsupportedAlgorithmError
from .models import NONE_ALGORITHM, SUPPORTED_ALGORITHMS

__all__ = ["compute_signature", "check_signature", "sign", "verify"]

logger = logging.getLogger(__name__)

_HMAC_PROVIDERS: dict[str, HMACAlgorithm] = {
    "HS256": HMACAlgorithm(HMACAlgorithm.SHA256),
    "HS384": HMACAlgorithm(HMACAlgorithm.SHA384),
    "HS512": HMACAlgorithm(HMACAlgorithm.SHA512),
}


def _require_supported(algorithm: str) -> None:
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(
            f"Unsupported algorithm: {algorithm!r}. "
            f"Expected one of: {', '.join(SUPPORTED_ALGORITHMS)}."
        )


def _prepare_key(provider: HMACAlgorithm, algorithm: str, key: str | bytes | None) -> bytes:
    if key is None or key == "" or key == b"":
        raise KeyMaterialError(f"A secret key is required for {algorithm}.")
    if not isinstance(key, (str, bytes)):
        raise KeyMaterialError(
            f"Key must be str or bytes, got {type(key).__name__}."
        )
    try:
        return provider.prepare_key(key)
    except InvalidKeyError as exc:
        raise KeyMaterialError(f"Unusable key for {algorithm}: {exc}") from exc


def compute_signature(signing_input: str, algorithm: str, key: str | bytes | None) -> bytes:
    """Return the raw signature of *signing_input* under *algorithm*.

    ``none`` returns ``b""`` without touching the key.

    Raises:
        UnsupportedAlgorithmError: *algorithm* is not HS256/HS384/HS512/none.
        KeyMaterialError: The key is missing or rejected for an HMAC algorithm.
    """
    _require_supported(algorithm)
    if algorithm == NONE_ALGORITHM:
        return b""

    provider = _HMAC_PROVIDERS[algorithm]
    key_bytes = _prepare_key(provider, algorithm, key)
    return provider.sign(signing_input.encode("ascii"), key_bytes)


def check_signature(
    signing_input: str,
    algorithm: str,
    key: str | bytes | None,
    signature: bytes,
) -> bool:
    """Recompute the signature and compare it in constant time."""
    expected = compute_signature(signing_input, algorithm, key)
    return hmac.compare_digest(expected, signature)


def sign(
    header: dict[str, Any],
    payload: dict[str, Any],
    algorithm: str,
    key: str | bytes | None = None,
) -> str:
    """Serialize, sign and assemble a token.

    The header's ``alg`` is set to *algorithm*: added when missing,
    overwritten (with a warning) when it disagrees.
    """
    _require_supported(algorithm)

    header = dict(header)
    declared = header.get("alg")
    if declared is None:
        header = {"alg": algorithm, **header}
    elif declared != algorithm:
        logger.warning(
            "Header declares alg=%r but signing with %s; overwriting header value",
            declared, algorithm,
        )
        header["alg"] = algorithm

    signing_input = encode(header, payload)
    signature = compute_signature(signing_input, algorithm, key)
    logger.debug("Signed token with %s (%d claims)", algorithm, len(payload))
    return assemble(signing_input, signature)


def verify(token: str, algorithm: str, key: str | bytes | None = None) -> bool:
    """Check *token*'s signature using the caller's expected *algorithm*.

    A header that declares a different algorithm never verifies.

    Raises:
        MalformedTokenError, DecodeError, ParseError: The token is not
            structurally decodable.
        UnsupportedAlgorithmError, KeyMaterialError: As for signing.
    """
    _require_supported(algorithm)
    if algorithm != NONE_ALGORITHM:
        _prepare_key(_HMAC_PROVIDERS[algorithm], algorithm, key)

    header_seg, payload_seg, signature_seg = split(token)
    header = decode_segment(header_seg, "header")
    decode_segment(payload_seg, "payload")
    signature = decode_signature(signature_seg)

    declared = header.get("alg")
    if declared != algorithm:
        logger.warning(
            "Token header declares alg=%r, expected %s; rejecting", declared, algorithm,
        )
        return False

    valid = check_signature(f"{header_seg}.{payload_seg}", algorithm, key, signature)
    logger.debug("Signature verification with %s: %s", algorithm, "ok" if valid else "mismatch")
    return valid
