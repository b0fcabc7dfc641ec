from __future__ import annotations

import pytest

from jwt_inspect import base64url
from jwt_inspect.codec import assemble, encode

# Fixed evaluation instant for every time-dependent test.
NOW = 1_700_000_000

SECRET = "k" * 64

# The well-known jwt.io example token, signed with "your-256-bit-secret".
JWT_IO_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiIxMjM0NTY3ODkwIiwibmFtZSI6IkpvaG4gRG9lIiwiaWF0IjoxNTE2MjM5MDIyfQ"
    ".SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
)
JWT_IO_SECRET = "your-256-bit-secret"
JWT_IO_HEADER = {"alg": "HS256", "typ": "JWT"}
JWT_IO_PAYLOAD = {"sub": "1234567890", "name": "John Doe", "iat": 1516239022}


def make_token(header: dict, payload: dict, signature: bytes = b"not-a-real-signature") -> str:
    """Build a structurally valid token with an arbitrary signature."""
    return assemble(encode(header, payload), signature)


def make_raw_token(payload_json: str, header: dict | None = None) -> str:
    """Build a token whose payload is the exact JSON text given."""
    header_seg = encode(header or {"alg": "HS256"}, {}).split(".")[0]
    payload_seg = base64url.encode(payload_json.encode("utf-8"))
    return assemble(f"{header_seg}.{payload_seg}", b"not-a-real-signature")


@pytest.fixture(autouse=True)
def _no_secret_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_INSPECT_SECRET", raising=False)
