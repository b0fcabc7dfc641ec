from __future__ import annotations

import pytest

from jwt_inspect import base64url
from jwt_inspect.codec import assemble, decode, encode, split
from jwt_inspect.errors import DecodeError, MalformedTokenError, ParseError

from conftest import JWT_IO_HEADER, JWT_IO_PAYLOAD, JWT_IO_TOKEN, NOW, make_token


def test_decode_reference_token() -> None:
    decoded = decode(JWT_IO_TOKEN, NOW)

    assert decoded.header == JWT_IO_HEADER
    assert decoded.payload == JWT_IO_PAYLOAD
    assert decoded.signature_segment == "SflKxwRJSMeKKF2QT4fwpMeJf36POk6yJV_adQssw5c"
    assert decoded.algorithm == "HS256"
    assert decoded.issued_at == 1516239022
    assert decoded.issued_at_iso == "2018-01-18T01:30:22Z"
    assert decoded.is_expired is False
    assert decoded.time_remaining is None
    assert decoded.expires_in is None
    assert len(decoded.signature) == 32


def test_decode_is_repeatable() -> None:
    assert decode(JWT_IO_TOKEN, NOW) == decode(JWT_IO_TOKEN, NOW)


def test_decode_strips_surrounding_whitespace() -> None:
    assert decode(f"  {JWT_IO_TOKEN}\n", NOW).payload == JWT_IO_PAYLOAD


@pytest.mark.parametrize("token", ["abc.def", "a.b.c.d", "no-dots", "", "   "])
def test_wrong_segment_count_is_malformed(token: str) -> None:
    with pytest.raises(MalformedTokenError):
        decode(token, NOW)


def test_split_returns_three_segments() -> None:
    assert split("a.b.") == ("a", "b", "")


def test_bad_base64_header_is_a_decode_error() -> None:
    with pytest.raises(DecodeError, match="Could not decode header"):
        decode("!!!.e30.", NOW)


def test_non_json_header_is_a_parse_error() -> None:
    header = base64url.encode(b"not json")
    with pytest.raises(ParseError, match="Could not parse header"):
        decode(f"{header}.e30.", NOW)


def test_header_without_alg_is_a_parse_error() -> None:
    # "e30" is base64url for "{}"
    with pytest.raises(ParseError, match="alg"):
        decode("e30.e30.", NOW)


def test_payload_must_be_an_object() -> None:
    header = base64url.encode(b'{"alg":"none"}')
    payload = base64url.encode(b"[1,2,3]")
    with pytest.raises(ParseError, match="payload"):
        decode(f"{header}.{payload}.", NOW)


def test_bad_signature_alphabet_is_a_decode_error() -> None:
    token = JWT_IO_TOKEN.rsplit(".", 1)[0] + ".abc+def/"
    with pytest.raises(DecodeError, match="signature"):
        decode(token, NOW)


def test_unknown_header_fields_are_preserved() -> None:
    header = {"alg": "HS256", "typ": "JWT", "kid": "key-1", "x-custom": [1, {"a": None}]}
    decoded = decode(make_token(header, {}), NOW)
    assert decoded.header == header
    assert list(decoded.header) == list(header)


def test_expiry_boundary_is_expired() -> None:
    decoded = decode(make_token({"alg": "HS256"}, {"exp": NOW}), NOW)
    assert decoded.is_expired is True
    assert decoded.time_remaining == 0
    assert decoded.expires_in == "Expired"


def test_future_expiry_is_not_expired() -> None:
    decoded = decode(make_token({"alg": "HS256"}, {"exp": NOW + 90061}), NOW)
    assert decoded.is_expired is False
    assert decoded.time_remaining == 90061
    assert decoded.expires_in == "1d 1h"


def test_zero_expiry_is_not_treated_as_missing() -> None:
    decoded = decode(make_token({"alg": "HS256"}, {"exp": 0}), NOW)
    assert decoded.is_expired is True
    assert decoded.time_remaining == -NOW


def test_non_numeric_expiry_is_ignored_by_derived_fields() -> None:
    decoded = decode(make_token({"alg": "HS256"}, {"exp": "tomorrow", "iat": True}), NOW)
    assert decoded.is_expired is False
    assert decoded.time_remaining is None
    assert decoded.issued_at is None


def test_encode_matches_reference_signing_input() -> None:
    assert encode(JWT_IO_HEADER, JWT_IO_PAYLOAD) == JWT_IO_TOKEN.rsplit(".", 1)[0]


def test_assemble_without_signature_leaves_trailing_dot() -> None:
    signing_input = encode({"alg": "none"}, {"sub": "x"})
    assert assemble(signing_input, b"") == f"{signing_input}."
    assert decode(assemble(signing_input, b""), NOW).signature == b""
