from __future__ import annotations

import pytest

from jwt_inspect.errors import ParseError
from jwt_inspect.serializer import parse, parse_object, serialize


def test_serialize_is_compact() -> None:
    assert serialize({"alg": "HS256", "typ": "JWT"}) == '{"alg":"HS256","typ":"JWT"}'


def test_numbers_keep_their_type() -> None:
    value = parse('{"exp": 1516239022, "ratio": 0.5}')
    assert value["exp"] == 1516239022 and isinstance(value["exp"], int)
    assert isinstance(value["ratio"], float)


def test_unknown_fields_keep_their_order() -> None:
    value = parse('{"z": 1, "custom": {"nested": [1, 2]}, "a": null}')
    assert list(value) == ["z", "custom", "a"]
    assert parse(serialize(value)) == value


def test_parse_accepts_utf8_bytes() -> None:
    assert parse('{"name": "Zoë"}'.encode("utf-8")) == {"name": "Zoë"}


@pytest.mark.parametrize("text", ['{"a": ', "not json", '{"a": NaN}', "[1, Infinity]"])
def test_parse_errors_carry_a_message(text: str) -> None:
    with pytest.raises(ParseError, match="Invalid JSON"):
        parse(text)


def test_parse_rejects_invalid_utf8() -> None:
    with pytest.raises(ParseError, match="UTF-8"):
        parse(b"\xff\xfe{}")


def test_parse_object_requires_a_mapping() -> None:
    with pytest.raises(ParseError, match="header must be a JSON object"):
        parse_object("[1, 2]", "header")


@pytest.mark.parametrize("value", [{"x": float("nan")}, {"x": object()}])
def test_serialize_rejects_unrepresentable_values(value: dict) -> None:
    with pytest.raises(ParseError):
        serialize(value)
