"""Tests for content-type dispatch and version extraction."""

from __future__ import annotations

import json

import pytest

from lbstatus.lib.adapters import JsonAdapter, PingResponse, PlainTextAdapter, get_adapter


def _response(body: str, content_type: str) -> PingResponse:
    return PingResponse(status=200, reason="OK", content_type=content_type, body=body.encode("utf-8"))


def test_adapters_json_body_yields_version_and_uptime() -> None:
    response = _response(json.dumps({"version": "abc123ef", "uptime": 42}), "application/json")

    info = get_adapter(response.content_type).parse("player", response)

    assert info == {"version": "abc123ef", "uptime": 42}


def test_adapters_json_charset_parameter_is_ignored() -> None:
    assert isinstance(get_adapter("application/json; charset=utf-8"), JsonAdapter)


def test_adapters_json_fields_are_optional() -> None:
    response = _response("{}", "application/json")

    assert JsonAdapter().parse("player", response) == {"version": None, "uptime": None}


def test_adapters_json_malformed_body_raises() -> None:
    """Malformed JSON raises so the checker can turn it into an error result."""

    with pytest.raises(ValueError):
        JsonAdapter().parse("player", _response("{not json", "application/json"))


def test_adapters_plain_text_finds_first_hex_token() -> None:
    response = _response("status ok rev a1b2c3d4e5", "text/plain")

    info = get_adapter(response.content_type).parse("que", response)

    assert info == {"version": "a1b2c3d4e5", "uptime": None}


@pytest.mark.parametrize("content_type", [None, "", "text/html", "application/octet-stream"])
def test_adapters_unknown_content_types_are_read_as_text(content_type: str) -> None:
    assert isinstance(get_adapter(content_type), PlainTextAdapter)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ("ok", None),
        ("abcd", None),
        ("version: deadbeefcafe", "deadbeefcafe"),
        ("x" + "a" * 41, None),
        ("built from 0123456789abcdef0123456789abcdef01234567 today",
         "0123456789abcdef0123456789abcdef01234567"),
    ],
)
def test_adapters_plain_text_hash_bounds(body: str, expected: str) -> None:
    """Hex tokens must be 5-40 characters and bounded by word boundaries.

    Args:
        body: Response body text.
        expected: Version expected to be extracted, or None.

    Returns:
        None: Assertions validate extraction.
    """

    assert PlainTextAdapter().parse("que", _response(body, "text/plain"))["version"] == expected
