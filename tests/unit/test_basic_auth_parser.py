from __future__ import annotations

import base64

import pytest

from user_directory.domain.auth.basic_auth import (
    BasicCredentials,
    MalformedAuthorization,
    MalformedReason,
    parse_basic_authorization,
)


def _basic(raw: bytes) -> str:
    return "Basic " + base64.b64encode(raw).decode("ascii")


def test_valid_header_yields_identifier_and_secret() -> None:
    result = parse_basic_authorization(_basic(b"alice@example.com:secret123"))

    assert result == BasicCredentials(identifier="alice@example.com", secret="secret123")


def test_secret_keeps_colons_after_first_separator() -> None:
    result = parse_basic_authorization(_basic(b"alice@example.com:se:cr:et"))

    assert isinstance(result, BasicCredentials)
    assert result.identifier == "alice@example.com"
    assert result.secret == "se:cr:et"


def test_empty_identifier_and_secret_are_accepted_as_given() -> None:
    result = parse_basic_authorization(_basic(b":"))

    assert result == BasicCredentials(identifier="", secret="")


def test_identifier_is_not_trimmed_or_case_folded() -> None:
    result = parse_basic_authorization(_basic(b" Alice@Example.com :pw"))

    assert isinstance(result, BasicCredentials)
    assert result.identifier == " Alice@Example.com "


def test_secret_is_hidden_from_repr() -> None:
    result = parse_basic_authorization(_basic(b"alice@example.com:secret123"))

    assert "secret123" not in repr(result)


@pytest.mark.parametrize(
    ("header", "reason"),
    [
        (None, MalformedReason.MISSING),
        ("Bearer xyz", MalformedReason.SCHEME),
        ("basic " + base64.b64encode(b"a:b").decode("ascii"), MalformedReason.SCHEME),
        ("Basic", MalformedReason.SCHEME),
        ("Basic !!!not-base64!!!", MalformedReason.BASE64),
        ("Basic YWJj ZA==", MalformedReason.BASE64),
        ("Basic YQ", MalformedReason.BASE64),
        ("Basic é", MalformedReason.BASE64),
        (_basic(b"\xff\xfe:pw"), MalformedReason.UTF8),
        (_basic(b"nocolon"), MalformedReason.SEPARATOR),
        ("Basic ", MalformedReason.SEPARATOR),
    ],
)
def test_rejected_headers_report_reason(header: str | None, reason: MalformedReason) -> None:
    result = parse_basic_authorization(header)

    assert result == MalformedAuthorization(reason=reason)
