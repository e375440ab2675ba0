"""Parser for `Authorization: Basic <base64(identifier:secret)>` headers."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from enum import StrEnum

BASIC_SCHEME_PREFIX = "Basic "


class MalformedReason(StrEnum):
    """Every way a Basic authorization header can be rejected."""

    MISSING = "missing"
    SCHEME = "scheme"
    BASE64 = "base64"
    UTF8 = "utf8"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class BasicCredentials:
    """Request-scoped identifier/secret pair decoded from one header."""

    identifier: str
    secret: str = field(repr=False)


@dataclass(frozen=True)
class MalformedAuthorization:
    """Rejected header; carries no identity information."""

    reason: MalformedReason


BasicAuthParseResult = BasicCredentials | MalformedAuthorization


def parse_basic_authorization(authorization_header: str | None) -> BasicAuthParseResult:
    """Decode a Basic authorization header into credentials or a rejection.

    The scheme prefix match is case-sensitive. The identifier is everything
    before the first `:`; the secret keeps any further `:` characters. No
    trimming or case-folding is applied to either part.
    """

    if authorization_header is None:
        return MalformedAuthorization(reason=MalformedReason.MISSING)
    if not authorization_header.startswith(BASIC_SCHEME_PREFIX):
        return MalformedAuthorization(reason=MalformedReason.SCHEME)

    encoded = authorization_header[len(BASIC_SCHEME_PREFIX) :]
    try:
        decoded_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return MalformedAuthorization(reason=MalformedReason.BASE64)

    try:
        decoded = decoded_bytes.decode("utf-8")
    except UnicodeDecodeError:
        return MalformedAuthorization(reason=MalformedReason.UTF8)

    identifier, separator, secret = decoded.partition(":")
    if not separator:
        return MalformedAuthorization(reason=MalformedReason.SEPARATOR)

    return BasicCredentials(identifier=identifier, secret=secret)
