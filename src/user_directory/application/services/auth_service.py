"""Application authentication service for HTTP Basic credential verification."""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from enum import StrEnum

from user_directory.application.ports.password_hasher_port import PasswordHasherPort
from user_directory.application.ports.user_repository_port import UserRepositoryPort
from user_directory.domain.auth.basic_auth import (
    MalformedAuthorization,
    parse_basic_authorization,
)

logger = logging.getLogger(__name__)


class AuthOutcome(StrEnum):
    """Supported authentication outcomes."""

    AUTHENTICATED = "authenticated"
    INVALID_CREDENTIALS = "invalid_credentials"
    MALFORMED_REQUEST = "malformed_request"


@dataclass(frozen=True)
class AuthResult:
    """Authentication result model."""

    outcome: AuthOutcome
    identifier: str | None = None


class AuthService:
    """Authenticate Basic credentials against stored password hashes."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._decoy_hash: str | None = None

    async def authenticate(self, *, authorization_header: str | None) -> AuthResult:
        """Resolve one authorization header to exactly one outcome and log it."""

        parsed = parse_basic_authorization(authorization_header)
        if isinstance(parsed, MalformedAuthorization):
            logger.info(
                "auth_basic_attempt outcome=%s reason=%s",
                AuthOutcome.MALFORMED_REQUEST.value,
                parsed.reason.value,
            )
            return AuthResult(outcome=AuthOutcome.MALFORMED_REQUEST)

        identifier = parsed.identifier
        password_hash = await self._users.get_password_hash_by_email(email=identifier)
        if password_hash is None:
            # Unknown identifiers still pay for one verification.
            await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=parsed.secret,
                password_hash=await self._get_decoy_hash(),
            )
            is_valid = False
        else:
            is_valid = await asyncio.to_thread(
                self._password_hasher.verify_password,
                password=parsed.secret,
                password_hash=password_hash,
            )

        outcome = AuthOutcome.AUTHENTICATED if is_valid else AuthOutcome.INVALID_CREDENTIALS
        # Identifier is client-supplied; repr keeps control characters escaped.
        logger.info(
            "auth_basic_attempt identifier=%r outcome=%s",
            identifier,
            outcome.value,
        )
        if not is_valid:
            return AuthResult(outcome=outcome)
        return AuthResult(outcome=outcome, identifier=identifier)

    async def _get_decoy_hash(self) -> str:
        if self._decoy_hash is None:
            self._decoy_hash = await asyncio.to_thread(
                self._password_hasher.hash_password,
                secrets.token_urlsafe(16),
            )
        return self._decoy_hash
