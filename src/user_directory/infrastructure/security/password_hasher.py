"""Bcrypt password hasher adapter.

Stored hashes use the modular crypt format `$2b$<cost>$<salt><digest>`, so the
cost factor and salt needed for verification travel with the hash itself.
"""

from __future__ import annotations

import hmac

import bcrypt

from user_directory.application.ports.password_hasher_port import (
    PasswordHasherPort,
    PasswordHashingError,
)

DEFAULT_BCRYPT_ROUNDS = 12
# bcrypt ignores input past this many bytes; newer releases reject it outright.
_BCRYPT_MAX_PASSWORD_BYTES = 72
# Stored hashes above this cost (or the configured one) are rejected unverified.
_MAX_VERIFY_ROUNDS = 16


def _encode_password(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher(PasswordHasherPort):
    """Password hashing adapter using bcrypt."""

    def __init__(self, *, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        try:
            salt = bcrypt.gensalt(rounds=self._rounds)
            hashed = bcrypt.hashpw(_encode_password(password), salt)
        except (OSError, NotImplementedError) as error:
            raise PasswordHashingError("password hashing unavailable") from error
        return hashed.decode("ascii")

    def verify_password(self, *, password: str, password_hash: str) -> bool:
        cost = _parse_cost(password_hash)
        if cost is None or cost > max(self._rounds, _MAX_VERIFY_ROUNDS):
            return False
        try:
            stored = password_hash.encode("ascii")
            candidate = bcrypt.hashpw(_encode_password(password), stored)
        except ValueError:
            return False
        return hmac.compare_digest(candidate, stored)

    def needs_rehash(self, password_hash: str) -> bool:
        """Return whether a stored hash was produced with a different cost factor."""

        return _parse_cost(password_hash) != self._rounds


def _parse_cost(password_hash: str) -> int | None:
    parts = password_hash.split("$")
    if len(parts) != 4 or not (parts[2].isascii() and parts[2].isdigit()):
        return None
    return int(parts[2])
