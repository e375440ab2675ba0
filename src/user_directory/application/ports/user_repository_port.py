"""Port for user persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class DuplicateUserEmailError(ValueError):
    """Raised when an insert or update would duplicate an existing email."""


@dataclass(frozen=True)
class UserRecord:
    """Public user persistence model; never carries the password hash."""

    user_id: int
    name: str
    email: str


@dataclass(frozen=True)
class UserCreateInput:
    """Input payload for creating one user row."""

    name: str
    email: str
    password_hash: str | None = None


@dataclass(frozen=True)
class UserUpdateInput:
    """Partial update payload; `None` fields keep their stored value."""

    name: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class UserPage:
    """One page of search results plus the unpaginated match count."""

    count: int
    users: list[UserRecord]


class UserRepositoryPort(Protocol):
    """User repository contract."""

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert one user row or raise `DuplicateUserEmailError`."""

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""

    async def get_by_id(self, *, user_id: int) -> UserRecord | None:
        """Return user by id or None."""

    async def search_by_name(self, *, name: str, limit: int, offset: int) -> UserPage:
        """Return case-insensitive name matches with total match count."""

    async def update_user(self, *, user_id: int, payload: UserUpdateInput) -> UserRecord | None:
        """Apply partial update and return the updated row, or None when missing."""

    async def delete_user(self, *, user_id: int) -> bool:
        """Delete user row and return whether one row was removed."""

    async def get_password_hash_by_email(self, *, email: str) -> str | None:
        """Return stored password hash for email, or None when absent."""
