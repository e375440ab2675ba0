"""Application service for user directory operations."""

from __future__ import annotations

import asyncio
import logging

from user_directory.application.ports.password_hasher_port import PasswordHasherPort
from user_directory.application.ports.user_repository_port import (
    UserCreateInput,
    UserPage,
    UserRecord,
    UserRepositoryPort,
    UserUpdateInput,
)

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    """Raised when a target user cannot be found for one operation."""

    def __init__(self, *, user_id: int) -> None:
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class UserManagementService:
    """Expose user CRUD, search, and registration use-cases."""

    def __init__(
        self,
        *,
        users: UserRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    async def create_user(self, *, name: str, email: str) -> UserRecord:
        """Create one user without credentials."""

        user = await self._users.create_user(UserCreateInput(name=name, email=email))
        logger.info("user_created user_id=%s", user.user_id)
        return user

    async def register_user(self, *, name: str, email: str, password: str) -> UserRecord:
        """Hash the plaintext password and create one user holding the hash."""

        password_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)
        user = await self._users.create_user(
            UserCreateInput(name=name, email=email, password_hash=password_hash)
        )
        logger.info("user_registered user_id=%s", user.user_id)
        return user

    async def list_users(self) -> list[UserRecord]:
        return await self._users.list_users()

    async def get_user(self, *, user_id: int) -> UserRecord:
        user = await self._users.get_by_id(user_id=user_id)
        if user is None:
            raise UserNotFoundError(user_id=user_id)
        return user

    async def search_users(self, *, name: str, limit: int, offset: int) -> UserPage:
        """Return one page of name matches and the total match count."""

        return await self._users.search_by_name(name=name, limit=limit, offset=offset)

    async def update_user(self, *, user_id: int, payload: UserUpdateInput) -> UserRecord:
        """Apply a partial update; absent fields keep their stored values."""

        user = await self._users.update_user(user_id=user_id, payload=payload)
        if user is None:
            raise UserNotFoundError(user_id=user_id)
        logger.info("user_updated user_id=%s", user_id)
        return user

    async def delete_user(self, *, user_id: int) -> None:
        deleted = await self._users.delete_user(user_id=user_id)
        if not deleted:
            raise UserNotFoundError(user_id=user_id)
        logger.info("user_deleted user_id=%s", user_id)
