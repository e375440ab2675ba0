"""SQLAlchemy adapter for user persistence queries."""

from __future__ import annotations

from typing import Any, cast

import sqlalchemy as sa
from sqlalchemy.engine import CursorResult, RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_directory.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserCreateInput,
    UserPage,
    UserRecord,
    UserRepositoryPort,
    UserUpdateInput,
)
from user_directory.infrastructure.db.metadata import users

_LIKE_ESCAPE = "\\"


def _is_duplicate_email_error(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "email" in message


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


def _to_user_record(row: RowMapping) -> UserRecord:
    return UserRecord(
        user_id=int(row["id"]),
        name=cast(str, row["name"]),
        email=cast(str, row["email"]),
    )


class SqlAlchemyUserRepository(UserRepositoryPort):
    """User repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_user(self, payload: UserCreateInput) -> UserRecord:
        """Insert a new user row and return the created record."""

        statement = (
            sa.insert(users)
            .values(
                name=payload.name,
                email=payload.email,
                password_hash=payload.password_hash,
            )
            .returning(users.c.id, users.c.name, users.c.email)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_email_error(error):
                    raise DuplicateUserEmailError("email already registered") from error
                raise

        return _to_user_record(result.mappings().one())

    async def list_users(self) -> list[UserRecord]:
        """Return all users ordered by id."""

        statement = sa.select(users.c.id, users.c.name, users.c.email).order_by(users.c.id)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        return [_to_user_record(row) for row in result.mappings().all()]

    async def get_by_id(self, *, user_id: int) -> UserRecord | None:
        statement = (
            sa.select(users.c.id, users.c.name, users.c.email)
            .where(users.c.id == user_id)
            .limit(1)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_user_record(row)

    async def search_by_name(self, *, name: str, limit: int, offset: int) -> UserPage:
        """Return one page of case-insensitive substring matches and total count."""

        condition = users.c.name.ilike(f"%{_escape_like(name)}%", escape=_LIKE_ESCAPE)
        page_statement = (
            sa.select(users.c.id, users.c.name, users.c.email)
            .where(condition)
            .order_by(users.c.id)
            .limit(limit)
            .offset(offset)
        )
        count_statement = sa.select(sa.func.count()).select_from(users).where(condition)

        async with self._session_factory() as session:
            page_result = await session.execute(page_statement)
            count_result = await session.execute(count_statement)

        return UserPage(
            count=int(count_result.scalar_one()),
            users=[_to_user_record(row) for row in page_result.mappings().all()],
        )

    async def update_user(self, *, user_id: int, payload: UserUpdateInput) -> UserRecord | None:
        """Apply non-null fields to one row and return it, or None when missing."""

        values: dict[str, Any] = {"updated_at": sa.func.current_timestamp()}
        if payload.name is not None:
            values["name"] = payload.name
        if payload.email is not None:
            values["email"] = payload.email

        statement = (
            sa.update(users)
            .where(users.c.id == user_id)
            .values(**values)
            .returning(users.c.id, users.c.name, users.c.email)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().first()
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                if _is_duplicate_email_error(error):
                    raise DuplicateUserEmailError("email already registered") from error
                raise

        if row is None:
            return None
        return _to_user_record(row)

    async def delete_user(self, *, user_id: int) -> bool:
        statement = sa.delete(users).where(users.c.id == user_id)

        async with self._session_factory() as session:
            result = cast(CursorResult[Any], await session.execute(statement))
            await session.commit()

        return result.rowcount > 0

    async def get_password_hash_by_email(self, *, email: str) -> str | None:
        """Return stored hash for an exact email match; NULL hashes read as None."""

        statement = (
            sa.select(users.c.password_hash)
            .where(users.c.email == email)
            .limit(1)
        )

        async with self._session_factory() as session:
            result = await session.execute(statement)

        password_hash = result.scalar_one_or_none()
        if password_hash is None:
            return None
        return cast(str, password_hash)
