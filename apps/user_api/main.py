"""user-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from user_directory.application.services.auth_service import AuthService
from user_directory.application.services.user_management_service import UserManagementService
from user_directory.config.settings import load_settings
from user_directory.infrastructure.db.session import (
    create_session_factory,
    dispose_session_factory,
)
from user_directory.infrastructure.db.user_repository import SqlAlchemyUserRepository
from user_directory.infrastructure.http.auth_router import build_auth_router
from user_directory.infrastructure.http.user_router import build_user_router
from user_directory.infrastructure.logging import configure_logging
from user_directory.infrastructure.security.password_hasher import (
    DEFAULT_BCRYPT_ROUNDS,
    BcryptPasswordHasher,
)

logger = logging.getLogger(__name__)


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> tuple[AuthService, UserManagementService]:
    """Build auth and user services sharing one repository and hasher."""

    users = SqlAlchemyUserRepository(session_factory)
    password_hasher = BcryptPasswordHasher(rounds=bcrypt_rounds)
    return (
        AuthService(users=users, password_hasher=password_hasher),
        UserManagementService(users=users, password_hasher=password_hasher),
    )


def create_app(
    *,
    auth_service: AuthService | None = None,
    user_service: UserManagementService | None = None,
    database_url: str | None = None,
    bcrypt_rounds: int | None = None,
) -> FastAPI:
    """Create FastAPI app for user management and Basic authentication routes.

    Services passed in are used as-is. Otherwise one session factory is built
    from `database_url` (or settings) and disposed when the app shuts down.
    """

    owned_session_factory: async_sessionmaker[AsyncSession] | None = None
    if auth_service is None or user_service is None:
        if database_url is None:
            settings = load_settings()
            configure_logging(level=settings.log_level)
            database_url = settings.database_url
            if bcrypt_rounds is None:
                bcrypt_rounds = settings.bcrypt_rounds
        owned_session_factory = create_session_factory(database_url)
        built_auth_service, built_user_service = build_services(
            owned_session_factory,
            bcrypt_rounds=bcrypt_rounds or DEFAULT_BCRYPT_ROUNDS,
        )
        auth_service = auth_service or built_auth_service
        user_service = user_service or built_user_service

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if owned_session_factory is not None:
            await dispose_session_factory(owned_session_factory)
            logger.info("user_api_store_disposed")

    app = FastAPI(lifespan=lifespan)
    app.include_router(build_auth_router(auth_service=auth_service))
    app.include_router(build_user_router(user_service=user_service))
    return app


def main() -> None:
    """Run user-api with uvicorn using environment settings."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    logger.info("user_api_starting host=%s port=%s", settings.api_host, settings.api_port)
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
