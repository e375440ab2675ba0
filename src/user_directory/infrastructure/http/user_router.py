"""FastAPI router for user directory CRUD, search, and registration endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Response

from user_directory.application.dto.user_models import (
    UserCreatedResponse,
    UserCreateRequest,
    UserListResponse,
    UserRegisterRequest,
    UserResponse,
    UserUpdateRequest,
)
from user_directory.application.ports.password_hasher_port import PasswordHashingError
from user_directory.application.ports.user_repository_port import (
    DuplicateUserEmailError,
    UserUpdateInput,
)
from user_directory.application.services.user_management_service import (
    UserManagementService,
    UserNotFoundError,
)

DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100
# `users.id` is a 32-bit INTEGER; LIMIT/OFFSET bind as 64-bit.
_MAX_USER_ID = 2**31 - 1
_MAX_SQL_BIGINT = 2**63 - 1

UserId = Annotated[int, Path(ge=1, le=_MAX_USER_ID)]


def build_user_router(*, user_service: UserManagementService) -> APIRouter:
    """Build router exposing user management endpoints."""

    router = APIRouter(tags=["users"])

    @router.post("/users", status_code=201, response_model=UserCreatedResponse)
    async def create_user(payload: UserCreateRequest) -> UserCreatedResponse:
        try:
            user = await user_service.create_user(name=payload.name, email=payload.email)
        except DuplicateUserEmailError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return UserCreatedResponse(id=user.user_id)

    @router.get("/users", response_model=list[UserResponse])
    async def list_users() -> list[UserResponse]:
        return [UserResponse.from_record(user) for user in await user_service.list_users()]

    # Registered before `/users/{user_id}` so the literal path wins.
    @router.get("/users/search", response_model=UserListResponse)
    async def search_users(
        name: str = "",
        limit: str | None = None,
        offset: str | None = None,
    ) -> UserListResponse:
        page = await user_service.search_users(
            name=name,
            limit=min(_parse_non_negative(limit, default=DEFAULT_SEARCH_LIMIT), MAX_SEARCH_LIMIT),
            offset=_parse_non_negative(offset, default=0),
        )
        return UserListResponse.from_page(page)

    @router.get("/users/{user_id}", response_model=UserResponse)
    async def get_user(user_id: UserId) -> UserResponse:
        try:
            user = await user_service.get_user(user_id=user_id)
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail="user not found") from exc
        return UserResponse.from_record(user)

    @router.put("/users/{user_id}", response_model=UserResponse)
    async def update_user(user_id: UserId, payload: UserUpdateRequest) -> UserResponse:
        try:
            user = await user_service.update_user(
                user_id=user_id,
                payload=UserUpdateInput(name=payload.name, email=payload.email),
            )
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail="user not found") from exc
        except DuplicateUserEmailError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return UserResponse.from_record(user)

    @router.delete("/users/{user_id}", status_code=204)
    async def delete_user(user_id: UserId) -> Response:
        try:
            await user_service.delete_user(user_id=user_id)
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail="user not found") from exc
        return Response(status_code=204)

    @router.post("/register", status_code=201, response_model=UserCreatedResponse)
    async def register_user(payload: UserRegisterRequest) -> UserCreatedResponse:
        try:
            user = await user_service.register_user(
                name=payload.name,
                email=payload.email,
                password=payload.password,
            )
        except DuplicateUserEmailError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except PasswordHashingError as exc:
            raise HTTPException(status_code=500, detail="registration unavailable") from exc
        return UserCreatedResponse(id=user.user_id)

    return router


def _parse_non_negative(raw_value: str | None, *, default: int) -> int:
    """Parse one pagination query value, falling back to default when unusable."""

    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError:
        return default
    if value < 0 or value > _MAX_SQL_BIGINT:
        return default
    return value
