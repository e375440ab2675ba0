"""Pydantic models for user directory HTTP contracts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from user_directory.application.ports.user_repository_port import UserPage, UserRecord


class StrictModel(BaseModel):
    """Base model with strict unknown-field rejection."""

    model_config = ConfigDict(extra="forbid")


class UserCreateRequest(StrictModel):
    """HTTP request model for creating a user without credentials."""

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)


class UserRegisterRequest(UserCreateRequest):
    """HTTP request model for registering a user with a password."""

    password: str = Field(min_length=1, repr=False)


class UserUpdateRequest(StrictModel):
    """HTTP request model for partial user updates."""

    name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=1)


class UserCreatedResponse(StrictModel):
    """HTTP response model carrying the id of a new user row."""

    id: int


class UserResponse(StrictModel):
    """Public user view."""

    id: int
    name: str
    email: str

    @classmethod
    def from_record(cls, record: UserRecord) -> UserResponse:
        return cls(id=record.user_id, name=record.name, email=record.email)


class UserListResponse(StrictModel):
    """Paginated search response with total match count."""

    count: int
    users: list[UserResponse]

    @classmethod
    def from_page(cls, page: UserPage) -> UserListResponse:
        return cls(
            count=page.count,
            users=[UserResponse.from_record(user) for user in page.users],
        )


class AuthSuccessResponse(StrictModel):
    """Generic success body for Basic authentication."""

    message: str = "authentication successful"
