"""FastAPI router for HTTP Basic authentication."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException

from user_directory.application.dto.user_models import AuthSuccessResponse
from user_directory.application.services.auth_service import AuthOutcome, AuthService

_BASIC_CHALLENGE = {"WWW-Authenticate": "Basic"}


def build_auth_router(*, auth_service: AuthService) -> APIRouter:
    """Build router exposing the Basic authentication endpoint."""

    router = APIRouter(tags=["auth"])

    @router.post("/auth", response_model=AuthSuccessResponse)
    async def basic_auth(
        authorization: Annotated[str | None, Header()] = None,
    ) -> AuthSuccessResponse:
        result = await auth_service.authenticate(authorization_header=authorization)

        if result.outcome is AuthOutcome.MALFORMED_REQUEST:
            raise HTTPException(
                status_code=401,
                detail="authorization header required",
                headers=_BASIC_CHALLENGE,
            )
        if result.outcome is AuthOutcome.INVALID_CREDENTIALS:
            raise HTTPException(
                status_code=401,
                detail="invalid credentials",
                headers=_BASIC_CHALLENGE,
            )

        return AuthSuccessResponse()

    return router
