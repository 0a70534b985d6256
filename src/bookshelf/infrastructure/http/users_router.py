"""FastAPI router for user registration, login, profile and deletion endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, Response

from bookshelf.application.dto.user_models import (
    CredentialsRequest,
    UserCreatedResponse,
    UserCreateRequest,
    UserPatchRequest,
    UserProfileEnvelope,
    UserProfileResponse,
)
from bookshelf.application.services.auth_service import AuthOutcome, AuthService
from bookshelf.application.services.user_service import (
    EmailAlreadyRegisteredError,
    InvalidUserEmailError,
    InvalidUserPasswordError,
    NoUserChangesError,
    UserNotFoundError,
    UserService,
)

INVALID_CREDENTIALS_DETAIL = "invalid credentials"


def build_users_router(*, user_service: UserService, auth_service: AuthService) -> APIRouter:
    """Build router exposing user account endpoints."""

    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("", status_code=201, response_model=UserCreatedResponse)
    async def register_user(payload: UserCreateRequest) -> UserCreatedResponse:
        try:
            created = await user_service.register_user(payload=payload.to_registration())
        except (InvalidUserEmailError, InvalidUserPasswordError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except EmailAlreadyRegisteredError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return UserCreatedResponse(message="user created", id=created.user_id)

    @router.post("/login", response_model=UserProfileEnvelope)
    async def login(payload: CredentialsRequest) -> UserProfileEnvelope:
        result = await auth_service.authenticate(email=payload.email, password=payload.password)
        if result.outcome is not AuthOutcome.SUCCESS or result.user is None:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL)
        return UserProfileEnvelope(
            message="login approved",
            data=UserProfileResponse.from_record(result.user),
        )

    @router.patch("/{user_id}", response_model=UserProfileEnvelope)
    async def update_user(user_id: UUID, payload: UserPatchRequest) -> UserProfileEnvelope:
        try:
            updated = await user_service.update_user(user_id=user_id, patch=payload.to_patch())
        except UserNotFoundError as exc:
            raise HTTPException(status_code=404, detail="user not found") from exc
        except InvalidUserEmailError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except (NoUserChangesError, EmailAlreadyRegisteredError) as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return UserProfileEnvelope(
            message="changes saved",
            data=UserProfileResponse.from_record(updated),
        )

    @router.delete("", status_code=204, response_class=Response)
    async def delete_account(payload: CredentialsRequest) -> Response:
        result = await auth_service.delete_account(
            email=payload.email,
            password=payload.password,
        )
        if result.outcome is not AuthOutcome.SUCCESS:
            raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_DETAIL)
        return Response(status_code=204)

    return router
