"""Pydantic models for user account endpoints."""

from __future__ import annotations

from uuid import UUID

from pydantic import Field, field_validator

from bookshelf.application.dto.common import StrictModel
from bookshelf.application.ports.user_repository_port import UserPatch, UserRecord
from bookshelf.application.services.user_service import UserRegistrationRequest
from bookshelf.domain.auth.credentials import is_valid_email
from bookshelf.domain.users.language import DEFAULT_LANGUAGE, Language

NAME_MAX_LENGTH = 256
MIN_AGE = 1
MAX_AGE = 120


def _require_email_format(value: str) -> str:
    if not is_valid_email(value.strip()):
        raise ValueError("email must look like xxx@xxx.xx")
    return value


class UserCreateRequest(StrictModel):
    """HTTP request model for account registration."""

    firstname: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    age: int = Field(strict=True, ge=MIN_AGE, le=MAX_AGE)
    language: Language = DEFAULT_LANGUAGE
    email: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    password: str = Field(min_length=1)
    is_admin: bool = Field(default=False, strict=True, alias="isAdmin")

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        return _require_email_format(value)

    def to_registration(self) -> UserRegistrationRequest:
        return UserRegistrationRequest(
            firstname=self.firstname,
            name=self.name,
            age=self.age,
            email=self.email,
            password=self.password,
            language=self.language,
            is_admin=self.is_admin,
        )


class CredentialsRequest(StrictModel):
    """HTTP request model carrying login credentials."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        return _require_email_format(value)


class UserPatchRequest(StrictModel):
    """HTTP request model for partial profile updates; unknown keys are rejected."""

    firstname: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    age: int | None = Field(default=None, strict=True, ge=MIN_AGE, le=MAX_AGE)
    language: Language | None = None
    email: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)

    @field_validator("email")
    @classmethod
    def validate_optional_email_format(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _require_email_format(value)

    def to_patch(self) -> UserPatch:
        return UserPatch(
            firstname=self.firstname,
            name=self.name,
            age=self.age,
            language=self.language,
            email=self.email,
        )


class UserProfileResponse(StrictModel):
    """Public user profile; never includes the stored credential record."""

    id: UUID
    firstname: str
    name: str
    age: int
    language: Language
    email: str
    is_admin: bool = Field(alias="isAdmin")

    @classmethod
    def from_record(cls, record: UserRecord) -> UserProfileResponse:
        return cls(
            id=record.user_id,
            firstname=record.firstname,
            name=record.name,
            age=record.age,
            language=record.language,
            email=record.email,
            is_admin=record.is_admin,
        )


class UserProfileEnvelope(StrictModel):
    """Success envelope carrying one user profile."""

    success: bool = True
    message: str
    data: UserProfileResponse


class UserCreatedResponse(StrictModel):
    """Success envelope returned after registration."""

    success: bool = True
    message: str
    id: UUID
