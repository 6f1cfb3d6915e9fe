"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rhinoblog.core.security import MAX_PASSWORD_BYTES
from rhinoblog.models import ContributorType, UserRole


def _check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    """Schema for self-service registration."""

    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    email: str | None = Field(None, max_length=255)

    @field_validator("username")
    @classmethod
    def _strip_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Username must be at least 3 characters")
        return value

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return _check_password_length(value)


class LoginRequest(BaseModel):
    """Credentials exchanged for an access token."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """Account details returned to the account owner and admins."""

    id: int
    username: str
    email: str | None
    role: UserRole
    contributor_type: ContributorType | None
    verified: bool
    is_admin: bool
    bio: str | None
    avatar_url: str | None
    profile_links: dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicUserResponse(BaseModel):
    """Public profile; contact details are omitted."""

    id: int
    username: str
    role: UserRole
    contributor_type: ContributorType | None
    verified: bool
    bio: str | None
    avatar_url: str | None
    profile_links: dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CurrentUserResponse(UserResponse):
    """The caller's own account plus derived trust information."""

    trust_score: int
    can_publish_directly: bool
    can_apply_as_contributor: bool


class AuthResponse(BaseModel):
    """Returned by register and login."""

    user: UserResponse
    token: str


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    email: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=2048)
    profile_links: dict[str, str] | None = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)

    @field_validator("new_password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        return _check_password_length(value)


class ContributorApplication(BaseModel):
    """Request to become a contributor of the given type."""

    contributor_type: ContributorType


class AdminUserCreate(RegisterRequest):
    """Admin-created account with an explicit role."""

    role: UserRole = UserRole.USER
    contributor_type: ContributorType | None = None


class RoleUpdate(BaseModel):
    role: UserRole
    contributor_type: ContributorType | None = Field(
        None, description="Required when role is contributor"
    )
