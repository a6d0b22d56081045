"""Pydantic schemas for user and authentication API endpoints."""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from disrespect_tracker.schemas.common import UTCDateTime

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]{3,20}$")


class UserCreate(BaseModel):
    """Schema for user registration."""

    username: str = Field(description="Unique username (3-20 letters, numbers, underscores)")
    email: EmailStr = Field(description="Valid email address")
    name: str = Field(min_length=1, max_length=100, description="Display name")
    password: str = Field(
        min_length=8,
        max_length=100,
        description="Password (8-100 characters)",
    )
    invite_token: str | None = Field(
        default=None, description="Invite token from a friend's invite link"
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate username shape and normalize it to lowercase."""
        if not USERNAME_PATTERN.match(v):
            msg = "Username must be 3-20 characters, letters, numbers, and underscores only"
            raise ValueError(msg)
        return v.lower()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Store emails lowercase so login lookups match."""
        return v.lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Strip surrounding whitespace from the display name."""
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class UserUpdate(BaseModel):
    """Schema for updating the current user's profile."""

    name: str | None = Field(default=None, min_length=1, max_length=100, description="Display name")
    searchable: bool | None = Field(
        default=None, description="Whether other users can find you in search"
    )

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        """Strip surrounding whitespace from the display name."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name must not be blank")
        return v


class UserResponse(BaseModel):
    """Response schema for user data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    email: str = Field(description="Email address")
    name: str = Field(description="Display name")
    searchable: bool = Field(description="Whether the user appears in search")
    is_active: bool = Field(description="Whether the user account is active")
    created_at: UTCDateTime = Field(description="When the user was created")


class UserSummary(BaseModel):
    """Public user info shown to other users."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    name: str = Field(description="Display name")


class UserSearchResult(UserSummary):
    """Search hit annotated with the caller's friendship status."""

    friendship_status: str | None = Field(
        default=None, description="pending, accepted, or null if not connected"
    )


class UserSearchResponse(BaseModel):
    """Response for user search."""

    users: list[UserSearchResult] = Field(default_factory=list, description="Matching users")


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str = Field(description="Username or email")
    password: str = Field(description="Password")


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class RegisterResponse(BaseModel):
    """Response after registration: the new user plus a ready-to-use token."""

    user: UserResponse = Field(description="Created user")
    access_token: str = Field(description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    invite_redeemed: bool = Field(
        default=False, description="Whether an invite linked you with its sender"
    )


class TokenPayload(BaseModel):
    """Schema for decoded JWT token payload."""

    sub: str = Field(description="Subject (user ID as string)")
    sid: str = Field(description="Session token")
    exp: UTCDateTime = Field(description="Expiration timestamp")


class ForgotPasswordRequest(BaseModel):
    """Schema for requesting a password reset."""

    email: EmailStr = Field(description="Account email address")


class ResetPasswordRequest(BaseModel):
    """Schema for completing a password reset."""

    token: str = Field(min_length=1, description="Reset token from the reset link")
    password: str = Field(
        min_length=8,
        max_length=100,
        description="New password (8-100 characters)",
    )


class MessageResponse(BaseModel):
    """Generic success response."""

    success: bool = Field(default=True, description="Whether the operation succeeded")
