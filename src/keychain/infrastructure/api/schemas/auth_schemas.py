"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=1024, description="User's password")
    name: str | None = Field(None, max_length=255, description="Display name")


class LoginRequest(BaseModel):
    """Request body for login."""

    email: EmailStr = Field(..., description="User's email address, normalised as on registration")
    password: str = Field(..., min_length=1, max_length=1024, description="User's password")


class UpdateProfileRequest(BaseModel):
    """Request body for a profile update. Omitted fields are left unchanged."""

    email: EmailStr | None = Field(None, description="New email address")
    password: str | None = Field(None, min_length=1, max_length=1024, description="New password")
    name: str | None = Field(None, max_length=255, description="New display name")


class UserResponse(BaseModel):
    """Public user information."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    name: str | None = Field(None, description="Display name")
    created_at: datetime = Field(..., description="When the user was created")
    updated_at: datetime = Field(..., description="When the user was last updated")


class TokenResponse(BaseModel):
    """Response carrying a freshly issued token."""

    token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Authorization scheme")
    expires_in: int = Field(..., description="Token expiration time in seconds")


class AuthResponse(TokenResponse):
    """Response for a successful login."""

    user: UserResponse = Field(..., description="User information")


class LogoutResponse(BaseModel):
    """Response for logout."""

    success: bool = Field(True, description="Whether the request was accepted")
    message: str = Field(..., description="Human-readable message")


class ErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")
    code: str | None = Field(None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Response body for every authentication failure."""

    error: str = Field(..., description="Error title")
    kind: str = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(default_factory=list, description="Validation details")
