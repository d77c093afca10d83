"""API request and response schemas."""

from keychain.infrastructure.api.schemas.auth_schemas import (
    AuthResponse,
    ErrorDetail,
    ErrorResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "ErrorDetail",
    "ErrorResponse",
    "LoginRequest",
    "LogoutResponse",
    "RegisterRequest",
    "TokenResponse",
    "UpdateProfileRequest",
    "UserResponse",
]
