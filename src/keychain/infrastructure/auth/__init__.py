"""Authentication infrastructure components.

This module provides password hashing, claims encoding, and JWT token
services.
"""

from keychain.infrastructure.auth.claims_codec import ClaimsCodec
from keychain.infrastructure.auth.jwt_service import (
    SUPPORTED_ALGORITHMS,
    TokenService,
    utc_now,
)
from keychain.infrastructure.auth.password_hasher import PasswordHasher

__all__ = [
    "ClaimsCodec",
    "PasswordHasher",
    "SUPPORTED_ALGORITHMS",
    "TokenService",
    "utc_now",
]
