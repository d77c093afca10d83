"""Core JWT Keychain utilities.

This module exports core utilities for use throughout the application.
"""

from keychain.core.config import Settings, get_settings
from keychain.core.exceptions import (
    DuplicateIdentifierError,
    ErrorKind,
    IncorrectPasswordError,
    InvalidSignatureError,
    KeychainError,
    MalformedClaimsError,
    StoreUnavailableError,
    TokenExpiredError,
    UserNotFoundError,
    WeakCredentialError,
)
from keychain.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "bind_correlation_id",
    "clear_context",
    "ErrorKind",
    "KeychainError",
    "WeakCredentialError",
    "DuplicateIdentifierError",
    "UserNotFoundError",
    "IncorrectPasswordError",
    "InvalidSignatureError",
    "TokenExpiredError",
    "MalformedClaimsError",
    "StoreUnavailableError",
]
