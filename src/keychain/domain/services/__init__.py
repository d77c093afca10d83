"""Domain services for JWT Keychain.

Services contain policy that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from keychain.domain.services.credential_store import UserCredentialStore
from keychain.domain.services.identity import (
    IdentityConverter,
    IntIdentity,
    StringIdentity,
    UUIDIdentity,
)
from keychain.domain.services.password_validator import (
    MIN_PASSWORD_LENGTH,
    PasswordValidationError,
    PasswordValidator,
    default_password_validator,
)

__all__ = [
    "IdentityConverter",
    "IntIdentity",
    "MIN_PASSWORD_LENGTH",
    "PasswordValidationError",
    "PasswordValidator",
    "StringIdentity",
    "UUIDIdentity",
    "UserCredentialStore",
    "default_password_validator",
]
