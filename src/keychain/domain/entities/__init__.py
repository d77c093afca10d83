"""Domain entities for JWT Keychain.

Entities are plain dataclasses and protocols that describe users, the
transient payloads acting on them, and token claims. They have no
dependencies on infrastructure or external frameworks.
"""

from keychain.domain.entities.claims import RESERVED_CLAIMS, Claims
from keychain.domain.entities.user import (
    ClaimSubject,
    Credentials,
    Identifiable,
    KeychainUser,
    PasswordBearing,
    ProfileUpdatable,
    ProfileUpdate,
    PublicRepresentable,
    Registration,
)

__all__ = [
    "Claims",
    "ClaimSubject",
    "Credentials",
    "Identifiable",
    "KeychainUser",
    "PasswordBearing",
    "ProfileUpdatable",
    "ProfileUpdate",
    "PublicRepresentable",
    "RESERVED_CLAIMS",
    "Registration",
]
