"""SQLAlchemy models for JWT Keychain tables.

All models inherit from the Base class defined in database.py.
"""

from keychain.infrastructure.persistence.models.user import UserModel

__all__ = [
    "UserModel",
]
