"""Repository layer for database operations."""

from keychain.infrastructure.persistence.repositories.user_repository import UserRepository

__all__ = [
    "UserRepository",
]
