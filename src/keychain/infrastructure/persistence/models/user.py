"""SQLAlchemy model for the users table.

Users are uniquely identified by their email, which doubles as the login
identifier.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from keychain.domain.entities import ProfileUpdate, Registration
from keychain.infrastructure.persistence.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Implements the capability set expected by the authentication workflow:
    identifiable by ``id``, logged into by ``email``, and rendered to
    clients without its password hash.

    Attributes:
        id: Primary key (UUID string).
        email: User's email address, unique.
        name: Optional display name.
        password_hash: Argon2 hash of the password.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        comment="User ID (UUID)",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="User email address, used as login identifier",
    )
    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Display name",
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hashed password (argon2)",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    @classmethod
    def from_registration(cls, registration: Registration, password_hash: str) -> "UserModel":
        """Build a new, unsaved user from a registration payload."""
        return cls(
            id=str(uuid.uuid4()),
            email=registration.login_identifier,
            name=registration.attributes.get("name"),
            password_hash=password_hash,
        )

    @property
    def login_identifier(self) -> str:
        return self.email

    def custom_claims(self) -> dict[str, Any]:
        return {}

    def public_representation(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def apply_update(self, update: ProfileUpdate) -> None:
        if update.login_identifier is not None:
            self.email = update.login_identifier
        if "name" in update.attributes:
            self.name = update.attributes["name"]

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
