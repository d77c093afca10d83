"""User capabilities and the transient payloads that act on users.

The authentication workflow never depends on a concrete user class. Any
type that satisfies the capability protocols below can be plugged in:

- ``Identifiable``: exposes a unique ``id``.
- ``PasswordBearing``: exposes a login identifier and a stored password hash.
- ``ClaimSubject``: contributes custom claims to the tokens issued for it.
- ``PublicRepresentable``: renders a projection that is safe to return to clients.
- ``ProfileUpdatable``: applies a ``ProfileUpdate`` to itself.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Identifiable(Protocol):
    """Something with a unique, string-convertible identifier."""

    @property
    def id(self) -> Any: ...


@runtime_checkable
class PasswordBearing(Protocol):
    """Something that can be logged into with an identifier and a password."""

    password_hash: str

    @property
    def login_identifier(self) -> str: ...


@runtime_checkable
class ClaimSubject(Protocol):
    """Something tokens can be issued for."""

    def custom_claims(self) -> dict[str, Any]:
        """Return extra claims to embed next to ``sub`` and ``exp``."""
        ...


@runtime_checkable
class PublicRepresentable(Protocol):
    """Something with a client-safe projection."""

    def public_representation(self) -> dict[str, Any]: ...


@runtime_checkable
class ProfileUpdatable(Protocol):
    """Something that can apply a profile update to itself."""

    def apply_update(self, update: "ProfileUpdate") -> None: ...


class KeychainUser(Identifiable, PasswordBearing, ClaimSubject, PublicRepresentable, Protocol):
    """The full capability set required by ``AuthenticationWorkflow``."""


@dataclass(frozen=True)
class Credentials:
    """Login payload. Exists only for the duration of a login call.

    Attributes:
        login_identifier: The identifier the user registered with (e.g. email).
        password: The plaintext password.
    """

    login_identifier: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Registration:
    """Registration payload.

    Attributes:
        login_identifier: The identifier for the new user (e.g. email).
        password: The plaintext password, validated before hashing.
        attributes: Additional profile fields for the user factory.
    """

    login_identifier: str
    password: str = field(repr=False)
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProfileUpdate:
    """Profile update payload. ``None`` fields are left unchanged.

    The workflow hashes ``password`` before the update reaches the user,
    so ``apply_update`` implementations only ever see ``login_identifier``
    and ``attributes``.
    """

    login_identifier: str | None = None
    password: str | None = field(default=None, repr=False)
    attributes: dict[str, Any] = field(default_factory=dict)
