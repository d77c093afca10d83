"""Conversion between user identities and token subjects.

Token subjects are always strings so the payload stays independent of how
a user store represents its keys. A converter must be total on valid IDs
and ``destringify(stringify(x)) == x`` must hold for each of them.
"""

import uuid
from typing import Any, Protocol


class IdentityConverter(Protocol):
    """Two-way mapping between an identity type and its string form."""

    def stringify(self, identity: Any) -> str: ...

    def destringify(self, value: str) -> Any:
        """Convert back. Raises ``ValueError`` when ``value`` is not a valid ID."""
        ...


class StringIdentity:
    """Identities that already are non-empty strings."""

    def stringify(self, identity: str) -> str:
        if not isinstance(identity, str) or not identity:
            raise ValueError(f"Not a string identity: {identity!r}")
        return identity

    def destringify(self, value: str) -> str:
        if not value:
            raise ValueError("Empty identity")
        return value


class UUIDIdentity:
    """UUID identities.

    ``as_string`` keeps the destringified value a canonical UUID string,
    matching stores that persist UUIDs in a text column.
    """

    def __init__(self, as_string: bool = False) -> None:
        self.as_string = as_string

    def stringify(self, identity: uuid.UUID | str) -> str:
        return str(uuid.UUID(str(identity)))

    def destringify(self, value: str) -> uuid.UUID | str:
        parsed = uuid.UUID(value)
        # uuid.UUID accepts braces, urn prefixes and missing dashes
        if str(parsed) != value:
            raise ValueError(f"Non-canonical UUID: {value!r}")
        return str(parsed) if self.as_string else parsed


class IntIdentity:
    """Positive integer identities (e.g. autoincrement keys)."""

    def stringify(self, identity: int) -> str:
        if isinstance(identity, bool) or not isinstance(identity, int) or identity < 1:
            raise ValueError(f"Not an integer identity: {identity!r}")
        return str(identity)

    def destringify(self, value: str) -> int:
        if not value.isdigit() or str(int(value)) != value:
            raise ValueError(f"Not an integer identity: {value!r}")
        identity = int(value)
        if identity < 1:
            raise ValueError(f"Not an integer identity: {value!r}")
        return identity
