"""Claims carried inside an issued token."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

# Registered JWT claim names managed by the codec itself.
RESERVED_CLAIMS = frozenset({"sub", "exp", "iat"})


@dataclass(frozen=True)
class Claims:
    """Payload of a token.

    Attributes:
        subject: The user ID, string-encoded.
        expiration: Absolute, timezone-aware expiry timestamp.
        issued_at: When the claims were built (optional for foreign tokens).
        extra: Custom claims contributed by the user type.
    """

    subject: str
    expiration: datetime
    issued_at: datetime | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.subject:
            raise ValueError("Claims subject is required")
        if self.expiration.tzinfo is None:
            raise ValueError("Claims expiration must be timezone-aware")
        clashing = RESERVED_CLAIMS.intersection(self.extra)
        if clashing:
            raise ValueError(f"Custom claims cannot override {sorted(clashing)}")
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def is_expired(self, now: datetime) -> bool:
        """Return True unless ``expiration`` is strictly after ``now``."""
        return self.expiration <= now
