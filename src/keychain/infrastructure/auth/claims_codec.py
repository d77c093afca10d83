"""Claims construction and parsing.

Builds the claims for a user, translates them to and from the registered
JWT claim names, and turns a verified subject back into a user ID.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from keychain.core.exceptions import MalformedClaimsError
from keychain.domain.entities import RESERVED_CLAIMS, Claims
from keychain.domain.services import IdentityConverter


class ClaimsCodec:
    """Codec between user identities, ``Claims``, and JWT payloads."""

    def __init__(self, identity: IdentityConverter) -> None:
        """Initialize the codec.

        Args:
            identity: Converter between user IDs and subject strings.
        """
        self.identity = identity

    def build(
        self,
        user_id: Any,
        issued_at: datetime,
        ttl: timedelta,
        extra: Mapping[str, Any] | None = None,
    ) -> Claims:
        """Build claims for a user.

        Timestamps are kept to whole seconds, the resolution of the JWT
        NumericDate, so claims survive a round trip through a token intact.
        The issuance time is truncated and the expiration rounded up, so a
        token never expires before ``issued_at + ttl``.

        Args:
            user_id: The user's identity.
            issued_at: Timezone-aware issuance time.
            ttl: Token lifetime. Must be positive.
            extra: Custom claims to embed.

        Returns:
            Claims with ``expiration >= issued_at + ttl``.
        """
        if ttl <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        if issued_at.tzinfo is None:
            raise ValueError("issued_at must be timezone-aware")

        expiration = issued_at + ttl
        if expiration.microsecond:
            expiration = expiration.replace(microsecond=0) + timedelta(seconds=1)
        return Claims(
            subject=self.identity.stringify(user_id),
            expiration=expiration,
            issued_at=issued_at.replace(microsecond=0),
            extra=dict(extra or {}),
        )

    def parse(self, claims: Claims) -> Any:
        """Extract the user ID from verified claims.

        Raises:
            MalformedClaimsError: If the subject is not a valid identity.
        """
        try:
            return self.identity.destringify(claims.subject)
        except (TypeError, ValueError) as e:
            raise MalformedClaimsError("Token subject is not a valid user identifier") from e

    @staticmethod
    def to_payload(claims: Claims) -> dict[str, Any]:
        """Serialize claims to a JWT payload dict."""
        payload: dict[str, Any] = dict(claims.extra)
        payload["sub"] = claims.subject
        payload["exp"] = int(claims.expiration.timestamp())
        if claims.issued_at is not None:
            payload["iat"] = int(claims.issued_at.timestamp())
        return payload

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> Claims:
        """Deserialize a verified JWT payload.

        Raises:
            MalformedClaimsError: If ``sub`` or ``exp`` is missing or mistyped.
        """
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedClaimsError("Token is missing a subject claim")

        expiration = _numeric_date(payload.get("exp"), "exp")
        if expiration is None:
            raise MalformedClaimsError("Token is missing an expiration claim")
        issued_at = _numeric_date(payload.get("iat"), "iat")

        extra = {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}
        return Claims(
            subject=subject,
            expiration=expiration,
            issued_at=issued_at,
            extra=extra,
        )


def _numeric_date(value: Any, name: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedClaimsError(f"Token claim '{name}' must be a number")
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise MalformedClaimsError(f"Token claim '{name}' is out of range") from e
