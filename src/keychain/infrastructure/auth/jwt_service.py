"""JWT token service.

Signs claims into JWTs and verifies incoming tokens. Verification always
checks structure and signature before looking at any claim, so a forged
token is rejected as forged even when its expiry looks valid, and a
tampered expiry can never be trusted.
"""

import json
from datetime import datetime, timezone
from typing import Callable

import jwt
from jwt.utils import base64url_decode, base64url_encode

from keychain.core.exceptions import (
    InvalidSignatureError,
    MalformedClaimsError,
    TokenExpiredError,
)
from keychain.core.logging import get_logger
from keychain.domain.entities import Claims
from keychain.infrastructure.auth.claims_codec import ClaimsCodec

logger = get_logger(__name__)

SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Service for issuing and verifying JWT access tokens.

    The signing key and algorithm are fixed at construction. The service
    keeps no other state: a token is valid exactly when its signature
    verifies and its expiration is in the future.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the token service.

        Args:
            secret_key: Key material for HMAC signing.
            algorithm: One of ``SUPPORTED_ALGORITHMS``.
            clock: Source of the current time, timezone-aware.
        """
        if not secret_key:
            raise ValueError("A signing key is required")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.clock = clock
        self._jws = jwt.PyJWS()

    def issue(self, claims: Claims) -> str:
        """Sign claims into a token.

        Identical claims, key and algorithm always produce the same token.

        Args:
            claims: The claims to sign.

        Returns:
            Encoded JWT.

        Raises:
            TokenExpiredError: If the claims are not valid beyond now.
        """
        if claims.is_expired(self.clock()):
            raise TokenExpiredError("Cannot issue a token for expired claims")
        return jwt.encode(
            ClaimsCodec.to_payload(claims),
            self._secret_key,
            algorithm=self.algorithm,
        )

    def verify(self, token: str) -> Claims:
        """Verify a token and return its claims.

        Args:
            token: The encoded JWT.

        Returns:
            The verified claims.

        Raises:
            InvalidSignatureError: If the token is malformed or its signature is wrong.
            MalformedClaimsError: If the signed payload lacks usable claims.
            TokenExpiredError: If the token has expired.
        """
        _check_canonical_encoding(token)

        try:
            raw_payload = self._jws.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
            )
        except jwt.InvalidTokenError as e:
            logger.debug("Token signature verification failed", error=str(e))
            raise InvalidSignatureError("Invalid token") from e

        try:
            payload = json.loads(raw_payload)
        except ValueError as e:
            raise MalformedClaimsError("Token payload is not valid JSON") from e
        if not isinstance(payload, dict):
            raise MalformedClaimsError("Token payload must be a JSON object")

        claims = ClaimsCodec.from_payload(payload)
        if claims.is_expired(self.clock()):
            raise TokenExpiredError("Token has expired")
        return claims

    def expires_in(self, claims: Claims) -> int:
        """Seconds until the claims expire, never negative."""
        return max(0, int((claims.expiration - self.clock()).total_seconds()))


def _check_canonical_encoding(token: str) -> None:
    """Reject tokens whose segments are not canonical unpadded base64url.

    Base64 decoders ignore stray characters and the unused low bits of the
    last character, so two different strings can decode to the same bytes.
    Requiring the canonical form means any altered character is detected.
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidSignatureError("Invalid token")
    for part in parts:
        try:
            encoded = part.encode("ascii")
            decoded = base64url_decode(encoded)
        except ValueError as e:
            raise InvalidSignatureError("Invalid token") from e
        if base64url_encode(decoded) != encoded:
            raise InvalidSignatureError("Invalid token")
