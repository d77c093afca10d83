"""Error taxonomy for the authentication core.

Every failure the core reports is one of the ``KeychainError`` subclasses
below, each tagged with exactly one ``ErrorKind``. Translating a kind to a
transport status code and a sanitized message is the job of the calling
layer (see ``keychain.infrastructure.api.errors``).
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure surfaced by the authentication core."""

    WEAK_CREDENTIAL = "weak_credential"
    DUPLICATE_IDENTIFIER = "duplicate_identifier"
    USER_NOT_FOUND = "user_not_found"
    INCORRECT_PASSWORD = "incorrect_password"
    INVALID_SIGNATURE = "invalid_signature"
    TOKEN_EXPIRED = "token_expired"
    MALFORMED_CLAIMS = "malformed_claims"
    STORE_UNAVAILABLE = "store_unavailable"


class KeychainError(Exception):
    """Base class for all authentication core errors."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class WeakCredentialError(KeychainError):
    """Raised when a password does not meet the strength policy."""

    kind = ErrorKind.WEAK_CREDENTIAL

    def __init__(self, message: str, details: list | None = None) -> None:
        self.details = details or []
        super().__init__(message)


class DuplicateIdentifierError(KeychainError):
    """Raised when a login identifier is already taken."""

    kind = ErrorKind.DUPLICATE_IDENTIFIER

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"A user with identifier '{identifier}' already exists")


class UserNotFoundError(KeychainError):
    """Raised when no user matches a login identifier or token subject."""

    kind = ErrorKind.USER_NOT_FOUND


class IncorrectPasswordError(KeychainError):
    """Raised when a supplied password does not match the stored hash."""

    kind = ErrorKind.INCORRECT_PASSWORD


class InvalidSignatureError(KeychainError):
    """Raised when a token is structurally broken or its signature does not verify."""

    kind = ErrorKind.INVALID_SIGNATURE


class TokenExpiredError(KeychainError):
    """Raised when a correctly signed token is past its expiration."""

    kind = ErrorKind.TOKEN_EXPIRED


class MalformedClaimsError(KeychainError):
    """Raised when claims are missing, mistyped, or carry an unusable subject."""

    kind = ErrorKind.MALFORMED_CLAIMS


class StoreUnavailableError(KeychainError):
    """Raised when the credential store fails.

    Wraps the underlying persistence error, which is kept as ``__cause__``.
    No retry happens inside the core.
    """

    kind = ErrorKind.STORE_UNAVAILABLE
