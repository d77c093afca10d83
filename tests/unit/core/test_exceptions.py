"""Unit tests for the error taxonomy."""

from keychain.core.exceptions import (
    DuplicateIdentifierError,
    ErrorKind,
    IncorrectPasswordError,
    InvalidSignatureError,
    KeychainError,
    MalformedClaimsError,
    StoreUnavailableError,
    TokenExpiredError,
    UserNotFoundError,
    WeakCredentialError,
)

ALL_ERRORS = [
    WeakCredentialError,
    DuplicateIdentifierError,
    UserNotFoundError,
    IncorrectPasswordError,
    InvalidSignatureError,
    TokenExpiredError,
    MalformedClaimsError,
    StoreUnavailableError,
]


def test_every_error_has_its_own_kind():
    kinds = {error.kind for error in ALL_ERRORS}

    assert kinds == set(ErrorKind)
    assert all(issubclass(error, KeychainError) for error in ALL_ERRORS)


def test_duplicate_identifier_keeps_identifier():
    error = DuplicateIdentifierError("a@b.com")

    assert error.identifier == "a@b.com"
    assert "a@b.com" in error.message


def test_weak_credential_details_default_to_empty():
    assert WeakCredentialError("too short").details == []
