"""Authentication workflow.

Orchestrates registration, login, per-request authentication, token
regeneration, logout and profile updates on top of the password hasher,
the claims codec, the token service and a credential store.

Every path checks well-formedness first, then existence, then
credentials. Failures are raised as typed ``KeychainError`` subclasses
and never swallowed; deciding how much of them to reveal to a client is
left to the caller.

Tokens are stateless. Logging out cannot invalidate a token that was
already issued, and regenerating a token does not revoke the previous
one: both stay valid until they expire.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Generic, TypeVar

from keychain.core.exceptions import (
    DuplicateIdentifierError,
    IncorrectPasswordError,
    UserNotFoundError,
)
from keychain.core.logging import get_logger
from keychain.domain.entities import (
    Claims,
    Credentials,
    KeychainUser,
    ProfileUpdatable,
    ProfileUpdate,
    Registration,
)
from keychain.domain.services import UserCredentialStore
from keychain.infrastructure.auth import ClaimsCodec, PasswordHasher, TokenService

logger = get_logger(__name__)

UserT = TypeVar("UserT", bound=KeychainUser)


@dataclass(frozen=True)
class IssuedToken(Generic[UserT]):
    """A freshly signed token together with what it was signed for."""

    token: str
    claims: Claims
    user: UserT


class AuthenticationWorkflow(Generic[UserT]):
    """Credential and token lifecycle for any user type.

    The workflow holds no mutable state of its own; one instance can be
    built per request around a request-scoped store.
    """

    def __init__(
        self,
        store: UserCredentialStore[UserT],
        hasher: PasswordHasher,
        codec: ClaimsCodec,
        token_service: TokenService,
        token_ttl: timedelta,
        user_factory: Callable[[Registration, str], UserT],
    ) -> None:
        """Initialize the workflow.

        Args:
            store: Credential store for user records.
            hasher: Password hasher.
            codec: Claims codec matching the store's identity type.
            token_service: Token signer and verifier.
            token_ttl: Lifetime of issued tokens.
            user_factory: Builds an unsaved user from a registration and a password hash.
        """
        self.store = store
        self.hasher = hasher
        self.codec = codec
        self.token_service = token_service
        self.token_ttl = token_ttl
        self.user_factory = user_factory

    async def register(self, registration: Registration) -> UserT:
        """Create a new user. No token is issued.

        Raises:
            WeakCredentialError: If the password fails the strength policy.
            DuplicateIdentifierError: If the login identifier is taken.
            StoreUnavailableError: If the store fails.
        """
        self.hasher.validate_strength(registration.password)

        if await self.store.find_by_login_identifier(registration.login_identifier) is not None:
            logger.info("Registration rejected: identifier taken")
            raise DuplicateIdentifierError(registration.login_identifier)

        password_hash = await self.hasher.hash_async(registration.password)
        user = self.user_factory(registration, password_hash)
        created = await self.store.create(user)

        logger.info("User registered", user_id=self.codec.identity.stringify(created.id))
        return created

    async def login(self, credentials: Credentials) -> IssuedToken[UserT]:
        """Check credentials and issue a token.

        Raises:
            UserNotFoundError: If no user has the login identifier.
            IncorrectPasswordError: If the password does not match.
            StoreUnavailableError: If the store fails.
        """
        user = await self.store.find_by_login_identifier(credentials.login_identifier)
        if user is None:
            # Keep the unknown-user path as slow as a wrong password
            await self.hasher.verify_async(credentials.password, self.hasher.dummy_hash)
            logger.info("Login failed: unknown identifier")
            raise UserNotFoundError("No user with this login identifier")

        if not await self.hasher.verify_async(credentials.password, user.password_hash):
            logger.info("Login failed: incorrect password", user_id=self._subject(user))
            raise IncorrectPasswordError("Incorrect password")

        if self.hasher.needs_rehash(user.password_hash):
            user.password_hash = await self.hasher.rehash_async(credentials.password)
            await self.store.save(user)
            logger.info("Password hash upgraded", user_id=self._subject(user))

        issued = self._issue(user)
        logger.info("User logged in", user_id=issued.claims.subject)
        return issued

    async def authenticate(self, token: str) -> UserT:
        """Resolve a bearer token to its user.

        Raises:
            InvalidSignatureError: If the token is malformed or forged.
            TokenExpiredError: If the token has expired.
            MalformedClaimsError: If the token subject is unusable.
            UserNotFoundError: If the user no longer exists.
            StoreUnavailableError: If the store fails.
        """
        claims = self.token_service.verify(token)
        user_id = self.codec.parse(claims)

        user = await self.store.find_by_id(user_id)
        if user is None:
            logger.info("Authentication failed: user no longer exists", user_id=claims.subject)
            raise UserNotFoundError("Token subject no longer exists")
        return user

    async def regenerate(self, user: UserT) -> IssuedToken[UserT]:
        """Issue a fresh token for an authenticated user.

        The previous token is not revoked.
        """
        issued = self._issue(user)
        logger.info("Token regenerated", user_id=issued.claims.subject)
        return issued

    async def logout(self, user: UserT) -> None:
        """Acknowledge a logout.

        Tokens are not tracked server-side, so this has no effect on the
        validity of any token already issued to ``user``. It exists as the
        counterpart of ``login`` and as the place a revocation list would
        be consulted.
        """
        logger.info(
            "Logout acknowledged; issued tokens remain valid until expiry",
            user_id=self._subject(user),
        )

    def me(self, user: UserT) -> dict[str, Any]:
        """Return the public projection of an authenticated user."""
        return user.public_representation()

    async def update(self, user: UserT, update: ProfileUpdate) -> UserT:
        """Apply a profile update to an authenticated user.

        Raises:
            WeakCredentialError: If a new password fails the strength policy.
            DuplicateIdentifierError: If the new login identifier is taken.
            StoreUnavailableError: If the store fails.
        """
        if not isinstance(user, ProfileUpdatable):
            raise TypeError(f"{type(user).__name__} does not support profile updates")

        if update.password is not None:
            self.hasher.validate_strength(update.password)

        new_identifier = update.login_identifier
        if new_identifier is not None and new_identifier != user.login_identifier:
            existing = await self.store.find_by_login_identifier(new_identifier)
            if existing is not None:
                raise DuplicateIdentifierError(new_identifier)

        password_hash = None
        if update.password is not None:
            password_hash = await self.hasher.hash_async(update.password)

        user.apply_update(
            ProfileUpdate(login_identifier=new_identifier, attributes=update.attributes)
        )
        if password_hash is not None:
            user.password_hash = password_hash
        await self.store.save(user)

        logger.info(
            "User profile updated",
            user_id=self._subject(user),
            password_changed=password_hash is not None,
        )
        return user

    def _issue(self, user: UserT) -> IssuedToken[UserT]:
        claims = self.codec.build(
            user.id,
            issued_at=self.token_service.clock(),
            ttl=self.token_ttl,
            extra=user.custom_claims(),
        )
        return IssuedToken(token=self.token_service.issue(claims), claims=claims, user=user)

    def _subject(self, user: UserT) -> str:
        return self.codec.identity.stringify(user.id)
