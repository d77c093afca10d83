"""Password hashing using Argon2.

Provides secure password hashing and verification using the Argon2id
algorithm, the winner of the Password Hashing Competition and recommended
by OWASP. The cost factor (Argon2 time cost) and memory cost are fixed
when the hasher is built and never change afterwards.
"""

import asyncio
import secrets

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

from keychain.core.exceptions import WeakCredentialError
from keychain.domain.services import PasswordValidator, default_password_validator


class PasswordHasher:
    """Hashes and verifies passwords with a fixed cost configuration.

    Example:
        >>> hasher = PasswordHasher(time_cost=1, memory_cost=1024)
        >>> hashed = hasher.hash("SecureP@ss123!")
        >>> hashed.startswith("$argon2id$")
        True
        >>> hasher.verify("SecureP@ss123!", hashed)
        True
    """

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
        validator: PasswordValidator | None = None,
    ) -> None:
        """Initialize the hasher.

        Args:
            time_cost: Argon2 time cost, the configurable work factor.
            memory_cost: Argon2 memory cost in KiB.
            parallelism: Argon2 parallelism.
            validator: Strength policy checked before hashing.
        """
        self._hasher = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        self.validator = validator or default_password_validator
        # Same parameters as real hashes, so verifying against it costs the same.
        self.dummy_hash = self._hasher.hash(secrets.token_urlsafe(16))

    @property
    def time_cost(self) -> int:
        return self._hasher.time_cost

    def validate_strength(self, password: str) -> None:
        """Check a plaintext password against the strength policy.

        Raises:
            WeakCredentialError: If the password fails any rule.
        """
        errors = self.validator.validate(password)
        if errors:
            raise WeakCredentialError(errors[0].message, details=errors)

    def hash(self, password: str) -> str:
        """Hash a password using Argon2id.

        Args:
            password: The plaintext password to hash.

        Returns:
            The encoded hash, including salt and parameters.

        Raises:
            WeakCredentialError: If the password is too weak to be hashed.
        """
        self.validate_strength(password)
        return self._hasher.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        """Verify a password against a hash.

        Uses constant-time comparison. A malformed hash never matches.

        Returns:
            True if the password matches, False otherwise.
        """
        try:
            return self._hasher.verify(hashed, password)
        except (VerificationError, InvalidHashError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        """Check if a hash was produced with different parameters.

        Should be called after a successful verification; when True the
        password should be hashed again with the current parameters.
        """
        try:
            return self._hasher.check_needs_rehash(hashed)
        except InvalidHashError:
            return True

    async def hash_async(self, password: str) -> str:
        """Hash a password in a worker thread."""
        self.validate_strength(password)
        return await asyncio.to_thread(self._hasher.hash, password)

    async def rehash_async(self, password: str) -> str:
        """Hash an already verified password with the current parameters.

        The strength policy is not applied: the password was accepted when
        it was set, and a stricter policy must not lock its owner out.
        """
        return await asyncio.to_thread(self._hasher.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        """Verify a password in a worker thread."""
        return await asyncio.to_thread(self.verify, password, hashed)
