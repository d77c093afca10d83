"""Unit tests for password hashing."""

import pytest

from keychain.core.exceptions import WeakCredentialError
from keychain.domain.services import PasswordValidator
from keychain.infrastructure.auth import PasswordHasher


class TestHash:
    """Tests for PasswordHasher.hash."""

    def test_hash_returns_argon2_hash(self, hasher):
        hashed = hasher.hash("SecureP@ss123!")

        assert hashed.startswith("$argon2id$")
        assert "SecureP@ss123!" not in hashed

    def test_hash_different_for_same_input(self, hasher):
        """Hashes are salted, so the same password hashes differently each time."""
        assert hasher.hash("longenough1") != hasher.hash("longenough1")

    def test_short_password_rejected(self, hasher):
        with pytest.raises(WeakCredentialError) as exc_info:
            hasher.hash("12345678")

        assert exc_info.value.details[0].code == "password_too_short"

    def test_nine_character_password_accepted(self, hasher):
        assert hasher.verify("123456789", hasher.hash("123456789"))

    def test_custom_policy(self):
        hasher = PasswordHasher(
            time_cost=1,
            memory_cost=1024,
            parallelism=1,
            validator=PasswordValidator(min_length=12, require_digit=True),
        )

        with pytest.raises(WeakCredentialError):
            hasher.hash("longenough1")
        with pytest.raises(WeakCredentialError):
            hasher.hash("no-digits-at-all")


class TestVerify:
    """Tests for PasswordHasher.verify."""

    def test_correct_password(self, hasher):
        hashed = hasher.hash("SecureP@ss123!")

        assert hasher.verify("SecureP@ss123!", hashed) is True

    def test_incorrect_password(self, hasher):
        hashed = hasher.hash("SecureP@ss123!")

        assert hasher.verify("SecureP@ss123?", hashed) is False

    def test_case_sensitive(self, hasher):
        hashed = hasher.hash("SecureP@ss123!")

        assert hasher.verify("securep@ss123!", hashed) is False

    def test_malformed_hash_never_matches(self, hasher):
        assert hasher.verify("SecureP@ss123!", "not-a-hash") is False

    def test_dummy_hash_matches_nothing(self, hasher):
        assert hasher.verify("", hasher.dummy_hash) is False
        assert hasher.verify("SecureP@ss123!", hasher.dummy_hash) is False

    def test_hash_from_other_cost_still_verifies(self, hasher):
        stronger = PasswordHasher(time_cost=2, memory_cost=1024, parallelism=1)

        assert hasher.verify("longenough1", stronger.hash("longenough1"))


class TestNeedsRehash:
    """Tests for PasswordHasher.needs_rehash."""

    def test_current_parameters(self, hasher):
        assert hasher.needs_rehash(hasher.hash("longenough1")) is False

    def test_changed_cost_factor(self, hasher):
        stronger = PasswordHasher(time_cost=2, memory_cost=1024, parallelism=1)

        assert stronger.time_cost == 2
        assert stronger.needs_rehash(hasher.hash("longenough1")) is True

    def test_unparseable_hash(self, hasher):
        assert hasher.needs_rehash("not-a-hash") is True


class TestAsync:
    """Tests for the thread-offloaded variants."""

    @pytest.mark.asyncio
    async def test_hash_and_verify_async(self, hasher):
        hashed = await hasher.hash_async("longenough1")

        assert await hasher.verify_async("longenough1", hashed) is True
        assert await hasher.verify_async("longenough2", hashed) is False

    @pytest.mark.asyncio
    async def test_hash_async_checks_strength_first(self, hasher):
        with pytest.raises(WeakCredentialError):
            await hasher.hash_async("short")

    @pytest.mark.asyncio
    async def test_rehash_async_skips_strength_policy(self):
        hasher = PasswordHasher(
            time_cost=1,
            memory_cost=1024,
            parallelism=1,
            validator=PasswordValidator(min_length=20),
        )

        hashed = await hasher.rehash_async("longenough1")

        assert hasher.verify("longenough1", hashed)
        assert not hasher.needs_rehash(hashed)
