"""Unit tests for UserRepository."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from keychain.core.exceptions import DuplicateIdentifierError, StoreUnavailableError
from keychain.domain.entities import ProfileUpdate, Registration
from keychain.infrastructure.persistence.models import UserModel
from keychain.infrastructure.persistence.repositories import UserRepository


def _user(email: str = "a@b.com", name: str | None = "Alice") -> UserModel:
    registration = Registration(
        login_identifier=email,
        password="longenough1",
        attributes={"name": name},
    )
    return UserModel.from_registration(registration, password_hash="$argon2id$fake")


class TestUserModel:
    """Tests for the user model capabilities."""

    def test_from_registration(self):
        user = _user()

        assert len(user.id) == 36
        assert user.login_identifier == "a@b.com"
        assert user.name == "Alice"
        assert user.custom_claims() == {}

    def test_public_representation_hides_password_hash(self):
        representation = _user().public_representation()

        assert "password_hash" not in representation
        assert representation["email"] == "a@b.com"

    def test_apply_update_only_touches_given_fields(self):
        user = _user()

        user.apply_update(ProfileUpdate(attributes={"name": "Alicia"}))
        assert (user.email, user.name) == ("a@b.com", "Alicia")

        user.apply_update(ProfileUpdate(login_identifier="new@b.com"))
        assert (user.email, user.name) == ("new@b.com", "Alicia")


class TestUserRepository:
    """Tests for the SQLAlchemy credential store."""

    @pytest.mark.asyncio
    async def test_create_and_find(self, db_session):
        repo = UserRepository(db_session)
        created = await repo.create(_user())

        assert (await repo.find_by_id(created.id)).email == "a@b.com"
        assert (await repo.find_by_login_identifier("a@b.com")).id == created.id
        assert created.created_at is not None

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, db_session):
        repo = UserRepository(db_session)

        assert await repo.find_by_id("00000000-0000-0000-0000-000000000000") is None
        assert await repo.find_by_login_identifier("nobody@b.com") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, db_session):
        repo = UserRepository(db_session)
        await repo.create(_user())

        with pytest.raises(DuplicateIdentifierError):
            await repo.create(_user())

        # The session stays usable after the rollback
        assert await repo.find_by_login_identifier("a@b.com") is not None

    @pytest.mark.asyncio
    async def test_save_persists_changes(self, db_session):
        repo = UserRepository(db_session)
        user = await repo.create(_user())

        user.name = "Alicia"
        await repo.save(user)

        assert (await repo.find_by_id(user.id)).name == "Alicia"

    @pytest.mark.asyncio
    async def test_read_failure_becomes_store_unavailable(self):
        session = AsyncMock()
        session.get.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))

        with pytest.raises(StoreUnavailableError) as exc_info:
            await UserRepository(session).find_by_id("any")

        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_write_failure_rolls_back(self):
        session = AsyncMock()
        session.add = lambda obj: None
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))

        with pytest.raises(StoreUnavailableError):
            await UserRepository(session).create(_user())

        session.rollback.assert_awaited_once()
