"""User repository for database operations.

SQLAlchemy implementation of the credential store used by the
authentication workflow.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keychain.core.exceptions import DuplicateIdentifierError, StoreUnavailableError
from keychain.core.logging import get_logger
from keychain.infrastructure.persistence.models import UserModel

logger = get_logger(__name__)


class UserRepository:
    """Repository for user database operations.

    Writes commit immediately so a registration is either fully stored
    or, after a failure or cancellation, rolled back with the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def find_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID (UUID string).

        Returns:
            User model if found, None otherwise.
        """
        try:
            return await self.session.get(UserModel, user_id)
        except SQLAlchemyError as e:
            logger.error("User lookup by id failed", user_id=user_id, error=str(e))
            raise StoreUnavailableError("Credential store is unavailable") from e

    async def find_by_login_identifier(self, identifier: str) -> UserModel | None:
        """Get a user by email.

        Args:
            identifier: User's email address.

        Returns:
            User model if found, None otherwise.
        """
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == identifier)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("User lookup by email failed", error=str(e))
            raise StoreUnavailableError("Credential store is unavailable") from e

    async def create(self, user: UserModel) -> UserModel:
        """Insert and commit a new user.

        Raises:
            DuplicateIdentifierError: If the email is already registered.
            StoreUnavailableError: On any other database failure.
        """
        self.session.add(user)
        await self._commit(user.email)
        return user

    async def save(self, user: UserModel) -> None:
        """Commit changes made to an existing user.

        Raises:
            DuplicateIdentifierError: If the new email is already registered.
            StoreUnavailableError: On any other database failure.
        """
        self.session.add(user)
        await self._commit(user.email)

    async def _commit(self, email: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("User write rejected: email already registered", email=email)
            raise DuplicateIdentifierError(email) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("User write failed", error=str(e))
            raise StoreUnavailableError("Credential store is unavailable") from e
