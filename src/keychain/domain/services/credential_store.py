"""Contract for the persistence collaborator holding user records."""

from typing import Any, Protocol, TypeVar

UserT = TypeVar("UserT")


class UserCredentialStore(Protocol[UserT]):
    """Async user store used by the authentication workflow.

    Implementations must surface any persistence failure as
    ``StoreUnavailableError`` and a violated login identifier uniqueness
    as ``DuplicateIdentifierError``. A completed write must be visible to
    subsequent reads from the same process.
    """

    async def find_by_id(self, user_id: Any) -> UserT | None: ...

    async def find_by_login_identifier(self, identifier: str) -> UserT | None: ...

    async def create(self, user: UserT) -> UserT:
        """Persist a new user atomically: either fully committed or not at all."""
        ...

    async def save(self, user: UserT) -> None: ...
