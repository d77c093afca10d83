"""FastAPI dependencies for authentication.

The hasher, claims codec and token service are built once from settings
when the application is created and stored on ``app.state.auth``. Each
request gets an ``AuthenticationWorkflow`` bound to its own database
session.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from keychain.application.services.authentication_workflow import AuthenticationWorkflow
from keychain.core.config import Settings
from keychain.core.exceptions import (
    InvalidSignatureError,
    MalformedClaimsError,
    TokenExpiredError,
    UserNotFoundError,
)
from keychain.core.logging import get_logger
from keychain.domain.services import PasswordValidator, UUIDIdentity
from keychain.infrastructure.api.errors import TOKEN_FAILURE_MESSAGES, BearerAuthenticationError
from keychain.infrastructure.auth import ClaimsCodec, PasswordHasher, TokenService
from keychain.infrastructure.persistence.database import get_db_session
from keychain.infrastructure.persistence.models import UserModel
from keychain.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthComponents:
    """Process-wide authentication components, immutable after startup."""

    hasher: PasswordHasher
    codec: ClaimsCodec
    token_service: TokenService
    token_ttl: timedelta


def build_auth_components(settings: Settings) -> AuthComponents:
    """Build the authentication components from settings."""
    hasher = PasswordHasher(
        time_cost=settings.password_hash_cost,
        memory_cost=settings.password_hash_memory_cost,
        parallelism=settings.password_hash_parallelism,
        validator=PasswordValidator(min_length=settings.password_min_length),
    )
    return AuthComponents(
        hasher=hasher,
        codec=ClaimsCodec(UUIDIdentity(as_string=True)),
        token_service=TokenService(settings.secret_key, settings.jwt_algorithm),
        token_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
    )


def get_auth_components(request: Request) -> AuthComponents:
    """Return the components built at application startup."""
    return request.app.state.auth


async def get_workflow(
    components: Annotated[AuthComponents, Depends(get_auth_components)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> AuthenticationWorkflow[UserModel]:
    """Build the workflow for the current request."""
    return AuthenticationWorkflow(
        store=UserRepository(session),
        hasher=components.hasher,
        codec=components.codec,
        token_service=components.token_service,
        token_ttl=components.token_ttl,
        user_factory=UserModel.from_registration,
    )


async def get_bearer_token(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        BearerAuthenticationError: 401 if the header is missing or not a bearer header.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise BearerAuthenticationError("missing_token", "Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise BearerAuthenticationError(
            "invalid_authorization_header", "Could not validate credentials"
        )
    return parts[1]


async def get_current_user(
    token: Annotated[str, Depends(get_bearer_token)],
    workflow: Annotated[AuthenticationWorkflow[UserModel], Depends(get_workflow)],
) -> UserModel:
    """Resolve the bearer token to the authenticated user.

    Store failures propagate and are answered with 503.

    Raises:
        BearerAuthenticationError: 401 if the token is invalid, expired, or orphaned.
    """
    try:
        return await workflow.authenticate(token)
    except (
        InvalidSignatureError,
        TokenExpiredError,
        MalformedClaimsError,
        UserNotFoundError,
    ) as e:
        logger.info("Authentication failed", kind=e.kind.value)
        raise BearerAuthenticationError(e.kind.value, TOKEN_FAILURE_MESSAGES[e.kind]) from e


# Type aliases for dependency injection
Workflow = Annotated[AuthenticationWorkflow[UserModel], Depends(get_workflow)]
CurrentUser = Annotated[UserModel, Depends(get_current_user)]
