"""Authentication API routes.

Provides endpoints for registration, login, logout, token regeneration
and reading or updating the authenticated user's profile.
"""

from fastapi import APIRouter, status

from keychain.core.logging import get_logger
from keychain.domain.entities import Credentials, ProfileUpdate, Registration
from keychain.infrastructure.api.dependencies import CurrentUser, Workflow
from keychain.infrastructure.api.schemas import (
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    RegisterRequest,
    TokenResponse,
    UpdateProfileRequest,
    UserResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={
        400: {"description": "Password does not meet the strength policy"},
        409: {"description": "Conflict - email already registered"},
    },
)
async def register(request: RegisterRequest, workflow: Workflow) -> UserResponse:
    """Register a new user.

    No token is issued; the client logs in separately.
    """
    user = await workflow.register(
        Registration(
            login_identifier=request.email,
            password=request.password,
            attributes={"name": request.name},
        )
    )
    return UserResponse(**workflow.me(user))


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=AuthResponse,
    responses={
        401: {"description": "Invalid credentials"},
        404: {"description": "Unknown email, when login failure reasons are revealed"},
    },
)
async def login(request: LoginRequest, workflow: Workflow) -> AuthResponse:
    """Authenticate with email and password and return an access token.

    Unless ``reveal_login_failure_reason`` is enabled, an unknown email and
    a wrong password produce the same 401 response.
    """
    issued = await workflow.login(
        Credentials(login_identifier=request.email, password=request.password)
    )
    return AuthResponse(
        token=issued.token,
        expires_in=workflow.token_service.expires_in(issued.claims),
        user=UserResponse(**workflow.me(issued.user)),
    )


@router.post(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=LogoutResponse,
    responses={401: {"description": "Missing or invalid token"}},
)
async def logout(current_user: CurrentUser, workflow: Workflow) -> LogoutResponse:
    """Log out the current user.

    Tokens are stateless and are not revoked: the caller should discard
    its token, which otherwise stays valid until it expires.
    """
    await workflow.logout(current_user)
    return LogoutResponse(
        success=True,
        message="Logged out. Discard the token; it remains valid until it expires.",
    )


@router.post(
    "/token",
    status_code=status.HTTP_200_OK,
    response_model=TokenResponse,
    responses={401: {"description": "Missing or invalid token"}},
)
async def regenerate_token(current_user: CurrentUser, workflow: Workflow) -> TokenResponse:
    """Issue a fresh token for the current user.

    The token used to make this request is not revoked.
    """
    issued = await workflow.regenerate(current_user)
    return TokenResponse(
        token=issued.token,
        expires_in=workflow.token_service.expires_in(issued.claims),
    )


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=UserResponse,
    responses={401: {"description": "Missing or invalid token"}},
)
async def get_me(current_user: CurrentUser, workflow: Workflow) -> UserResponse:
    """Return the current user's public profile."""
    return UserResponse(**workflow.me(current_user))


@router.patch(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=UserResponse,
    responses={
        400: {"description": "New password does not meet the strength policy"},
        401: {"description": "Missing or invalid token"},
        409: {"description": "Conflict - email already registered"},
    },
)
async def update_me(
    request: UpdateProfileRequest,
    current_user: CurrentUser,
    workflow: Workflow,
) -> UserResponse:
    """Update the current user's email, password or display name.

    Fields omitted from the body are left unchanged. Sending ``"name": null``
    clears the display name.
    """
    attributes = {}
    if "name" in request.model_fields_set:
        attributes["name"] = request.name

    user = await workflow.update(
        current_user,
        ProfileUpdate(
            login_identifier=request.email,
            password=request.password,
            attributes=attributes,
        ),
    )
    return UserResponse(**workflow.me(user))
