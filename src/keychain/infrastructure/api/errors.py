"""Translation of authentication errors to HTTP responses.

Each error kind maps to exactly one status code. Login failures are
sanitized unless ``reveal_login_failure_reason`` is enabled: an unknown
identifier and a wrong password then both answer 401 "Invalid
credentials" so clients cannot probe which accounts exist.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from keychain.core.exceptions import ErrorKind, KeychainError, WeakCredentialError
from keychain.core.logging import get_logger
from keychain.infrastructure.api.schemas import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.WEAK_CREDENTIAL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_IDENTIFIER: status.HTTP_409_CONFLICT,
    ErrorKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INCORRECT_PASSWORD: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_SIGNATURE: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_EXPIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.MALFORMED_CLAIMS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

TITLE_BY_STATUS: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Validation error",
    status.HTTP_401_UNAUTHORIZED: "Authentication failed",
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_503_SERVICE_UNAVAILABLE: "Service unavailable",
}

LOGIN_FAILURE_KINDS = frozenset({ErrorKind.USER_NOT_FOUND, ErrorKind.INCORRECT_PASSWORD})

# Bearer token failures, answered with 401 and the error kind
TOKEN_FAILURE_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_SIGNATURE: "Invalid token",
    ErrorKind.TOKEN_EXPIRED: "Token has expired",
    ErrorKind.MALFORMED_CLAIMS: "Invalid token claims",
    ErrorKind.USER_NOT_FOUND: "Could not validate credentials",
}


class BearerAuthenticationError(HTTPException):
    """401 raised by the bearer dependency.

    Carries the error kind so the response body matches every other error.
    """

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"},
        )
        self.kind = kind


def error_response(exc: KeychainError, reveal_login_failure_reason: bool) -> JSONResponse:
    """Build the response for a core error."""
    if exc.kind in LOGIN_FAILURE_KINDS and not reveal_login_failure_reason:
        body = ErrorResponse(
            error=TITLE_BY_STATUS[status.HTTP_401_UNAUTHORIZED],
            kind="invalid_credentials",
            message="Invalid credentials",
        )
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=body.model_dump(),
        )

    status_code = STATUS_BY_KIND[exc.kind]
    details = []
    if isinstance(exc, WeakCredentialError):
        details = [
            ErrorDetail(field=d.field, message=d.message, code=d.code) for d in exc.details
        ]
    message = exc.message
    if exc.kind is ErrorKind.STORE_UNAVAILABLE:
        message = "The credential store is temporarily unavailable"

    body = ErrorResponse(
        error=TITLE_BY_STATUS[status_code],
        kind=exc.kind.value,
        message=message,
        details=details,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI, reveal_login_failure_reason: bool) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
        reveal_login_failure_reason: Login failure disclosure policy.
    """

    @app.exception_handler(KeychainError)
    async def keychain_error_handler(request: Request, exc: KeychainError) -> JSONResponse:
        logger.info(
            "Request failed",
            path=str(request.url.path),
            kind=exc.kind.value,
        )
        return error_response(exc, reveal_login_failure_reason)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        body = ErrorResponse(
            error=TITLE_BY_STATUS.get(exc.status_code, "Request failed"),
            kind=getattr(exc, "kind", "http_error"),
            message=str(exc.detail),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "kind": "internal_error",
                "message": "An unexpected error occurred",
            },
        )
