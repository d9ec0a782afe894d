"""Domain Errors and HTTP Mapping

Services raise these exceptions; `register_error_handlers` turns them into
JSON responses using the ErrorResponse shape (`{"status": "error", "error": ...}`).
Unexpected exceptions never reach the client with internal details.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)


class NavCryptoError(Exception):
    """Base class for errors that carry a user-facing message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailedError(NavCryptoError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(NavCryptoError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(NavCryptoError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(NavCryptoError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(NavCryptoError):
    status_code = status.HTTP_409_CONFLICT


def _error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "error": error},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register domain error handlers on the FastAPI application."""

    @app.exception_handler(NavCryptoError)
    async def handle_navcrypto_error(_request: Request, exc: NavCryptoError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}")
        else:
            logger.info(f"{type(exc).__name__} ({exc.status_code}): {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error: {type(exc).__name__}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
