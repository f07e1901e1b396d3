"""Domain error taxonomy and its mapping onto JSON error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_RETRY_MESSAGE = "Sorry, I encountered an error. Please try again."


class WanderlustError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WanderlustError):
    """Malformed or empty input."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(WanderlustError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(WanderlustError):
    """Role, ownership or booking-status gate failure."""

    status_code = status.HTTP_403_FORBIDDEN


class TransientStoreError(WanderlustError):
    """A query or save against the store failed; the caller may retry."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = GENERIC_RETRY_MESSAGE):
        super().__init__(message)


async def _handle_wanderlust_error(_request: Request, exc: WanderlustError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(
        {"success": False, "error": exc.message},
        status_code=exc.status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WanderlustError, _handle_wanderlust_error)
