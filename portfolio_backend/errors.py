"""
Error taxonomy for the backend and the FastAPI handlers that render it.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Base exception for the backend."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(BackendError):
    """A required field is missing or the payload is malformed."""

    status_code = 400


class AuthError(BackendError):
    """Credentials are missing or do not match."""

    status_code = 401


class StoreError(BackendError):
    """Connection, query or transaction failure in the data store."""

    status_code = 500


class NotifierError(BackendError):
    """Webhook unreachable or answered with a non-2xx status."""


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=exc.status_code, content={"message": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        logger.info("Rejected malformed payload on %s", request.url.path)
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request body",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return PlainTextResponse(
            exc.message,
            status_code=exc.status_code,
            headers={"WWW-Authenticate": "Basic"},
        )
