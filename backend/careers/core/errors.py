"""
Error taxonomy shared by every workflow.

Services raise these; the app registers handlers that turn them into
``{"error": message}`` bodies with the matching status code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger("careers.errors")

GENERIC_INTERNAL_MESSAGE = "Internal server error"


class CareersError(Exception):
    """Base class for errors that map onto an HTTP outcome."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_INTERNAL_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CareersError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(CareersError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"


class AuthorizationError(CareersError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(CareersError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CareersError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InternalError(CareersError):
    # The message is logged, the client only ever sees the generic text.
    pass


class ConfigurationError(RuntimeError):
    """Raised while building the app when required settings are missing."""


def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def careers_error_handler(request: Request, exc: CareersError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("Internal error on %s %s: %s", request.method, request.url.path, exc.message)
        return error_response(exc.status_code, GENERIC_INTERNAL_MESSAGE)

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return error_response(exc.status_code, exc.message, headers=headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    message = "; ".join(problems) or "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CareersError, careers_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
