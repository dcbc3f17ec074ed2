"""
Error envelope for the document service.

Every non-2xx response is rendered as `{"error": "<message>"}` so clients
that were written against the serverless handlers keep working.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def describe_exception(exc: Exception) -> str:
    """
    Best human readable message for an SDK exception.

    postgrest's APIError carries `.message`; storage3's StorageException
    wraps the API's JSON body as its first argument.
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    if exc.args and isinstance(exc.args[0], dict):
        body = exc.args[0]
        for key in ("message", "error", "msg"):
            if body.get(key):
                return str(body[key])
    return str(exc) or "Server error"


def error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException (FastAPI's and Starlette's) as an error envelope."""
    if exc.status_code == 405:
        message = "Method not allowed"
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies answer 400 instead of FastAPI's 422."""
    logger.warning(f"Invalid request body on {request.url.path}: {exc.errors()}")
    return error_response(400, "Invalid request body")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return error_response(500, str(exc) or "Server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to an app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
