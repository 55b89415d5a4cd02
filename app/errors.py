# app/errors.py
"""
Exception handlers.

Every failure leaves the API as {"message": ..., "error": ...} with the
status carried by the exception.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from auth.service import AuthError

logger = logging.getLogger(__name__)


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Domain errors from the account service and the auth gate."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed or incomplete JSON bodies."""
    fields = sorted({
        ".".join(str(loc) for loc in error["loc"][1:]) or "body"
        for error in exc.errors()
    })
    return JSONResponse(
        status_code=400,
        content={
            "message": "Invalid request body",
            "error": f"Invalid or missing fields: {', '.join(fields)}",
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else still answers with a structured body."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error": "Unexpected error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
