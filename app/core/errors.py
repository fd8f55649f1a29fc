"""
Centralized error handling.
Services raise AppError subclasses; the handlers below turn them into JSON
responses so routes stay thin and no handler builds its own error body.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

MSG_INTERNAL_ERROR = "Something went wrong. Please try again later."


class AppError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = MSG_INTERNAL_ERROR):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400
    code = "validation_error"


class InvalidPricing(AppError):
    status_code = 400
    code = "invalid_pricing"


class Conflict(AppError):
    # overlaps are reported as a bad request, not 409
    status_code = 400
    code = "conflict"


class AuthenticationError(AppError):
    status_code = 401
    code = "unauthorized"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class InternalError(AppError):
    status_code = 500
    code = "internal_error"


def error_body(exc: AppError) -> dict:
    return {"detail": exc.message, "error": exc.code}


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        # never echo internal detail back to the caller
        return JSONResponse(status_code=exc.status_code, content={"detail": MSG_INTERNAL_ERROR, "error": exc.code})
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=error_body(exc), headers=headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed input is a plain 400 like every other ValidationError
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"detail": jsonable_encoder(errors), "error": ValidationError.code},
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=InternalError.status_code,
        content={"detail": MSG_INTERNAL_ERROR, "error": InternalError.code},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
