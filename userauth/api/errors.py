"""
Error mapper - Failure kinds to HTTP responses.

Every failed request produces exactly one JSON envelope:

    {"path": ..., "timeStamp": ..., "message": ...[, "validationErrors": {...}]}

validationErrors is present only when there are field-level errors.
Routes hand domain Failures to error_response(); the exception handlers
installed by install_error_handlers() cover request validation, Starlette
HTTP errors and anything unexpected raised below the routes.
"""

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from userauth.api.dependencies import get_localizer
from userauth.api.validation import validation_failure
from userauth.domain.failures import Failure, FailureKind

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown Error"

STATUS_BY_KIND = {
    FailureKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    FailureKind.DUPLICATE_FIELD: status.HTTP_400_BAD_REQUEST,
    FailureKind.INVALID_TOKEN: status.HTTP_400_BAD_REQUEST,
    FailureKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.AUTH_FAILED: status.HTTP_401_UNAUTHORIZED,
    FailureKind.AUTH_INACTIVE: status.HTTP_403_FORBIDDEN,
    FailureKind.AUTH_FORBIDDEN: status.HTTP_403_FORBIDDEN,
    FailureKind.ACTIVATION_EMAIL_FAILED: status.HTTP_502_BAD_GATEWAY,
    FailureKind.UNEXPECTED: status.HTTP_400_BAD_REQUEST,
}

MESSAGE_KEY_BY_KIND = {
    FailureKind.VALIDATION: "validation_failure",
    FailureKind.DUPLICATE_FIELD: "user_exists",
    FailureKind.INVALID_TOKEN: "account_activation_failure",
    FailureKind.USER_NOT_FOUND: "user_not_found",
    FailureKind.AUTH_FAILED: "authentication_failure",
    FailureKind.AUTH_INACTIVE: "inactive_account",
    FailureKind.AUTH_FORBIDDEN: "unauthorized_user_update",
    FailureKind.ACTIVATION_EMAIL_FAILED: "email_failure",
}


def request_path(request: Request) -> str:
    """URL path of the request, with its query string if it has one."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def error_body(
    path: str, message: str, validation_errors: dict[str, str] | None = None
) -> dict:
    body = {
        "path": path,
        "timeStamp": int(time.time() * 1000),
        "message": message,
    }
    if validation_errors:
        body["validationErrors"] = validation_errors
    return body


def error_response(request: Request, failure: Failure) -> JSONResponse:
    """Render a domain Failure in the request's negotiated locale."""
    localizer = get_localizer()
    locale = localizer.negotiate(request.headers.get("accept-language"))
    validation_errors = None

    if failure.kind is FailureKind.UNEXPECTED:
        message = failure.message or UNKNOWN_ERROR

    elif failure.kind is FailureKind.DUPLICATE_FIELD:
        exists = localizer.translate(MESSAGE_KEY_BY_KIND[failure.kind], locale)
        message = f"{failure.field}: {failure.value} {exists}"
        validation_errors = {failure.field: message}

    elif failure.kind is FailureKind.VALIDATION:
        message = localizer.translate(failure.message or MESSAGE_KEY_BY_KIND[failure.kind], locale)
        if failure.validation_errors:
            validation_errors = {
                field: localizer.translate(key, locale)
                for field, key in failure.validation_errors.items()
            }

    else:
        message = localizer.translate(MESSAGE_KEY_BY_KIND[failure.kind], locale)

    return JSONResponse(
        status_code=STATUS_BY_KIND[failure.kind],
        content=error_body(request_path(request), message, validation_errors),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(request, validation_failure(exc.errors()))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request_path(request), str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for errors raised below the routes (e.g. database
    unavailable). The exception text is returned to the client as-is.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(request, Failure(FailureKind.UNEXPECTED, message=str(exc) or None))


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
