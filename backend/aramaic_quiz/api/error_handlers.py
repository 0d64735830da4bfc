"""Error Handlers — every failure leaves the API as one {"error": {...}} envelope.

Invariants:
    - QuizError -> its own http_status and to_response() body
    - Retryable QuizErrors (409, 503) carry a Retry-After header in seconds
    - Request validation failures -> 400 VALIDATION_ERROR with per-field details
    - Anything else -> 500 INTERNAL_ERROR, no exception text in the body
"""

import logging
import math

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from aramaic_quiz.core.errors import ErrorCategory, ErrorSeverity, QuizError

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = ("body", "query", "path", "header")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuizError, handle_quiz_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _retry_after_seconds(exc: QuizError) -> str:
    ms = exc.context.retry_after_ms or 1000
    return str(max(1, math.ceil(ms / 1000)))


async def handle_quiz_error(request: Request, exc: QuizError) -> JSONResponse:
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(
        f"{exc.code}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "session_id": exc.context.session_id,
            "owner_id": exc.context.owner_id,
        },
    )
    headers = {"Retry-After": _retry_after_seconds(exc)} if exc.retryable else None
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts)


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {"field": _field_name(e["loc"]), "message": e["msg"], "type": e["type"]}
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Invalid request data",
                "category": ErrorCategory.VALIDATION.value,
                "severity": ErrorSeverity.ERROR.value,
                "retryable": False,
                "details": details,
            },
        },
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}",
        extra={"path": request.url.path},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
                "retryable": False,
            },
        },
    )
