"""Map ledger service errors to JSON responses."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.structured_logging import build_log_context
from app.services.ledger_service import (
    LedgerConflictError,
    LedgerForbiddenError,
    LedgerNotFoundError,
    LedgerServiceError,
    LedgerValidationError,
)

logger = logging.getLogger(__name__)


# (status code, error code) per service error; most specific class first
ERROR_STATUS: list[tuple[type[LedgerServiceError], int, str]] = [
    (LedgerNotFoundError, 404, "NOT_FOUND"),
    (LedgerForbiddenError, 403, "FORBIDDEN"),
    (LedgerValidationError, 400, "VALIDATION_ERROR"),
    (LedgerConflictError, 409, "CONFLICT"),
]


def error_body(status_code: int, error: str, message: str, request: Request) -> dict:
    return {
        "status_code": status_code,
        "error": error,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.url.path,
    }


def _classify(exc: LedgerServiceError) -> tuple[int, str]:
    for exc_type, status_code, error in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return status_code, error
    return 500, "INTERNAL_ERROR"


async def ledger_error_handler(request: Request, exc: LedgerServiceError) -> JSONResponse:
    status_code, error = _classify(exc)
    if status_code >= 500:
        logger.error(
            "Unclassified ledger error: %s",
            exc,
            extra=build_log_context(route=request.url.path, method=request.method),
        )
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, error, str(exc), request),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra=build_log_context(
            request_id=request.headers.get("X-Request-ID"),
            route=request.url.path,
            method=request.method,
        ),
    )
    return JSONResponse(
        status_code=500,
        content=error_body(500, "INTERNAL_ERROR", "Internal server error", request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerServiceError, ledger_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
