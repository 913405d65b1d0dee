"""
Custom exception hierarchy for StandupSync.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages. Every error body is
the same envelope as a success body, with `success: false`.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from standupsync.schemas.common import ErrorDetail

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class StandupSyncException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error = error
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "success": False,
            "code": self.code,
            "message": self.message,
        }
        if self.error:
            payload["error"] = self.error
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(StandupSyncException):
    """Malformed input caught before any record is fetched."""
    http_status = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class InvalidMonthError(ValidationError):
    code = "INVALID_MONTH"

    def __init__(self, month: str):
        super().__init__(
            message="Invalid month format. Use YYYY-MM",
            details={"month": month},
        )


class InvalidDateRangeError(ValidationError):
    code = "INVALID_DATE_RANGE"

    def __init__(self, message: str, start_date: str | None, end_date: str | None):
        super().__init__(
            message=message,
            details={"start_date": start_date, "end_date": end_date},
        )


class HighlightsNotFoundError(StandupSyncException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NO_HIGHLIGHTS"

    def __init__(self):
        super().__init__(message="No highlighted standups found")


class QueryProcessingError(StandupSyncException):
    """Unexpected failure inside an entry point (store down, bad row, ...)."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "QUERY_FAILED"

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message=message, error=error)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def standupsync_exception_handler(
    request: Request, exc: StandupSyncException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 400 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append(ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
            "error": str(exc),
        },
    )


# ---------------------------------------------------------------------------
# Entry-point boundary
# ---------------------------------------------------------------------------

@contextmanager
def entry_point(message: str) -> Iterator[None]:
    """
    Single failure boundary for an endpoint body: application errors pass
    through untouched, anything else is logged and surfaced as a 500
    carrying `message` and the original error text.
    """
    try:
        yield
    except StandupSyncException:
        raise
    except Exception as exc:
        logger.exception(message)
        raise QueryProcessingError(message=message, error=str(exc)) from exc
