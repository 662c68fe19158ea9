"""
Exception hierarchy for the Habit Insights engine.

Rule: every error carries a machine-readable `code` string so callers
can branch on it (e.g. render a "not enough data yet" state) without
parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from habit_insights.schemas.common import ErrorDetail

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class HabitInsightsException(Exception):
    """Base class for all engine-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InsufficientDataError(HabitInsightsException):
    """
    The minimum-sample gate of an analysis was not met.

    A normal outcome for new habits: it resolves only once more
    completions are recorded, so re-invoking with the same data is useless.
    """
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INSUFFICIENT_DATA"

    def __init__(self, message: str, minimum_required: int):
        self.minimum_required = minimum_required
        super().__init__(
            message=message,
            details={"minimum_required": minimum_required},
        )


class CalculationError(HabitInsightsException):
    """Malformed input (bad dates, invalid range or period) or an internal defect."""
    http_status = status.HTTP_400_BAD_REQUEST
    code = "CALCULATION_ERROR"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def habit_insights_exception_handler(
    request: Request, exc: HabitInsightsException
) -> JSONResponse:
    if isinstance(exc, InsufficientDataError):
        logger.info("Insufficient data for %s: %s", request.url.path, exc.message)
    else:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append(ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump())
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
