"""
Custom exception hierarchy for the Recovery Insights API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class RecoveryException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class MalformedRecordError(RecoveryException):
    """A single record cannot take part in aggregation (bad timestamp, intensity or mood)."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "MALFORMED_RECORD"

    def __init__(self, reason: str, record_id: Any = None):
        details: dict[str, Any] = {"reason": reason}
        if record_id is not None:
            details["record_id"] = record_id
        super().__init__(message=f"Malformed record: {reason}.", details=details)


class UpstreamFetchError(RecoveryException):
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "UPSTREAM_FETCH_FAILED"

    def __init__(self, operation: str, reason: str | None = None):
        super().__init__(
            message=f"Record store call '{operation}' failed.",
            details={"operation": operation, "reason": reason} if reason else {"operation": operation},
        )


class ProfileNotFoundError(RecoveryException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "PROFILE_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(
            message=f"Profile {user_id} does not exist.",
            details={"user_id": user_id},
        )


class ProfileAlreadyExistsError(RecoveryException):
    http_status = status.HTTP_409_CONFLICT
    code = "PROFILE_ALREADY_EXISTS"

    def __init__(self, email: str):
        super().__init__(
            message=f"A profile for {email} already exists.",
            details={"email": email},
        )


class UrgeNotFoundError(RecoveryException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "URGE_NOT_FOUND"

    def __init__(self, urge_id: int):
        super().__init__(
            message=f"Urge {urge_id} does not exist.",
            details={"urge_id": urge_id},
        )


class UrgeAlreadyResolvedError(RecoveryException):
    http_status = status.HTTP_409_CONFLICT
    code = "URGE_ALREADY_RESOLVED"

    def __init__(self, urge_id: int, outcome: str):
        super().__init__(
            message=f"Urge {urge_id} is already resolved as '{outcome}'.",
            details={"urge_id": urge_id, "outcome": outcome},
        )


class JournalEntryNotFoundError(RecoveryException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, day: date):
        super().__init__(
            message=f"No journal entry for {day}.",
            details={"day": str(day)},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def recovery_exception_handler(request: Request, exc: RecoveryException) -> JSONResponse:
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
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
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
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
