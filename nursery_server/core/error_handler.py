"""
Unified error handling.
Standard error response format and the exception handlers registered on the
FastAPI application.

Main features:
- one response shape for every failure
- error code to HTTP status mapping
- unexpected errors logged and persisted to the logs table
"""

import json
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from .exceptions import BaseApplicationError, DatabaseError

logger = logging.getLogger(__name__)


class ErrorResponse:
    """Standard error response"""

    def __init__(self, error_code: str, message: str,
                 details: Optional[Dict[str, Any]] = None,
                 http_status: int = 400):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def to_json_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.http_status,
            content=self.to_dict()
        )


class ErrorHandler:
    """Global error handler"""

    # Error code to HTTP status
    ERROR_CODE_STATUS_MAP = {
        "VALIDATION_ERROR": 400,
        "AUTHENTICATION_REQUIRED": 401,
        "PERMISSION_DENIED": 403,
        "RESOURCE_NOT_FOUND": 404,
        "BUSINESS_RULE_VIOLATION": 422,
        "DATABASE_ERROR": 500,
        "CONCURRENCY_CONFLICT": 409,
        "INTERNAL_ERROR": 500,

        # Periods
        "PERIOD_NOT_FOUND": 404,
        "CLASSROOM_NOT_FOUND": 404,
        "ACTIVE_PERIOD_EXISTS": 409,
        "INVALID_PERIOD_DATES": 400,
        "SWEEP_FAILED": 503,

        # Settings
        "SETTINGS_NOT_FOUND": 404,
        "CONFIG_MISSING": 400,

        # Slot / meal batches
        "DAY_CAPACITY_EXCEEDED": 400,
        "DUPLICATE_ENTRY": 400,
        "INVALID_DURATION": 400,
        "MISALIGNED_START": 400,
        "INCOMPLETE_STRUCTURE": 400,
        "FORBIDDEN_FIELD": 400,
    }

    @classmethod
    def handle_application_error(cls, error: BaseApplicationError) -> ErrorResponse:
        http_status = cls.ERROR_CODE_STATUS_MAP.get(error.error_code, 400)
        if isinstance(error, DatabaseError):
            logger.error("%s: %s", error.error_code, error.message)
        return ErrorResponse(
            error_code=error.error_code,
            message=error.message,
            details=error.details,
            http_status=http_status
        )

    @classmethod
    def handle_http_exception(cls, error: HTTPException) -> ErrorResponse:
        return ErrorResponse(
            error_code="HTTP_ERROR",
            message=str(error.detail),
            details={"status_code": error.status_code},
            http_status=error.status_code
        )

    @classmethod
    def handle_validation_error(cls, error: Exception) -> ErrorResponse:
        """Request schema validation failure"""
        errors = error.errors() if hasattr(error, "errors") else str(error)
        return ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details={"validation_errors": json.loads(json.dumps(errors, default=str))},
            http_status=422
        )

    @classmethod
    def handle_unknown_error(cls, error: Exception, db=None) -> ErrorResponse:
        error_details = {
            "type": type(error).__name__,
            "message": str(error),
            "traceback": traceback.format_exc()
        }
        logger.error("Unhandled error: %s", error, exc_info=error)
        if db is not None:
            cls._log_system_error(db, error_details)

        return ErrorResponse(
            error_code="INTERNAL_ERROR",
            message=str(error) or "Internal server error",
            details={"error_type": type(error).__name__},
            http_status=500
        )

    @classmethod
    def _log_system_error(cls, db, error_details: Dict[str, Any]):
        """Persist a system error to the logs table"""
        try:
            db.execute(
                "INSERT INTO logs(actor_id, action, detail_json) VALUES (?,?,?)",
                [None, "system_error", json.dumps(error_details)]
            )
        except DatabaseError:
            logger.exception("Failed to persist system error")


async def application_error_handler(request: Request, exc: BaseApplicationError) -> JSONResponse:
    return ErrorHandler.handle_application_error(exc).to_json_response()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return ErrorHandler.handle_http_exception(exc).to_json_response()


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return ErrorHandler.handle_validation_error(exc).to_json_response()


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    db = getattr(request.app.state, "db", None)
    return ErrorHandler.handle_unknown_error(exc, db).to_json_response()


def create_success_response(data: Any = None, message: str = "OK") -> Dict[str, Any]:
    """Standard success response"""
    response = {
        "success": True,
        "message": message
    }

    if data is not None:
        response["data"] = data

    return response


def create_paginated_response(items: list, total: int, page: int,
                              page_size: int, message: str = "OK",
                              meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Paginated response; page_size 0 means everything on one page"""
    response = {
        "success": True,
        "message": message,
        "data": {
            "items": items,
            "pagination": {
                "total": total,
                "page": page,
                "page_size": page_size,
                "total_pages": (total + page_size - 1) // page_size if page_size else 1
            }
        }
    }
    if meta is not None:
        response["data"]["meta"] = meta
    return response
