"""Global exception handler middleware."""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from meandering.utils.exceptions import MeanderingException
from meandering.utils.logger import ROOT_LOGGER_NAME, get_logger

logger = get_logger(__name__)


def create_error_response(status_code: int, message: str, details: str = "") -> JSONResponse:
    """
    Create JSON error response.

    Args:
        status_code: HTTP status code.
        message: Error message.
        details: Additional error details.

    Returns:
        JSON response.
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Global error handler middleware that catches and formats all exceptions."""

    async def dispatch(self, request: Request, call_next: Any) -> JSONResponse:
        """
        Handle exceptions and return proper JSON responses.

        Args:
            request: HTTP request.
            call_next: Next middleware/route handler.

        Returns:
            JSON response with error details.
        """
        # Let OPTIONS (CORS preflight) requests pass through untouched
        if request.method == "OPTIONS":
            return await call_next(request)

        try:
            return await call_next(request)
        except MeanderingException as e:
            logger.warning(
                f"Meandering exception: {e.error_code} - {e.message}",
                extra={"extra_data": {"error_code": e.error_code, "details": e.details}},
            )
            return create_error_response(e.status_code, e.message, e.details)
        except Exception as e:
            logger.error(
                f"Unhandled exception: {str(e)}",
                extra={"extra_data": {"exception_type": type(e).__name__}},
                exc_info=True,
            )
            debug = logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG
            return create_error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "An unexpected error occurred",
                str(e) if debug else "",
            )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation failures in the standard error shape."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    )
    logger.warning(f"Request validation failed: {details}")
    return create_error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", details)
