"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from hotelstock.application.dto.responses import ErrorResponse, OperationResult
from hotelstock.config import get_logger
from hotelstock.core.exceptions import (
    ConfigurationError,
    HotelStockError,
    ReconciliationError,
    ReportItemNotFoundError,
    ReportNotFoundError,
    SectorNotFoundError,
    StockCountNotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ReportNotFoundError: status.HTTP_404_NOT_FOUND,
    ReportItemNotFoundError: status.HTTP_404_NOT_FOUND,
    SectorNotFoundError: status.HTTP_404_NOT_FOUND,
    StockCountNotFoundError: status.HTTP_404_NOT_FOUND,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ReconciliationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Status for failed OperationResults, by error code
ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "REPORT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "REPORT_ITEM_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SECTOR_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "STOCK_COUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "REPORT_GENERATION_FAILED": status.HTTP_502_BAD_GATEWAY,
}

HINT_MAP: dict[str, str] = {
    "REPORT_NOT_FOUND": "Check the report ID and try GET /api/reports?property_id=... to list reports.",
    "REPORT_ITEM_NOT_FOUND": "Reload the report; the item may belong to a deleted report.",
    "SECTOR_NOT_FOUND": "The sector is not part of this property. Check sector_ids.",
    "STOCK_COUNT_NOT_FOUND": "Only finished counts can be reconciled. Check the count IDs.",
    "REPORT_GENERATION_FAILED": "Generation was aborted; any previous report is intact. Retry the request.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    502: "A backing query failed. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def failure_response(request: Request, result: OperationResult) -> JSONResponse:
    """Render a failed OperationResult as a standardized error response."""
    error_code = result.error_code or "INTERNAL_ERROR"
    status_code = ERROR_CODE_STATUS.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=result.error or "Operation failed",
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions to standardized JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)

        except Exception as e:
            return self._handle_exception(request, e)

    def _handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for exc_type, code in EXCEPTION_STATUS_MAP.items():
            if isinstance(exc, exc_type):
                status_code = code
                break

        error_code = exc.code if isinstance(exc, HotelStockError) else exc.__class__.__name__
        request_id = getattr(request.state, "request_id", None)

        logger.error(
            "unhandled_exception",
            request_id=request_id,
            path=request.url.path,
            error_type=error_code,
            error=str(exc),
            traceback=traceback.format_exc() if status_code >= 500 else None,
        )

        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc),
                hint=_get_hint(error_code, status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
