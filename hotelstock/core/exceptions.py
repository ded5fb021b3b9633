"""
Domain exceptions for the hotel stock reconciliation engine.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class HotelStockError(Exception):
    """Base exception for all hotelstock errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(HotelStockError):
    """Base exception for storage operations."""

    pass


class ReportNotFoundError(StorageError):
    """Weekly report not found in storage."""

    def __init__(self, report_id: int):
        super().__init__(
            f"Weekly report not found: {report_id}",
            code="REPORT_NOT_FOUND",
            details={"report_id": report_id},
        )


class ReportItemNotFoundError(StorageError):
    """Weekly report item not found in storage."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Weekly report item not found: {item_id}",
            code="REPORT_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Reconciliation Exceptions
class ReconciliationError(HotelStockError):
    """Base exception for reconciliation operations."""

    pass


class ReportGenerationError(ReconciliationError):
    """Weekly report generation aborted at a top-level stage."""

    def __init__(self, stage: str, reason: str, property_id: str | None = None):
        super().__init__(
            f"Report generation failed during {stage}: {reason}",
            code="REPORT_GENERATION_FAILED",
            details={"stage": stage, "reason": reason, "property_id": property_id},
        )


class SectorNotFoundError(ReconciliationError):
    """Requested sector is not part of the report."""

    def __init__(self, sector_id: str):
        super().__init__(
            f"Sector not found in report: {sector_id}",
            code="SECTOR_NOT_FOUND",
            details={"sector_id": sector_id},
        )


class StockCountNotFoundError(ReconciliationError):
    """A selected stock count does not exist."""

    def __init__(self, count_ids: list[str]):
        super().__init__(
            f"Stock counts not found: {', '.join(count_ids)}",
            code="STOCK_COUNT_NOT_FOUND",
            details={"count_ids": count_ids},
        )


# Validation Exceptions
class ValidationError(HotelStockError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class ConfigurationError(HotelStockError):
    """Configuration error."""

    pass
