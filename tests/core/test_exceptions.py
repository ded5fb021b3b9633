"""Unit tests for domain exceptions."""

import pytest

from hotelstock.core.exceptions import (
    ConfigurationError,
    DatabaseError,
    HotelStockError,
    ReconciliationError,
    ReportGenerationError,
    ReportItemNotFoundError,
    ReportNotFoundError,
    SectorNotFoundError,
    StockCountNotFoundError,
    StorageError,
    ValidationError,
)


class TestHotelStockError:
    def test_basic_initialization(self):
        error = HotelStockError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "HotelStockError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = HotelStockError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = HotelStockError("Test error", code="TEST_CODE", details={"extra": "info"})
        assert error.to_dict() == {
            "error": "TEST_CODE",
            "message": "Test error",
            "details": {"extra": "info"},
        }


class TestStorageErrors:
    def test_report_not_found(self):
        error = ReportNotFoundError(42)
        assert isinstance(error, StorageError)
        assert error.code == "REPORT_NOT_FOUND"
        assert error.details["report_id"] == 42
        assert "42" in error.message

    def test_report_item_not_found(self):
        error = ReportItemNotFoundError(7)
        assert error.code == "REPORT_ITEM_NOT_FOUND"
        assert error.details["item_id"] == 7

    def test_database_error(self):
        error = DatabaseError("insert", "disk full")
        assert error.code == "DATABASE_ERROR"
        assert error.details == {"operation": "insert", "error": "disk full"}


class TestReconciliationErrors:
    def test_report_generation_error(self):
        error = ReportGenerationError("catalog_fetch", "timeout", property_id="h1")
        assert isinstance(error, ReconciliationError)
        assert error.code == "REPORT_GENERATION_FAILED"
        assert error.details == {
            "stage": "catalog_fetch",
            "reason": "timeout",
            "property_id": "h1",
        }

    def test_sector_not_found(self):
        assert SectorNotFoundError("s-spa").details["sector_id"] == "s-spa"

    def test_stock_count_not_found(self):
        error = StockCountNotFoundError(["c1", "c2"])
        assert error.code == "STOCK_COUNT_NOT_FOUND"
        assert "c1, c2" in error.message


class TestValidationError:
    def test_value_truncated(self):
        error = ValidationError("selections", "bad", "x" * 500)
        assert error.code == "VALIDATION_ERROR"
        assert len(error.details["value"]) == 100

    def test_no_value(self):
        assert ValidationError("selections", "empty").details["value"] is None


@pytest.mark.parametrize(
    "error",
    [
        ReportNotFoundError(1),
        ReportGenerationError("item_insert", "x"),
        ValidationError("f", "m"),
        ConfigurationError("missing"),
    ],
)
def test_all_catchable_as_base(error):
    with pytest.raises(HotelStockError):
        raise error
