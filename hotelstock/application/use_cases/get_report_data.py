"""Get Report Data Use Case."""

from hotelstock.application.dto.responses import OperationResult
from hotelstock.application.use_cases.generate_weekly_report import full_report_to_response
from hotelstock.config import get_logger
from hotelstock.core.exceptions import HotelStockError
from hotelstock.core.services import WeeklyReportBuilder

logger = get_logger(__name__)


class GetReportDataUseCase:
    """Load a stored report with its items and child records."""

    def __init__(self, builder: WeeklyReportBuilder | None = None):
        self._builder = builder

    def _get_builder(self) -> WeeklyReportBuilder:
        if self._builder is None:
            from hotelstock.application.services import get_report_builder

            self._builder = get_report_builder()
        return self._builder

    async def execute(self, report_id: int) -> OperationResult:
        try:
            full = await self._get_builder().get_report_data(report_id)
        except HotelStockError as e:
            logger.warning("get_report_data_failed", report_id=report_id, error_code=e.code)
            return OperationResult.fail(e.message, e.code)
        except Exception as e:
            logger.error(
                "get_report_data_failed", report_id=report_id, error=str(e), exc_info=True
            )
            return OperationResult.fail(str(e), "DATABASE_ERROR")

        return OperationResult.ok(full_report_to_response(full))
