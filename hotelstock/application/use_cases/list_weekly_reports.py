"""List Weekly Reports Use Case."""

from hotelstock.application.dto.responses import OperationResult, ReportListResponse
from hotelstock.application.use_cases.generate_weekly_report import report_to_response
from hotelstock.config import get_logger
from hotelstock.core.interfaces import IReportStore

logger = get_logger(__name__)


class ListWeeklyReportsUseCase:
    """List a property's reports, newest period first."""

    def __init__(self, report_store: IReportStore | None = None):
        self._report_store = report_store

    async def _get_report_store(self) -> IReportStore:
        if self._report_store is None:
            from hotelstock.infrastructure.storage.sqlite import get_report_store

            self._report_store = await get_report_store()
        return self._report_store

    async def execute(self, property_id: str, limit: int | None = None) -> OperationResult:
        store = await self._get_report_store()

        try:
            reports = await store.list_reports(property_id, limit=limit)
        except Exception as e:
            logger.error(
                "list_weekly_reports_failed", property_id=property_id, error=str(e), exc_info=True
            )
            return OperationResult.fail(str(e), "DATABASE_ERROR")

        return OperationResult.ok(
            ReportListResponse(
                reports=[report_to_response(r) for r in reports],
                total=len(reports),
            )
        )
