"""Delete Weekly Report Use Case."""

from hotelstock.application.dto.responses import AckResponse, OperationResult
from hotelstock.config import get_logger
from hotelstock.core.exceptions import ReportNotFoundError
from hotelstock.core.interfaces import IReportStore

logger = get_logger(__name__)


class DeleteWeeklyReportUseCase:
    """Delete a report together with its items and their child records."""

    def __init__(self, report_store: IReportStore | None = None):
        self._report_store = report_store

    async def _get_report_store(self) -> IReportStore:
        if self._report_store is None:
            from hotelstock.infrastructure.storage.sqlite import get_report_store

            self._report_store = await get_report_store()
        return self._report_store

    async def execute(self, report_id: int) -> OperationResult:
        store = await self._get_report_store()

        try:
            deleted = await store.delete_report(report_id)
        except Exception as e:
            logger.error(
                "delete_weekly_report_failed", report_id=report_id, error=str(e), exc_info=True
            )
            return OperationResult.fail(str(e), "DATABASE_ERROR")

        if not deleted:
            error = ReportNotFoundError(report_id)
            return OperationResult.fail(error.message, error.code)

        return OperationResult.ok(AckResponse(id=report_id, message="Weekly report deleted"))
