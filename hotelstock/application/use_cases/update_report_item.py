"""Update Report Item Use Case: manual sales and losses entry."""

from hotelstock.application.dto.requests import UpdateReportItemRequest
from hotelstock.application.dto.responses import AckResponse, OperationResult
from hotelstock.config import get_logger
from hotelstock.core.exceptions import ReportItemNotFoundError
from hotelstock.core.interfaces import IReportStore

logger = get_logger(__name__)


class UpdateReportItemUseCase:
    """Set the manually entered sales and losses of a report item."""

    def __init__(self, report_store: IReportStore | None = None):
        self._report_store = report_store

    async def _get_report_store(self) -> IReportStore:
        if self._report_store is None:
            from hotelstock.infrastructure.storage.sqlite import get_report_store

            self._report_store = await get_report_store()
        return self._report_store

    async def execute(self, item_id: int, request: UpdateReportItemRequest) -> OperationResult:
        store = await self._get_report_store()

        try:
            item = await store.update_report_item(item_id, request.sales, request.losses)
        except Exception as e:
            logger.error("update_report_item_failed", item_id=item_id, error=str(e), exc_info=True)
            return OperationResult.fail(str(e), "DATABASE_ERROR")

        if item is None:
            error = ReportItemNotFoundError(item_id)
            logger.warning("update_report_item_missing", item_id=item_id)
            return OperationResult.fail(error.message, error.code)

        return OperationResult.ok(AckResponse(id=item_id, message="Report item updated"))
