"""Reconcile Stock Counts Use Case: reconciliation between physical counts."""

from hotelstock.application.dto.requests import ReconcileStockCountsRequest
from hotelstock.application.dto.responses import OperationResult
from hotelstock.application.use_cases.reconcile_report import render_reconciliation
from hotelstock.config import get_logger
from hotelstock.core.entities.reconciliation import CountSelection
from hotelstock.core.exceptions import HotelStockError
from hotelstock.core.services import StockCountReconciler

logger = get_logger(__name__)


class ReconcileStockCountsUseCase:
    """Reconcile the selected locations between their start and end counts."""

    def __init__(self, reconciler: StockCountReconciler | None = None):
        self._reconciler = reconciler

    def _get_reconciler(self) -> StockCountReconciler:
        if self._reconciler is None:
            from hotelstock.application.services import get_stock_count_reconciler

            self._reconciler = get_stock_count_reconciler()
        return self._reconciler

    async def execute(self, request: ReconcileStockCountsRequest) -> OperationResult:
        selections = [
            CountSelection(
                sector_id=s.sector_id,
                start_count_id=s.start_count_id,
                end_count_id=s.end_count_id,
            )
            for s in request.selections
        ]

        try:
            report = await self._get_reconciler().reconcile(request.property_id, selections)
        except HotelStockError as e:
            logger.warning(
                "reconcile_stock_counts_failed",
                property_id=request.property_id,
                error_code=e.code,
                error=e.message,
            )
            return OperationResult.fail(e.message, e.code)
        except Exception as e:
            logger.error(
                "reconcile_stock_counts_failed",
                property_id=request.property_id,
                error=str(e),
                exc_info=True,
            )
            return OperationResult.fail(str(e), "RECONCILIATION_FAILED")

        return OperationResult.ok(
            render_reconciliation(
                report,
                request.edits,
                only_starred=request.only_starred,
                grouped=request.group_by_category,
            )
        )
