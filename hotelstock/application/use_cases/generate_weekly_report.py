"""Generate Weekly Report Use Case: idempotent per property and week."""

from hotelstock.application.dto.requests import GenerateWeeklyReportRequest
from hotelstock.application.dto.responses import (
    FullReportResponse,
    OperationResult,
    ReportItemResponse,
    SectorMovementResponse,
    TransferResponse,
    WeeklyReportResponse,
)
from hotelstock.config import get_logger
from hotelstock.core.entities.report import FullReport, WeeklyReport, WeeklyReportItem
from hotelstock.core.exceptions import HotelStockError
from hotelstock.core.services import WeeklyReportBuilder

logger = get_logger(__name__)


def report_to_response(report: WeeklyReport) -> WeeklyReportResponse:
    return WeeklyReportResponse(
        id=report.id,  # type: ignore[arg-type]
        property_id=report.property_id,
        period_start=report.period_start,
        period_end=report.period_end,
        created_at=report.created_at,
        updated_at=report.updated_at,
    )


def item_to_response(item: WeeklyReportItem) -> ReportItemResponse:
    return ReportItemResponse(
        id=item.id,  # type: ignore[arg-type]
        product_id=item.product_id,
        product_name=item.product_name,
        category=item.category,
        initial_stock=item.initial_stock,
        purchases=item.purchases,
        sales=item.sales,
        losses=item.losses,
        final_stock=item.final_stock,
        delivered_to_sectors=item.delivered_to_sectors,
        transferred_out=item.transferred_out,
        calculated_final_stock=item.calculated_final_stock,
        warehouse_loss=item.warehouse_loss,
        is_estimated=item.is_estimated,
        sector_movements=[
            SectorMovementResponse(**m.model_dump()) for m in item.sector_movements
        ],
        transfers=[TransferResponse(**t.model_dump()) for t in item.transfers],
    )


def full_report_to_response(full: FullReport) -> FullReportResponse:
    return FullReportResponse(
        report=report_to_response(full.report),
        items=[item_to_response(item) for item in full.items],
        estimated_items=len(full.estimated_items),
    )


class GenerateWeeklyReportUseCase:
    """Generate a property's weekly report, reusing an existing one."""

    def __init__(self, builder: WeeklyReportBuilder | None = None):
        self._builder = builder

    def _get_builder(self) -> WeeklyReportBuilder:
        if self._builder is None:
            from hotelstock.application.services import get_report_builder

            self._builder = get_report_builder()
        return self._builder

    async def execute(self, request: GenerateWeeklyReportRequest) -> OperationResult:
        """Execute report generation; failures come back as a failed result."""
        logger.info(
            "generate_weekly_report_started",
            property_id=request.property_id,
            period_start=request.period_start.isoformat(),
        )

        try:
            full = await self._get_builder().generate(
                request.property_id, request.period_start
            )
        except HotelStockError as e:
            logger.error(
                "generate_weekly_report_failed",
                property_id=request.property_id,
                error_code=e.code,
                error=e.message,
            )
            return OperationResult.fail(e.message, e.code)
        except Exception as e:
            logger.error(
                "generate_weekly_report_failed",
                property_id=request.property_id,
                error=str(e),
                exc_info=True,
            )
            return OperationResult.fail(str(e), "REPORT_GENERATION_FAILED")

        logger.info(
            "generate_weekly_report_complete",
            report_id=full.report.id,
            items=len(full.items),
            estimated=len(full.estimated_items),
        )
        return OperationResult.ok(full_report_to_response(full))
