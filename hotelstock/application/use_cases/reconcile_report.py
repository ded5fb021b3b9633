"""Reconcile Report Use Case: warehouse and sector views of a stored report."""

from collections.abc import Sequence

from hotelstock.application.dto.requests import ReconcileReportRequest, SectorEditRequest
from hotelstock.application.dto.responses import (
    OperationResult,
    ReconciliationResponse,
    SectorRowResponse,
    SectorViewResponse,
    WarehouseRowResponse,
)
from hotelstock.config import get_logger
from hotelstock.core.entities.reconciliation import ReconciliationReport, SectorEdit
from hotelstock.core.exceptions import HotelStockError
from hotelstock.core.interfaces import IInventorySource
from hotelstock.core.services import (
    WeeklyReportBuilder,
    build_reconciliation_report,
    group_by_category,
    present_sector,
    present_warehouse,
)

logger = get_logger(__name__)


def render_reconciliation(
    report: ReconciliationReport,
    edits: Sequence[SectorEditRequest],
    sector_ids: list[str] | None = None,
    only_starred: bool = False,
    grouped: bool = False,
) -> ReconciliationResponse:
    """Apply edits and render the warehouse view plus every requested sector view."""
    edits_by_sector: dict[str, dict[str, SectorEdit]] = {}
    for edit in edits:
        edits_by_sector.setdefault(edit.sector_id, {})[edit.product_id] = SectorEdit(
            sales=edit.sales,
            consumption=edit.consumption,
            counted_stock=edit.counted_stock,
        )

    warehouse = [
        WarehouseRowResponse(**row.model_dump())
        for row in present_warehouse(report, only_starred=only_starred)
    ]

    sectors: list[SectorViewResponse] = []
    for sector_id in sector_ids if sector_ids is not None else [s.id for s in report.sectors]:
        view = present_sector(
            report, sector_id, edits_by_sector.get(sector_id), only_starred=only_starred
        )
        rows = [SectorRowResponse(**row.model_dump()) for row in view.rows]
        sectors.append(
            SectorViewResponse(
                sector_id=view.sector.id,
                sector_name=view.sector.name,
                kind=view.sector.kind.value,
                rows=rows,
                groups=group_by_category(rows) if grouped else None,
                total_loss=view.total_loss,
                total_consumption=view.total_consumption,
            )
        )

    return ReconciliationResponse(
        period_start=report.period_start,
        period_end=report.period_end,
        warehouse=warehouse,
        warehouse_groups=group_by_category(warehouse) if grouped else None,
        sectors=sectors,
    )


class ReconcileReportUseCase:
    """
    Recompute the reconciliation of a stored weekly report.

    Sector opening stock is each sector's last recorded balance at the start
    of the period. Consumption not given in an edit defaults to what the
    sector recorded within the period.
    """

    def __init__(
        self,
        builder: WeeklyReportBuilder | None = None,
        inventory_source: IInventorySource | None = None,
    ):
        self._builder = builder
        self._inventory_source = inventory_source

    def _get_builder(self) -> WeeklyReportBuilder:
        if self._builder is None:
            from hotelstock.application.services import get_report_builder

            self._builder = get_report_builder()
        return self._builder

    async def _get_inventory_source(self) -> IInventorySource:
        if self._inventory_source is None:
            from hotelstock.infrastructure.storage.sqlite import get_inventory_source

            self._inventory_source = await get_inventory_source()
        return self._inventory_source

    async def execute(self, report_id: int, request: ReconcileReportRequest) -> OperationResult:
        try:
            full = await self._get_builder().get_report_data(report_id)
            source = await self._get_inventory_source()

            property_id = full.report.property_id
            period = full.report.period
            sectors = await source.list_sectors(property_id)
            balances = await source.get_sector_balances(property_id, period.start)
            consumption = await source.get_sector_consumption(
                property_id, period.start_at, period.end_before
            )
            starred = await source.list_products(
                property_id, only_active=False, only_starred=True
            )

            report = build_reconciliation_report(
                full,
                sectors,
                balances,
                consumption,
                starred_product_ids=[p.id for p in starred],
            )
            response = render_reconciliation(
                report,
                request.edits,
                sector_ids=request.sector_ids,
                only_starred=request.only_starred,
                grouped=request.group_by_category,
            )

        except HotelStockError as e:
            logger.warning("reconcile_report_failed", report_id=report_id, error_code=e.code)
            return OperationResult.fail(e.message, e.code)
        except Exception as e:
            logger.error("reconcile_report_failed", report_id=report_id, error=str(e), exc_info=True)
            return OperationResult.fail(str(e), "RECONCILIATION_FAILED")

        logger.info(
            "reconcile_report_complete",
            report_id=report_id,
            sectors=len(response.sectors),
            edits=len(request.edits),
        )
        return OperationResult.ok(response)
