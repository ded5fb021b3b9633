"""Weekly report and reconciliation endpoints."""

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from hotelstock.api.dependencies import (
    get_delete_report_use_case,
    get_generate_report_use_case,
    get_list_reports_use_case,
    get_reconcile_report_use_case,
    get_reconcile_stock_counts_use_case,
    get_report_data_use_case,
    get_update_report_item_use_case,
)
from hotelstock.api.middleware.error_handler import failure_response
from hotelstock.application.dto.requests import (
    GenerateWeeklyReportRequest,
    ReconcileReportRequest,
    ReconcileStockCountsRequest,
    UpdateReportItemRequest,
)
from hotelstock.application.dto.responses import (
    AckResponse,
    ErrorResponse,
    FullReportResponse,
    ReconciliationResponse,
    ReportListResponse,
)
from hotelstock.application.use_cases import (
    DeleteWeeklyReportUseCase,
    GenerateWeeklyReportUseCase,
    GetReportDataUseCase,
    ListWeeklyReportsUseCase,
    ReconcileReportUseCase,
    ReconcileStockCountsUseCase,
    UpdateReportItemUseCase,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.post(
    "/generate",
    response_model=FullReportResponse,
    responses={502: {"model": ErrorResponse}},
)
async def generate_weekly_report(
    request: Request,
    body: GenerateWeeklyReportRequest,
    use_case: GenerateWeeklyReportUseCase = Depends(get_generate_report_use_case),
) -> FullReportResponse | JSONResponse:
    """Generate the week's report for a property, or return the existing one."""
    result = await use_case.execute(body)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.get("", response_model=ReportListResponse)
async def list_weekly_reports(
    request: Request,
    property_id: str = Query(..., min_length=1),
    limit: int | None = Query(default=None, gt=0, le=520),
    use_case: ListWeeklyReportsUseCase = Depends(get_list_reports_use_case),
) -> ReportListResponse | JSONResponse:
    """List a property's reports, newest period first."""
    result = await use_case.execute(property_id, limit=limit)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.post(
    "/stock-counts/reconcile",
    response_model=ReconciliationResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def reconcile_stock_counts(
    request: Request,
    body: ReconcileStockCountsRequest,
    use_case: ReconcileStockCountsUseCase = Depends(get_reconcile_stock_counts_use_case),
) -> ReconciliationResponse | JSONResponse:
    """Reconcile locations between a start and an end physical count."""
    result = await use_case.execute(body)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.patch(
    "/items/{item_id}",
    response_model=AckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_report_item(
    request: Request,
    item_id: int,
    body: UpdateReportItemRequest,
    use_case: UpdateReportItemUseCase = Depends(get_update_report_item_use_case),
) -> AckResponse | JSONResponse:
    """Record manually entered sales and losses for a report item."""
    result = await use_case.execute(item_id, body)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.get(
    "/{report_id}",
    response_model=FullReportResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_report(
    request: Request,
    report_id: int,
    use_case: GetReportDataUseCase = Depends(get_report_data_use_case),
) -> FullReportResponse | JSONResponse:
    """Get a report with its items, sector movements and transfers."""
    result = await use_case.execute(report_id)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.delete(
    "/{report_id}",
    response_model=AckResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}},
)
async def delete_weekly_report(
    request: Request,
    report_id: int,
    use_case: DeleteWeeklyReportUseCase = Depends(get_delete_report_use_case),
) -> AckResponse | JSONResponse:
    """Delete a report with its items and their movement records."""
    result = await use_case.execute(report_id)
    if not result.success:
        return failure_response(request, result)
    return result.data


@router.post(
    "/{report_id}/reconcile",
    response_model=ReconciliationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_report(
    request: Request,
    report_id: int,
    body: ReconcileReportRequest,
    use_case: ReconcileReportUseCase = Depends(get_reconcile_report_use_case),
) -> ReconciliationResponse | JSONResponse:
    """Recompute warehouse and sector views from manual edits."""
    result = await use_case.execute(report_id, body)
    if not result.success:
        return failure_response(request, result)
    return result.data
