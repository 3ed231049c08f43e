from fastapi import APIRouter, Depends
from fastapi.responses import Response
from inventory.database.supabase_client import get_supabase
from inventory.modules.reports.schemas import (
    CategorySummary, DashboardSummary, MaterialStockReport, OverviewReport, ReportPeriod, StockControlSummary
)
from inventory.modules.reports.service import ReportService
from inventory.modules.reports.export import stock_changes_to_csv
from inventory.modules.materials.schemas import MaterialResponse
from inventory.core.dependencies import require_all_permissions, require_any_permission, require_permission
from inventory.core.session import SessionContext
from supabase import Client
from typing import Dict, List

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_service(supabase: Client = Depends(get_supabase)) -> ReportService:
    return ReportService(supabase)


@router.get("/dashboard", response_model=DashboardSummary)
async def dashboard(
    session: SessionContext = Depends(require_any_permission(["dashboard.view", "reports.view"])),
    service: ReportService = Depends(get_report_service)
):
    """Counts, low-stock materials and machines currently in use"""
    return service.dashboard()


@router.get("/overview", response_model=OverviewReport)
async def overview(
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    return service.overview()


@router.get("/stock-control", response_model=StockControlSummary)
async def stock_control(
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    return service.stock_control()


@router.get("/materials/by-category", response_model=Dict[str, CategorySummary])
async def materials_by_category(
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    return service.materials_by_category()


@router.get("/materials/low-stock", response_model=List[MaterialResponse])
async def low_stock_materials(
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    return service.low_stock()


@router.get("/materials/stock-changes", response_model=MaterialStockReport)
async def material_stock_changes(
    period: ReportPeriod = "30d",
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    """Receipts and issues per material over the last 7/30/90 days or all time"""
    return service.material_stock(period)


@router.get("/machines/by-status", response_model=Dict[str, int])
async def machines_by_status(
    session: SessionContext = Depends(require_permission("reports.view")),
    service: ReportService = Depends(get_report_service)
):
    return service.machines_by_status()


@router.get("/materials/stock-changes/export")
async def export_material_stock_changes(
    period: ReportPeriod = "30d",
    session: SessionContext = Depends(require_all_permissions(["reports.view", "reports.export"])),
    service: ReportService = Depends(get_report_service)
):
    """Download the stock change report as CSV"""
    report = service.material_stock(period)
    return Response(
        content=stock_changes_to_csv(report.rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="material_stock_report_{period}.csv"'}
    )
