import logging
from datetime import datetime
from supabase import Client
from inventory.modules.materials.service import MaterialService
from inventory.modules.machines.service import MachineService
from inventory.modules.transactions.service import MaterialTransactionService, MachineTransactionService
from inventory.modules.reports import aggregation
from inventory.modules.reports.schemas import (
    CategorySummary, DashboardSummary, MaterialStockReport, OverviewReport, ReportPeriod, StockControlSummary
)
from inventory.modules.materials.schemas import MaterialResponse
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ReportService:
    """Fetches full collections from the store and hands them to the pure aggregation functions."""

    def __init__(self, supabase: Client):
        self.materials = MaterialService(supabase)
        self.machines = MachineService(supabase)
        self.material_transactions = MaterialTransactionService(supabase)
        self.machine_transactions = MachineTransactionService(supabase)

    def dashboard(self) -> DashboardSummary:
        return aggregation.dashboard_summary(
            self.materials.list_materials(),
            self.machines.list_machines(),
            self.material_transactions.list_material_transactions(),
            self.machine_transactions.list_machine_transactions()
        )

    def overview(self) -> OverviewReport:
        return aggregation.overview_report(
            self.materials.list_materials(),
            self.machines.list_machines(),
            self.material_transactions.list_material_transactions(),
            self.machine_transactions.list_machine_transactions()
        )

    def stock_control(self) -> StockControlSummary:
        return aggregation.stock_control_summary(
            self.materials.list_materials(),
            self.machines.list_machines()
        )

    def materials_by_category(self) -> Dict[str, CategorySummary]:
        return aggregation.group_by_category(self.materials.list_materials())

    def low_stock(self) -> List[MaterialResponse]:
        return aggregation.low_stock_materials(self.materials.list_materials())

    def machines_by_status(self) -> Dict[str, int]:
        return aggregation.machines_by_status(self.machines.list_machines())

    def material_stock(self, period: ReportPeriod = "30d", now: Optional[datetime] = None) -> MaterialStockReport:
        window_start = aggregation.window_start_for(period, now)
        rows = aggregation.material_stock_report(
            self.materials.list_materials(),
            self.material_transactions.list_material_transactions(),
            window_start
        )
        logger.debug(f"Material stock report for {period}: {len(rows)} materials")
        return MaterialStockReport(
            period=period,
            window_start=window_start,
            rows=rows,
            summary=aggregation.stock_report_summary(rows)
        )
