from pydantic import BaseModel
from typing import Dict, List, Literal, Optional
from datetime import datetime
from inventory.modules.materials.schemas import MaterialResponse
from inventory.modules.transactions.schemas import MaterialTransactionResponse, MachineTransactionResponse

ReportPeriod = Literal["7d", "30d", "90d", "all"]
StockStatus = Literal["out_of_stock", "low_stock", "medium_stock", "in_stock"]


class CategorySummary(BaseModel):
    count: int = 0
    total_value: float = 0.0


class StockDelta(BaseModel):
    receipts: float
    issues: float
    delta: float


class MaterialStockChange(BaseModel):
    material_id: str
    material_number: str
    material_name: str
    unit: str
    current_stock: float
    total_receipts: float
    total_issues: float
    stock_difference: float
    price: float
    total_value: float


class StockReportSummary(BaseModel):
    total_materials: int
    materials_with_increase: int
    materials_with_decrease: int
    total_stock_value: float
    total_received: float
    total_issued: float


class MaterialStockReport(BaseModel):
    period: ReportPeriod
    window_start: Optional[datetime] = None
    rows: List[MaterialStockChange]
    summary: StockReportSummary


class MaterialStockLevel(BaseModel):
    material: MaterialResponse
    stock_status: StockStatus


class DashboardSummary(BaseModel):
    total_materials: int
    low_stock_count: int
    total_machines: int
    machines_in_use: int
    total_material_transactions: int
    total_machine_transactions: int
    low_stock_materials: List[MaterialResponse]
    active_machine_transactions: List[MachineTransactionResponse]


class OverviewReport(BaseModel):
    total_material_value: float
    total_machine_value: float
    active_materials: int
    total_materials: int
    operational_machines: int
    total_machines: int
    total_transactions: int
    materials_by_category: Dict[str, CategorySummary]
    machines_by_status: Dict[str, int]
    recent_material_transactions: List[MaterialTransactionResponse]
    recent_machine_transactions: List[MachineTransactionResponse]


class StockControlSummary(BaseModel):
    total_material_stock: float
    total_material_value: float
    total_machine_value: float
    low_stock_count: int
    out_of_stock_count: int
    operational_machines: int
    maintenance_machines: int
    materials: List[MaterialStockLevel]
