"""
Derived report metrics over already-fetched domain records.

Every function here is pure: no I/O, no hidden state, deterministic for a given input.
Missing numeric fields count as zero (see `_amount`) so one malformed record never
breaks a whole report. Sums go through math.fsum, which does not depend on input order.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from inventory.config import settings
from inventory.modules.machines.schemas import MachineResponse
from inventory.modules.materials.schemas import MaterialResponse
from inventory.modules.reports.schemas import (
    CategorySummary, DashboardSummary, MaterialStockChange, MaterialStockLevel,
    OverviewReport, ReportPeriod, StockControlSummary, StockDelta, StockReportSummary, StockStatus
)
from inventory.modules.transactions.schemas import MachineTransactionResponse, MaterialTransactionResponse

UNCATEGORIZED = "Uncategorized"
UNKNOWN_STATUS = "unknown"
RECEIPT = "receipt"
ISSUE = "issue"

PERIOD_DAYS = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "all": None,
}

T = TypeVar("T")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _amount(value: Optional[float]) -> float:
    return 0.0 if value is None else float(value)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def material_value(material: MaterialResponse) -> float:
    return _amount(material.stock) * _amount(material.price)


def total_stock_value(materials: Iterable[MaterialResponse]) -> float:
    return math.fsum(material_value(m) for m in materials)


def total_stock_quantity(materials: Iterable[MaterialResponse]) -> float:
    return math.fsum(_amount(m.stock) for m in materials)


def group_by_category(materials: Iterable[MaterialResponse]) -> Dict[str, CategorySummary]:
    values: Dict[str, List[float]] = {}
    for material in materials:
        category = material.category or UNCATEGORIZED
        values.setdefault(category, []).append(material_value(material))
    return {
        category: CategorySummary(count=len(group), total_value=math.fsum(group))
        for category, group in values.items()
    }


def low_stock_materials(materials: Iterable[MaterialResponse]) -> List[MaterialResponse]:
    return [m for m in materials if _amount(m.stock) <= _amount(m.minimum_stock)]


def out_of_stock_materials(materials: Iterable[MaterialResponse]) -> List[MaterialResponse]:
    return [m for m in materials if _amount(m.stock) == 0]


def stock_status(material: MaterialResponse, multiplier: Optional[float] = None) -> StockStatus:
    multiplier = settings.low_stock_multiplier if multiplier is None else multiplier
    current = _amount(material.stock)
    minimum = _amount(material.minimum_stock)
    if current == 0:
        return "out_of_stock"
    if current <= minimum:
        return "low_stock"
    if current <= minimum * multiplier:
        return "medium_stock"
    return "in_stock"


def window_start_for(period: ReportPeriod, now: Optional[datetime] = None) -> Optional[datetime]:
    """Start of a trailing report window; None means all time."""
    if period not in PERIOD_DAYS:
        raise ValueError(f"Unknown report period: {period}")
    days = PERIOD_DAYS[period]
    if days is None:
        return None
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return now - timedelta(days=days)


def _in_window(transaction: MaterialTransactionResponse, window_start: Optional[datetime]) -> bool:
    if window_start is None:
        return True
    if transaction.transaction_date is None:
        return False
    return _as_utc(transaction.transaction_date) >= _as_utc(window_start)


def stock_delta(
    material: MaterialResponse,
    transactions: Iterable[MaterialTransactionResponse],
    window_start: Optional[datetime] = None
) -> StockDelta:
    receipts: List[float] = []
    issues: List[float] = []
    for transaction in transactions:
        if transaction.material_id != material.id or not _in_window(transaction, window_start):
            continue
        if transaction.transaction_type == RECEIPT:
            receipts.append(_amount(transaction.quantity))
        elif transaction.transaction_type == ISSUE:
            issues.append(abs(_amount(transaction.quantity)))
    total_receipts = math.fsum(receipts)
    total_issues = math.fsum(issues)
    return StockDelta(receipts=total_receipts, issues=total_issues, delta=total_receipts - total_issues)


def material_stock_report(
    materials: Sequence[MaterialResponse],
    transactions: Sequence[MaterialTransactionResponse],
    window_start: Optional[datetime] = None
) -> List[MaterialStockChange]:
    """Per-material receipts/issues over the window, largest absolute change first."""
    by_material: Dict[Optional[str], List[MaterialTransactionResponse]] = {}
    for transaction in transactions:
        by_material.setdefault(transaction.material_id, []).append(transaction)

    rows = []
    for material in materials:
        delta = stock_delta(material, by_material.get(material.id, []), window_start)
        rows.append(MaterialStockChange(
            material_id=material.id,
            material_number=material.material_number,
            material_name=material.name,
            unit=material.unit,
            current_stock=_amount(material.stock),
            total_receipts=delta.receipts,
            total_issues=delta.issues,
            stock_difference=delta.delta,
            price=_amount(material.price),
            total_value=material_value(material)
        ))
    # sorted() is stable, so ties keep input order
    return sorted(rows, key=lambda row: abs(row.stock_difference), reverse=True)


def stock_report_summary(rows: Sequence[MaterialStockChange]) -> StockReportSummary:
    return StockReportSummary(
        total_materials=len(rows),
        materials_with_increase=sum(1 for row in rows if row.stock_difference > 0),
        materials_with_decrease=sum(1 for row in rows if row.stock_difference < 0),
        total_stock_value=math.fsum(row.total_value for row in rows),
        total_received=math.fsum(row.total_receipts for row in rows),
        total_issued=math.fsum(row.total_issues for row in rows)
    )


def machines_by_status(machines: Iterable[MachineResponse]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for machine in machines:
        status = machine.status or UNKNOWN_STATUS
        counts[status] = counts.get(status, 0) + 1
    return counts


def total_machine_value(machines: Iterable[MachineResponse]) -> float:
    return math.fsum(_amount(m.purchase_price) for m in machines)


def with_status(records: Iterable[T], status: str) -> List[T]:
    return [record for record in records if getattr(record, "status", None) == status]


def recent_transactions(transactions: Iterable[T], limit: int) -> List[T]:
    """Newest first by created_at; rows without a timestamp sort last."""
    def created(record) -> datetime:
        created_at = getattr(record, "created_at", None)
        return _as_utc(created_at) if created_at is not None else _EPOCH

    return sorted(transactions, key=created, reverse=True)[:max(limit, 0)]


def dashboard_summary(
    materials: Sequence[MaterialResponse],
    machines: Sequence[MachineResponse],
    material_transactions: Sequence[MaterialTransactionResponse],
    machine_transactions: Sequence[MachineTransactionResponse]
) -> DashboardSummary:
    low_stock = low_stock_materials(materials)
    active = with_status(machine_transactions, "active")
    return DashboardSummary(
        total_materials=len(materials),
        low_stock_count=len(low_stock),
        total_machines=len(machines),
        machines_in_use=len(active),
        total_material_transactions=len(material_transactions),
        total_machine_transactions=len(machine_transactions),
        low_stock_materials=low_stock,
        active_machine_transactions=active
    )


def overview_report(
    materials: Sequence[MaterialResponse],
    machines: Sequence[MachineResponse],
    material_transactions: Sequence[MaterialTransactionResponse],
    machine_transactions: Sequence[MachineTransactionResponse],
    recent_limit: Optional[int] = None
) -> OverviewReport:
    recent_limit = settings.recent_transactions_limit if recent_limit is None else recent_limit
    return OverviewReport(
        total_material_value=total_stock_value(materials),
        total_machine_value=total_machine_value(machines),
        active_materials=len(with_status(materials, "active")),
        total_materials=len(materials),
        operational_machines=len(with_status(machines, "operational")),
        total_machines=len(machines),
        total_transactions=len(material_transactions) + len(machine_transactions),
        materials_by_category=group_by_category(materials),
        machines_by_status=machines_by_status(machines),
        recent_material_transactions=recent_transactions(material_transactions, recent_limit),
        recent_machine_transactions=recent_transactions(machine_transactions, recent_limit)
    )


def stock_control_summary(
    materials: Sequence[MaterialResponse],
    machines: Sequence[MachineResponse]
) -> StockControlSummary:
    return StockControlSummary(
        total_material_stock=total_stock_quantity(materials),
        total_material_value=total_stock_value(materials),
        total_machine_value=total_machine_value(machines),
        low_stock_count=len(low_stock_materials(materials)),
        out_of_stock_count=len(out_of_stock_materials(materials)),
        operational_machines=len(with_status(machines, "operational")),
        maintenance_machines=len(with_status(machines, "maintenance")),
        materials=[MaterialStockLevel(material=m, stock_status=stock_status(m)) for m in materials]
    )
