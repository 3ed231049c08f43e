"""CSV export of report rows."""

import csv
import io
from typing import Sequence

from inventory.modules.reports.schemas import MaterialStockChange

STOCK_CHANGE_COLUMNS = [
    ("material_number", "Material Number"),
    ("material_name", "Material Name"),
    ("unit", "Unit"),
    ("current_stock", "Current Stock"),
    ("total_receipts", "Total Receipts"),
    ("total_issues", "Total Issues"),
    ("stock_difference", "Stock Difference"),
    ("price", "Price"),
    ("total_value", "Total Value"),
]


def stock_changes_to_csv(rows: Sequence[MaterialStockChange], delimiter: str = ",") -> str:
    output = io.StringIO()
    writer = csv.writer(output, delimiter=delimiter, lineterminator="\n")
    writer.writerow([label for _, label in STOCK_CHANGE_COLUMNS])
    for row in rows:
        writer.writerow([getattr(row, field) for field, _ in STOCK_CHANGE_COLUMNS])
    return output.getvalue()
