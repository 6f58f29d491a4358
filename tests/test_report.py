import pandas as pd

from conftest import make_warehouses
from lost_sales import settings
from lost_sales.report import assemble_report


def _estimates(rows):
    base = {
        "sku_name": "Item",
        "use_case_category": "diagnostics",
        "bundle_size": 1.0,
        "internal_quantity": None,
        "num_units_delivered": 10,
        "num_orders": 10,
        "avg_daily_consumption": 1.0,
        "days_out_of_stock": 2,
        "days_in_stock": 10,
        "missed_opportunities": 2,
    }
    return pd.DataFrame([{**base, **row} for row in rows])


WAREHOUSES = make_warehouses(
    [
        {"warehouse_id": "W1", "warehouse_name": "North", "country": "Kenya", "is_active": True},
        {"warehouse_id": "W2", "warehouse_name": "South", "country": "Kenya", "is_active": False},
        {"warehouse_id": "W3", "warehouse_name": "East", "country": "Uganda", "is_active": True},
    ]
)


class TestAssembleReport:

    def test_inactive_and_unknown_warehouses_dropped(self):
        estimates = _estimates(
            [
                {"sku_id": "A", "warehouse_id": "W1", "supplier_name": "S"},
                {"sku_id": "A", "warehouse_id": "W2", "supplier_name": "S"},
                {"sku_id": "A", "warehouse_id": "W9", "supplier_name": "S"},
                {"sku_id": "A", "warehouse_id": None, "supplier_name": "S"},
            ]
        )
        report = assemble_report(estimates, WAREHOUSES)

        assert report["warehouse_id"].tolist() == ["W1"]
        assert report.loc[0, "warehouse_name"] == "North"
        assert report.loc[0, "country"] == "Kenya"

    def test_sorted_by_sku_warehouse_supplier(self):
        estimates = _estimates(
            [
                {"sku_id": "B", "warehouse_id": "W1", "supplier_name": "S1"},
                {"sku_id": "A", "warehouse_id": "W3", "supplier_name": "S1"},
                {"sku_id": "A", "warehouse_id": "W1", "supplier_name": "S2"},
                {"sku_id": "A", "warehouse_id": "W1", "supplier_name": "S1"},
            ]
        )
        report = assemble_report(estimates, WAREHOUSES)

        keys = list(zip(report["sku_id"], report["warehouse_id"], report["supplier_name"]))
        assert keys == [("A", "W1", "S1"), ("A", "W1", "S2"), ("A", "W3", "S1"), ("B", "W1", "S1")]

    def test_emits_report_columns_in_order(self):
        estimates = _estimates([{"sku_id": "A", "warehouse_id": "W1", "supplier_name": "S"}])
        report = assemble_report(estimates, WAREHOUSES)

        assert list(report.columns) == settings.REPORT_COLUMNS
        assert "num_orders" not in report.columns
