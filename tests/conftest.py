"""
Pytest configuration and shared fixtures.

Frames are built in the same shape the extract parsers produce: string ids,
parsed timestamps, float quantities and a boolean `is_active`.
"""

from datetime import date, timedelta

import pandas as pd
import pytest

from lost_sales.schemas import ReportWindow

WINDOW_START = date(2024, 6, 1)
WINDOW_END = date(2024, 7, 1)  # 30-day span

SKU = "SKU-001"
PRODUCT_KEY = "pk-001"
WAREHOUSE = "WH-01"
SUPPLIER = "Acme Medical"


def make_units(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows,
        columns=[
            "unit_key",
            "product_key",
            "supplier_name",
            "warehouse_id",
            "stock_status",
            "bundle_size",
            "internal_quantity",
            "received_timestamp",
        ],
    )
    df["bundle_size"] = df["bundle_size"].astype(float)
    df["internal_quantity"] = df["internal_quantity"].astype(float)
    df["received_timestamp"] = pd.to_datetime(df["received_timestamp"])
    return df


def make_orders(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows, columns=["order_key", "unit_key", "package_key", "packaged_timestamp"]
    )
    df["packaged_timestamp"] = pd.to_datetime(df["packaged_timestamp"])
    return df


def make_deliveries(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(rows, columns=["package_key", "delivered_timestamp"])
    df["delivered_timestamp"] = pd.to_datetime(df["delivered_timestamp"])
    return df


def make_snapshots(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows,
        columns=["warehouse_id", "product_id", "supplier_name", "stock_date", "total_units"],
    )
    df["stock_date"] = pd.to_datetime(df["stock_date"])
    df["total_units"] = df["total_units"].astype(float)
    return df


def make_products(rows: list[dict]) -> pd.DataFrame:
    return pd.DataFrame(
        rows, columns=["product_key", "product_id", "product_name", "category"]
    )


def make_warehouses(rows: list[dict]) -> pd.DataFrame:
    df = pd.DataFrame(
        rows, columns=["warehouse_id", "warehouse_name", "country", "is_active"]
    )
    df["is_active"] = df["is_active"].astype(bool)
    return df


def daily_snapshots(
    first_day: date,
    days: int,
    total_units: float,
    warehouse_id: str = WAREHOUSE,
    product_id: str = SKU,
    supplier_name: str = SUPPLIER,
) -> list[dict]:
    return [
        {
            "warehouse_id": warehouse_id,
            "product_id": product_id,
            "supplier_name": supplier_name,
            "stock_date": first_day + timedelta(days=offset),
            "total_units": total_units,
        }
        for offset in range(days)
    ]


@pytest.fixture
def window() -> ReportWindow:
    return ReportWindow(start_date=WINDOW_START, end_date=WINDOW_END)


@pytest.fixture
def build_frames():
    """
    Factory for a single product/warehouse/supplier with `delivered_units`
    units ordered and delivered inside the window, plus two stocked units
    (bundle sizes 10 and 20). Every unit is received on `first_received`.
    """

    def _build(
        first_received: str = "2024-05-01",
        delivered_units: int = 100,
        delivered_at: str = "2024-06-12 10:00",
        packaged_at: str = "2024-06-10 09:00",
        snapshots: list[dict] | None = None,
        category: str | None = "diagnostics",
        warehouses: list[dict] | None = None,
    ) -> dict[str, pd.DataFrame]:
        unit_rows = [
            {
                "unit_key": f"u-{i}",
                "product_key": PRODUCT_KEY,
                "supplier_name": SUPPLIER,
                "warehouse_id": WAREHOUSE,
                "stock_status": "delivered",
                "bundle_size": 10,
                "internal_quantity": 50,
                "received_timestamp": first_received,
            }
            for i in range(delivered_units)
        ]
        for i, bundle in enumerate((10, 20)):
            unit_rows.append(
                {
                    "unit_key": f"s-{i}",
                    "product_key": PRODUCT_KEY,
                    "supplier_name": SUPPLIER,
                    "warehouse_id": WAREHOUSE,
                    "stock_status": "stocked",
                    "bundle_size": bundle,
                    "internal_quantity": 100,
                    "received_timestamp": first_received,
                }
            )

        order_rows = [
            {
                "order_key": f"o-{i}",
                "unit_key": f"u-{i}",
                "package_key": f"p-{i}",
                "packaged_timestamp": packaged_at,
            }
            for i in range(delivered_units)
        ]
        delivery_rows = [
            {"package_key": f"p-{i}", "delivered_timestamp": delivered_at}
            for i in range(delivered_units)
        ]

        if warehouses is None:
            warehouses = [
                {
                    "warehouse_id": WAREHOUSE,
                    "warehouse_name": "Central Medical Stores",
                    "country": "Malawi",
                    "is_active": True,
                }
            ]

        return {
            "units": make_units(unit_rows),
            "orders": make_orders(order_rows),
            "deliveries": make_deliveries(delivery_rows),
            "stock_snapshots": make_snapshots(snapshots or []),
            "products": make_products(
                [
                    {
                        "product_key": PRODUCT_KEY,
                        "product_id": SKU,
                        "product_name": "Malaria RDT",
                        "category": category,
                    }
                ]
            ),
            "warehouses": make_warehouses(warehouses),
        }

    return _build


@pytest.fixture
def scenario_a_snapshots() -> list[dict]:
    """30 days in window: 5 stockout days then 25 in-stock days."""
    return daily_snapshots(WINDOW_START, 5, 0) + daily_snapshots(
        WINDOW_START + timedelta(days=5), 25, 40
    )
