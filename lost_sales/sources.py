import logging
from pathlib import Path

import pandas as pd

from .utils import load_csv, to_bool

logger = logging.getLogger(__name__)

# Column contract for each warehouse extract: name -> kind.
# "id"/"text" columns stay strings, "number" is coerced, "timestamp"/"date" are parsed.
UNIT_COLUMNS = {
    "unit_key": "id",
    "product_key": "id",
    "supplier_name": "text",
    "warehouse_id": "id",
    "stock_status": "text",
    "bundle_size": "number",
    "internal_quantity": "number",
    "received_timestamp": "timestamp",
}
ORDER_COLUMNS = {
    "order_key": "id",
    "unit_key": "id",
    "package_key": "id",
    "packaged_timestamp": "timestamp",
}
DELIVERY_COLUMNS = {
    "package_key": "id",
    "delivered_timestamp": "timestamp",
}
STOCK_SNAPSHOT_COLUMNS = {
    "warehouse_id": "id",
    "product_id": "id",
    "supplier_name": "text",
    "stock_date": "date",
    "total_units": "number",
}
PRODUCT_COLUMNS = {
    "product_key": "id",
    "product_id": "id",
    "product_name": "text",
    "category": "text",
}
WAREHOUSE_COLUMNS = {
    "warehouse_id": "id",
    "warehouse_name": "text",
    "country": "text",
    "is_active": "flag",
}


def parse_timestamps(values: pd.Series) -> pd.Series:
    """
    Parses ISO 8601 values element by element, so date-only and full timestamps
    can share a column. Offsets are converted to UTC and dropped, leaving naive
    datetimes comparable with the report window.
    """
    parsed = pd.to_datetime(values, errors="coerce", format="ISO8601", utc=True)
    return parsed.dt.tz_localize(None)


def normalize_extract(
    df: pd.DataFrame, columns: dict[str, str], source_name: str
) -> pd.DataFrame | None:
    """
    Trims a raw extract down to its column contract and coerces each column.
    - Header names are stripped and lower-cased before matching.
    - Unparseable numbers and timestamps become NaN/NaT rather than failing the run.
    - Returns None when a required column is missing.
    """
    df = df.rename(columns=lambda c: str(c).strip().lower())
    missing = [col for col in columns if col not in df.columns]
    if missing:
        logger.error(
            f"  > ERROR: '{source_name}' is missing required columns: {', '.join(missing)}"
        )
        return None

    normalized = df[list(columns)].copy()
    for col, kind in columns.items():
        if kind in ("id", "text"):
            values = normalized[col].astype(str).str.strip()
            normalized[col] = values.where(values != "", None)
        elif kind == "number":
            normalized[col] = pd.to_numeric(normalized[col], errors="coerce")
        elif kind == "timestamp":
            normalized[col] = parse_timestamps(normalized[col])
        elif kind == "date":
            normalized[col] = parse_timestamps(normalized[col]).dt.normalize()
        elif kind == "flag":
            normalized[col] = to_bool(normalized[col])

    return normalized


def _parse_extract(
    file_paths: dict[str, Path], columns: dict[str, str], source_name: str
) -> pd.DataFrame | None:
    df = load_csv(file_paths["primary"], dtype=str, keep_default_na=False)
    if df is None:
        return None

    parsed = normalize_extract(df, columns, source_name)
    if parsed is not None:
        logger.info(f"✅ Parsed {file_paths['primary'].name} ({len(parsed)} rows).")
    return parsed


def parse_units(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    """
    Loads the unit ledger: one row per physical inventory item.
    Besides the product, supplier, warehouse, status, size and received columns,
    the extract must carry `unit_key`, which orders reference.
    """
    return _parse_extract(file_paths, UNIT_COLUMNS, "units")


def parse_orders(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    """
    Loads orders. Each row needs `order_key`, the `unit_key` it consumes and the
    `package_key` its delivery is recorded under, plus `packaged_timestamp`.
    """
    return _parse_extract(file_paths, ORDER_COLUMNS, "orders")


def parse_deliveries(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    return _parse_extract(file_paths, DELIVERY_COLUMNS, "deliveries")


def parse_stock_snapshots(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    """Loads daily on-hand totals per (product, warehouse, supplier)."""
    return _parse_extract(file_paths, STOCK_SNAPSHOT_COLUMNS, "stock_snapshots")


def parse_products(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    return _parse_extract(file_paths, PRODUCT_COLUMNS, "products")


def parse_warehouses(file_paths: dict[str, Path]) -> pd.DataFrame | None:
    return _parse_extract(file_paths, WAREHOUSE_COLUMNS, "warehouses")
