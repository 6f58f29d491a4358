"""
Unit Ledger Reader.

Joins the unit ledger to its product reference and to order/delivery activity,
producing one row of facts per physical unit for a reporting window.
"""

import logging

import pandas as pd

from .schemas import ReportWindow

logger = logging.getLogger(__name__)


def attach_products(units: pd.DataFrame, products: pd.DataFrame) -> pd.DataFrame:
    """
    Left-joins units to the product reference and renames to report vocabulary.
    Units with an unknown product keep a null sku_id rather than being dropped.
    """
    product_ref = (
        products.dropna(subset=["product_key"])
        .drop_duplicates(subset=["product_key"], keep="first")
        .rename(
            columns={
                "product_id": "sku_id",
                "product_name": "sku_name",
                "category": "use_case_category",
            }
        )
    )
    return pd.merge(units, product_ref, on="product_key", how="left")


def filter_categories(df: pd.DataFrame, window: ReportWindow) -> pd.DataFrame:
    """Keeps rows whose category is in the filter. No filter keeps everything, null included."""
    if window.category_filter is None:
        return df
    return df[df["use_case_category"].isin(window.category_filter)]


def count_orders_in_window(orders: pd.DataFrame, window: ReportWindow) -> pd.Series:
    """
    Orders per unit with a packaging timestamp in [start_date, end_date].
    The upper bound is midnight at the start of end_date.
    """
    start = pd.Timestamp(window.start_date)
    end = pd.Timestamp(window.end_date)
    packaged = orders["packaged_timestamp"]
    in_window = orders[(packaged >= start) & (packaged <= end)]
    return in_window.groupby("unit_key").size().rename("num_orders")


def delivered_unit_keys(
    orders: pd.DataFrame, deliveries: pd.DataFrame, window: ReportWindow
) -> set:
    """
    Units with at least one delivery timestamped in [start_date, end_date + 1 day).
    The extra day takes in deliveries made at any time on end_date.
    """
    start = pd.Timestamp(window.start_date)
    end_exclusive = pd.Timestamp(window.end_date) + pd.Timedelta(days=1)

    shipped = pd.merge(
        orders.dropna(subset=["unit_key", "package_key"])[["unit_key", "package_key"]],
        deliveries.dropna(subset=["package_key"]),
        on="package_key",
        how="inner",
    )
    delivered_at = shipped["delivered_timestamp"]
    in_window = shipped[(delivered_at >= start) & (delivered_at < end_exclusive)]
    return set(in_window["unit_key"].unique())


def read_unit_ledger(
    units: pd.DataFrame,
    orders: pd.DataFrame,
    deliveries: pd.DataFrame,
    products: pd.DataFrame,
    window: ReportWindow,
) -> pd.DataFrame:
    """
    Returns one row per unit with its product attributes and window activity:
    `delivered_in_window` (0/1) and `num_orders`. Missing joins give zero counts.
    """
    # A unit recorded twice is still one unit
    repeated = units["unit_key"].notna() & units.duplicated(subset=["unit_key"])
    ledger = units[~repeated]

    facts = filter_categories(attach_products(ledger, products), window).copy()

    order_counts = count_orders_in_window(orders, window)
    facts = pd.merge(
        facts, order_counts, left_on="unit_key", right_index=True, how="left"
    )
    facts["num_orders"] = facts["num_orders"].fillna(0).astype(int)

    delivered = delivered_unit_keys(orders, deliveries, window)
    facts["delivered_in_window"] = facts["unit_key"].isin(delivered).astype(int)

    logger.info(
        f"  > Unit ledger: {len(facts)} units, "
        f"{int(facts['delivered_in_window'].sum())} delivered in window."
    )
    return facts.reset_index(drop=True)
