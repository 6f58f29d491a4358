"""
Stock-Day Reconciler.

Turns daily stock snapshots into per (sku, warehouse, supplier) counts of
in-stock and out-of-stock days. Out-of-stock days are only counted from the
first date a unit of the product was received at the warehouse, so days before
a product existed there are never treated as stockouts.
"""

import logging

import pandas as pd

from . import settings
from .ledger import attach_products
from .schemas import ReportWindow

logger = logging.getLogger(__name__)


def stock_windows(units: pd.DataFrame, products: pd.DataFrame) -> pd.DataFrame:
    """
    First and last received date per triple over the full unit history.
    Not clipped to the reporting window.
    """
    ledger = attach_products(units, products).dropna(subset=settings.TRIPLE_KEYS)
    received = ledger["received_timestamp"].dt.normalize()
    windows = (
        ledger.assign(received_date=received)
        .groupby(settings.TRIPLE_KEYS)
        .agg(
            first_stock_date=("received_date", "min"),
            last_stock_date=("received_date", "max"),
        )
        .reset_index()
    )
    return windows


def snapshot_coverage(snapshots: pd.DataFrame, window: ReportWindow) -> pd.DataFrame:
    """
    Per triple, within [start_date, end_date]:
    `days_in_stock` = distinct days with total_units > 0,
    `snapshot_days` = distinct days with any snapshot row.
    """
    start = pd.Timestamp(window.start_date)
    end = pd.Timestamp(window.end_date)

    in_window = snapshots.rename(columns={"product_id": "sku_id"}).dropna(
        subset=settings.TRIPLE_KEYS + ["stock_date"]
    )
    in_window = in_window[
        (in_window["stock_date"] >= start) & (in_window["stock_date"] <= end)
    ]
    in_window = in_window.assign(
        in_stock_date=in_window["stock_date"].where(in_window["total_units"] > 0)
    )

    return (
        in_window.groupby(settings.TRIPLE_KEYS)
        .agg(
            days_in_stock=("in_stock_date", "nunique"),
            snapshot_days=("stock_date", "nunique"),
        )
        .reset_index()
    )


def reconcile_stock_days(
    units: pd.DataFrame,
    products: pd.DataFrame,
    snapshots: pd.DataFrame,
    window: ReportWindow,
    treat_missing_as_stockout: bool | None = None,
    clamp_negative: bool | None = None,
) -> pd.DataFrame:
    """
    Returns one row per triple with `days_in_stock`, `days_out_of_stock`,
    `first_stock_date` and `last_stock_date`.

    days_out_of_stock = (end_date - max(start_date, first_stock_date)).days - days_in_stock

    A triple with no snapshot rows in the window has days_in_stock = 0 and is
    out of stock for its whole trackable span, unless `treat_missing_as_stockout`
    is off, in which case its days_out_of_stock is left null.
    """
    if treat_missing_as_stockout is None:
        treat_missing_as_stockout = settings.TREAT_MISSING_SNAPSHOTS_AS_STOCKOUT
    if clamp_negative is None:
        clamp_negative = settings.CLAMP_NEGATIVE_STOCKOUT_DAYS

    start = pd.Timestamp(window.start_date)
    end = pd.Timestamp(window.end_date)

    reconciled = pd.merge(
        stock_windows(units, products),
        snapshot_coverage(snapshots, window),
        on=settings.TRIPLE_KEYS,
        how="outer",
    )
    reconciled["days_in_stock"] = reconciled["days_in_stock"].fillna(0).astype(int)
    reconciled["snapshot_days"] = reconciled["snapshot_days"].fillna(0).astype(int)

    # Anchor at start_date unless the product first arrived later
    first_seen = pd.to_datetime(reconciled["first_stock_date"])
    anchor = first_seen.where(first_seen > start, start)
    trackable_days = (end - anchor).dt.days

    days_out = (trackable_days - reconciled["days_in_stock"]).astype("Int64")

    if not treat_missing_as_stockout:
        uncovered = reconciled["snapshot_days"] == 0
        if uncovered.any():
            logger.info(
                f"  > {int(uncovered.sum())} triples have no snapshots in window; "
                "marking stockout days as unknown."
            )
        days_out = days_out.mask(uncovered)

    negative = days_out.fillna(0) < 0
    if negative.any():
        logger.warning(
            f"⚠️  {int(negative.sum())} triples have negative out-of-stock days "
            "(first stock date after the window or stock days before first receipt)."
        )
        if clamp_negative:
            days_out = days_out.mask(negative, 0)

    reconciled["days_out_of_stock"] = days_out

    logger.info(f"  > Stock days reconciled for {len(reconciled)} triples.")
    return reconciled[
        settings.TRIPLE_KEYS
        + ["first_stock_date", "last_stock_date", "days_in_stock", "days_out_of_stock"]
    ]
