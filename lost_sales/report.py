import logging

import pandas as pd

from . import settings

logger = logging.getLogger(__name__)

SORT_KEYS = ["sku_id", "warehouse_id", "supplier_name", "use_case_category"]


def active_warehouses(warehouses: pd.DataFrame) -> pd.DataFrame:
    active = warehouses[warehouses["is_active"].fillna(False).astype(bool)]
    return active.dropna(subset=["warehouse_id"]).drop_duplicates(
        subset=["warehouse_id"], keep="first"
    )[["warehouse_id", "warehouse_name", "country"]]


def assemble_report(estimates: pd.DataFrame, warehouses: pd.DataFrame) -> pd.DataFrame:
    """
    Inner-joins estimates to active warehouses and orders the result by
    (sku_id, warehouse_id, supplier_name). Rows for inactive or unknown
    warehouses are dropped without error.
    """
    report = pd.merge(
        estimates.dropna(subset=["warehouse_id"]),
        active_warehouses(warehouses),
        on="warehouse_id",
        how="inner",
    )

    dropped = len(estimates) - len(report)
    if dropped:
        logger.info(f"  > Dropped {dropped} rows for inactive or unknown warehouses.")

    # Stable sort keeps repeated runs byte-identical
    report = report.sort_values(SORT_KEYS, kind="mergesort", na_position="last")
    return report.reset_index(drop=True)[settings.REPORT_COLUMNS]
