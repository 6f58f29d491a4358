import logging

import pandas as pd

from . import settings

logger = logging.getLogger(__name__)


def _representative(values: pd.Series):
    """Any non-null value; the greatest one so repeated runs agree."""
    present = values.dropna()
    if present.empty:
        return None
    return max(present)


def aggregate_demand(unit_facts: pd.DataFrame) -> pd.DataFrame:
    """
    Collapses unit facts to one row per (sku, warehouse, supplier, category).
    - bundle_size: mean over stocked units, 1 when none are stocked.
    - internal_quantity: mean over stocked units, null when none are stocked.
    - num_units_delivered / num_orders: summed window activity.
    Null keys (e.g. unknown product) form their own group.
    """
    facts = unit_facts.copy()
    is_stocked = facts["stock_status"] == settings.STOCKED_STATUS
    facts["stocked_bundle_size"] = facts["bundle_size"].where(is_stocked)
    facts["stocked_internal_quantity"] = facts["internal_quantity"].where(is_stocked)

    demand = (
        facts.groupby(settings.DEMAND_KEYS, dropna=False, sort=True)
        .agg(
            bundle_size=("stocked_bundle_size", "mean"),
            internal_quantity=("stocked_internal_quantity", "mean"),
            sku_name=("sku_name", _representative),
            num_units_delivered=("delivered_in_window", "sum"),
            num_orders=("num_orders", "sum"),
        )
        .reset_index()
    )

    demand["bundle_size"] = demand["bundle_size"].fillna(1)
    demand["num_units_delivered"] = demand["num_units_delivered"].astype(int)
    demand["num_orders"] = demand["num_orders"].astype(int)

    logger.info(f"  > Demand: {len(demand)} sku/warehouse/supplier groups.")
    return demand
