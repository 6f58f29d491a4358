import logging

import numpy as np
import pandas as pd

from . import settings
from .utils import round_half_away

logger = logging.getLogger(__name__)


def estimate_lost_opportunities(
    demand: pd.DataFrame, stock_days: pd.DataFrame
) -> pd.DataFrame:
    """
    Joins demand (left) to reconciled stock days on (sku, warehouse, supplier)
    and extrapolates lost sales from the observed consumption rate.

    avg_daily_consumption = num_units_delivered / days_in_stock, or 0 with no stock days
    missed_opportunities  = round(avg_daily_consumption * days_out_of_stock)

    Rows without a stockout duration are dropped: no stock history means
    "insufficient data", which must not be reported as zero lost sales.
    """
    joined = pd.merge(
        demand,
        stock_days[settings.TRIPLE_KEYS + ["days_in_stock", "days_out_of_stock"]],
        on=settings.TRIPLE_KEYS,
        how="left",
        validate="many_to_one",
    )

    days_in_stock = joined["days_in_stock"].fillna(0).astype(float)
    delivered = joined["num_units_delivered"].astype(float)
    stocked = days_in_stock > 0
    joined["avg_daily_consumption"] = np.where(
        stocked, delivered / days_in_stock.where(stocked, 1.0), 0.0
    )

    unknown = joined["days_out_of_stock"].isna()
    if unknown.any():
        logger.info(
            f"  > Dropping {int(unknown.sum())} groups with no stockout duration (insufficient data)."
        )
    estimates = joined[~unknown].copy()

    estimates["days_in_stock"] = estimates["days_in_stock"].astype(int)
    estimates["days_out_of_stock"] = estimates["days_out_of_stock"].astype(int)
    estimates["missed_opportunities"] = round_half_away(
        estimates["avg_daily_consumption"] * estimates["days_out_of_stock"]
    ).astype(int)

    logger.info(
        f"  > Estimated {int(estimates['missed_opportunities'].sum())} missed units "
        f"across {len(estimates)} groups."
    )
    return estimates.reset_index(drop=True)
