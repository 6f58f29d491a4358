import logging
from pathlib import Path
from typing import Optional

import pandas as pd
from pydantic import ValidationError

from lost_sales import settings, sources
from lost_sales.demand import aggregate_demand
from lost_sales.estimator import estimate_lost_opportunities
from lost_sales.ledger import read_unit_ledger
from lost_sales.pipeline import DataPipeline
from lost_sales.report import assemble_report
from lost_sales.schemas import LostSalesRecord, ReportWindow
from lost_sales.stock_days import reconcile_stock_days

logger = logging.getLogger(__name__)


def compute_lost_sales(
    frames: dict[str, pd.DataFrame], window: ReportWindow
) -> pd.DataFrame:
    """
    Runs the five report stages over already-loaded relations.
    Pure: the input frames are not modified and nothing is written.
    """
    logger.info(
        f"\n--- Computing lost sales {window.start_date} -> {window.end_date} "
        f"({window.describe_filter()}) ---"
    )
    unit_facts = read_unit_ledger(
        frames["units"],
        frames["orders"],
        frames["deliveries"],
        frames["products"],
        window,
    )
    demand = aggregate_demand(unit_facts)

    stock_days = reconcile_stock_days(
        frames["units"], frames["products"], frames["stock_snapshots"], window
    )

    estimates = estimate_lost_opportunities(demand, stock_days)
    return assemble_report(estimates, frames["warehouses"])


def frame_to_records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as plain dicts with Python scalars and None for nulls."""
    as_objects = df.astype(object)
    return as_objects.where(df.notna(), None).to_dict("records")


class LostSalesPipeline(DataPipeline):
    def __init__(
        self,
        window: ReportWindow,
        input_dir: Optional[Path] = None,
        test_mode: bool = False,
    ):
        super().__init__("lost_sales", test_mode=test_mode)
        self.window = window
        self.input_dir = input_dir or settings.INPUT_DIR
        self.report_df: Optional[pd.DataFrame] = None

        # One extract per warehouse relation, all required
        self.SOURCE_REGISTRY = [
            {
                "source_name": "units",
                "parser_func": sources.parse_units,
                "filename": settings.UNITS_FILENAME,
            },
            {
                "source_name": "orders",
                "parser_func": sources.parse_orders,
                "filename": settings.ORDERS_FILENAME,
            },
            {
                "source_name": "deliveries",
                "parser_func": sources.parse_deliveries,
                "filename": settings.DELIVERIES_FILENAME,
            },
            {
                "source_name": "stock_snapshots",
                "parser_func": sources.parse_stock_snapshots,
                "filename": settings.STOCK_SNAPSHOTS_FILENAME,
            },
            {
                "source_name": "products",
                "parser_func": sources.parse_products,
                "filename": settings.PRODUCTS_FILENAME,
            },
            {
                "source_name": "warehouses",
                "parser_func": sources.parse_warehouses,
                "filename": settings.WAREHOUSES_FILENAME,
            },
        ]

        self.status_summary = {
            "start_date": window.start_date.isoformat(),
            "end_date": window.end_date.isoformat(),
            "category_filter": (
                sorted(window.category_filter)
                if window.category_filter is not None
                else None
            ),
            "rows": 0,
            "total_missed_opportunities": 0,
        }

    def extract(self) -> dict[str, pd.DataFrame] | None:
        logger.info("--- Loading Warehouse Extracts ---")

        frames = {}
        for source in self.SOURCE_REGISTRY:
            source_name = source["source_name"]
            path = self.input_dir / source["filename"]

            if not path.exists():
                logger.error(f"  > ERROR: Required '{source_name}' extract missing: {path}")
                return None

            df = source["parser_func"]({"primary": path})
            if df is None:
                logger.error(f"  > ERROR: Could not parse '{source_name}' extract.")
                return None
            frames[source_name] = df

        return frames

    def transform(self, frames: dict[str, pd.DataFrame]) -> list[LostSalesRecord] | None:
        self.report_df = compute_lost_sales(frames, self.window)

        try:
            logger.info("Validating data against schema...")
            validated_data = [
                LostSalesRecord(**row) for row in frame_to_records(self.report_df)
            ]
            logger.info(f"✅ Data validation successful ({len(validated_data)} records).")
        except ValidationError as e:
            logger.error("❌ Data validation failed!")
            logger.error(e)
            return None

        self.status_summary["rows"] = len(validated_data)
        self.status_summary["total_missed_opportunities"] = sum(
            item.missed_opportunities for item in validated_data
        )
        return validated_data
