import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from lost_sales import settings, utils
from lost_sales.logger import setup_logger
from lost_sales.pipelines.lost_sales import LostSalesPipeline
from lost_sales.schemas import ReportWindow

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Estimate stockout days and lost sales per sku/warehouse/supplier."
    )
    parser.add_argument("--start-date", type=date.fromisoformat, help="YYYY-MM-DD, inclusive")
    parser.add_argument("--end-date", type=date.fromisoformat, help="YYYY-MM-DD, inclusive")
    parser.add_argument(
        "--category",
        action="append",
        dest="categories",
        help="Category to include (repeatable). Omit to include every category.",
    )
    parser.add_argument("--input-dir", type=Path, help="Directory holding the CSV extracts")
    parser.add_argument("--test", action="store_true", help="Skip the webhook post")
    return parser.parse_args(argv)


def build_window(args: argparse.Namespace) -> ReportWindow:
    default_start, default_end = utils.default_window(settings.DEFAULT_WINDOW_DAYS)
    return ReportWindow(
        start_date=args.start_date or default_start,
        end_date=args.end_date or default_end,
        category_filter=frozenset(args.categories) if args.categories else None,
    )


def main(argv: list[str] | None = None) -> int:
    setup_logger()
    args = parse_args(argv)

    try:
        window = build_window(args)
    except ValidationError as e:
        logger.error("❌ Invalid reporting window.")
        logger.error(e)
        return 1

    pipeline = LostSalesPipeline(window, input_dir=args.input_dir, test_mode=args.test)
    validated_data = pipeline.run()
    return 0 if validated_data is not None else 1


if __name__ == "__main__":
    sys.exit(main())
