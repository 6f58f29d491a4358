import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# --- Path Configuration ---
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# --- Input Extract Filenames ---
# One CSV extract per warehouse relation.
UNITS_FILENAME = os.getenv("UNITS_FILENAME", "units.csv")
ORDERS_FILENAME = os.getenv("ORDERS_FILENAME", "orders.csv")
DELIVERIES_FILENAME = os.getenv("DELIVERIES_FILENAME", "deliveries.csv")
STOCK_SNAPSHOTS_FILENAME = os.getenv("STOCK_SNAPSHOTS_FILENAME", "stock_snapshots.csv")
PRODUCTS_FILENAME = os.getenv("PRODUCTS_FILENAME", "products.csv")
WAREHOUSES_FILENAME = os.getenv("WAREHOUSES_FILENAME", "warehouses.csv")

# --- Output ---
SAVE_JSON_OUTPUT = _env_flag("SAVE_JSON_OUTPUT", False)

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")
WEBHOOK_TIMEOUT = int(os.getenv("WEBHOOK_TIMEOUT", "15"))

# --- Reporting Window ---
# Used when the CLI is run without explicit dates: the trailing N days ending yesterday.
DEFAULT_WINDOW_DAYS = int(os.getenv("DEFAULT_WINDOW_DAYS", "30"))

# --- Shared Business Logic ---
# Unit status that counts towards the bundle size average.
STOCKED_STATUS = os.getenv("STOCKED_STATUS", "stocked")

# A triple with no snapshot rows at all in the window is reported as out of stock
# for its whole trackable span. Set to false to drop those rows instead.
TREAT_MISSING_SNAPSHOTS_AS_STOCKOUT = _env_flag(
    "TREAT_MISSING_SNAPSHOTS_AS_STOCKOUT", True
)

# first_stock_date after end_date yields a negative span; clamp it to zero.
CLAMP_NEGATIVE_STOCKOUT_DAYS = _env_flag("CLAMP_NEGATIVE_STOCKOUT_DAYS", True)

# Grouping keys shared by every stage.
TRIPLE_KEYS = ["sku_id", "warehouse_id", "supplier_name"]
DEMAND_KEYS = TRIPLE_KEYS + ["use_case_category"]

# Define the explicit column order for the final report in one place.
REPORT_COLUMNS = [
    "warehouse_id",
    "warehouse_name",
    "country",
    "sku_id",
    "sku_name",
    "use_case_category",
    "supplier_name",
    "bundle_size",
    "internal_quantity",
    "num_units_delivered",
    "avg_daily_consumption",
    "days_out_of_stock",
    "days_in_stock",
    "missed_opportunities",
]
