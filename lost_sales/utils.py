import logging
from datetime import date, datetime, timedelta
from pathlib import Path

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

_TRUTHY = {"true", "t", "1", "yes", "y"}


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def default_window(days: int, today: date | None = None) -> tuple[date, date]:
    """Returns the trailing `days`-day window ending yesterday."""
    end_date = (today or date.today()) - timedelta(days=1)
    return end_date - timedelta(days=days), end_date


def load_csv(file_path: Path, **read_kwargs) -> pd.DataFrame | None:
    """
    A CSV loader with an encoding fallback.
    Tries UTF-8 with BOM support first, then latin-1, which can read any byte.
    Returns None when the file is missing or unreadable.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", **read_kwargs)

    except UnicodeDecodeError:
        logger.info(
            f"INFO: UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", **read_kwargs)
        except (OSError, ValueError) as e_latin1:
            logger.error(
                f"ERROR: Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.warning(f"Extract not found at {file_path}, skipping.")
        return None

    except (OSError, ValueError) as e_general:
        # pandas parser errors subclass ValueError
        logger.error(
            f"ERROR: An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None


def to_bool(series: pd.Series) -> pd.Series:
    """Parses flag columns written as true/false, 1/0 or yes/no. Blanks are False."""
    if series.dtype == bool:
        return series
    return series.astype(str).str.strip().str.lower().isin(_TRUTHY)


def round_half_away(values: pd.Series) -> pd.Series:
    """
    Rounds to the nearest integer with halves going away from zero, like SQL ROUND.
    pandas/numpy round halves to even, which would turn 2.5 into 2.
    """
    return np.sign(values) * np.floor(np.abs(values) + 0.5)
