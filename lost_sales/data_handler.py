import json
import logging
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import requests

from . import settings
from . import utils
from .schemas import LostSalesRecord

logger = logging.getLogger(__name__)


def save_outputs(
    validated_data: list[LostSalesRecord],
    filename_base: str,
    output_dir: Optional[Path] = None,
) -> Path:
    """Saves the validated report to CSV and conditionally to JSON, with dated filenames."""
    output_dir = output_dir or settings.OUTPUT_DIR
    output_dir.mkdir(parents=True, exist_ok=True)
    date_suffix = utils.get_date_suffix_for_filename()

    csv_path = output_dir / f"{filename_base}_{date_suffix}.csv"
    json_path = output_dir / f"{filename_base}_{date_suffix}.json"

    df = pd.DataFrame(
        [item.model_dump() for item in validated_data],
        columns=list(LostSalesRecord.model_fields.keys()),
    )
    df.to_csv(csv_path, index=False)
    logger.info(f"✅ Report saved to: {csv_path}")

    if settings.SAVE_JSON_OUTPUT:
        with open(json_path, "w", encoding="utf-8") as f:
            json_data = [item.model_dump(mode="json") for item in validated_data]
            json.dump(json_data, f, indent=2)
        logger.info(f"✅ JSON output saved to: {json_path}")
    else:
        logger.info("INFO: Skipping JSON file save as per configuration.")

    return csv_path


def post_to_webhook(
    validated_data: list[LostSalesRecord],
    metadata: dict[str, Any],
    report_type: str,
) -> bool:
    """
    Posts the validated rows and the run metadata to the webhook.
    Failures are logged; the report on disk is already complete at this point.
    """
    if not settings.WEBHOOK_URL:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting {report_type} report to webhook.")

    payload = {
        "reportType": report_type,
        "reportData": [item.model_dump(mode="json") for item in validated_data],
        "metadata": metadata,
    }

    try:
        response = requests.post(
            settings.WEBHOOK_URL, json=payload, timeout=settings.WEBHOOK_TIMEOUT
        )
        response.raise_for_status()
        logger.info("✅ Report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
