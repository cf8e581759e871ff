"""
Export utility.

Writes pipeline output to disk: the full response as JSON and a
listing-by-month trend table as CSV with a metadata sidecar.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict

import pandas as pd

from flexreviews.models.summary import ReviewsResponse
from flexreviews.utils.dates import to_iso

logger = logging.getLogger(__name__)

TREND_ID_COLUMNS = ["Listing", "Slug"]


class ExportManager:
    """
    Manages file output for pipeline results.

    Handles:
    - Responses (output/reviews_<stamp>.json)
    - Trend tables (output/trend_<stamp>.csv + _metadata.json)
    """

    def __init__(self, output_root: str):
        """
        Initialize export manager.

        Args:
            output_root: Directory for exported files (created if missing)
        """
        self.output_root = str(output_root)
        os.makedirs(self.output_root, exist_ok=True)
        logger.info(f"Initialized ExportManager with output_root={self.output_root}")

    def save_json(self, payload: Dict, filename: str) -> str:
        """
        Write a JSON document into the output directory.

        Returns:
            Path of the written file
        """
        filepath = os.path.join(self.output_root, filename)
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            logger.info(f"Saved {filepath}")
        except OSError as e:
            logger.error(f"Failed to write {filepath}: {e}")
            raise
        return filepath

    def save_response(self, response: ReviewsResponse, filename: str = "reviews.json") -> str:
        """Write the full response body."""
        return self.save_json(response.to_dict(), filename)

    def build_trend_table(self, response: ReviewsResponse) -> pd.DataFrame:
        """
        Listing x month matrix of normalized averages.

        Rows follow the listing order of the response; months are
        ascending. Months without reviews for a listing are empty.
        """
        rows = []
        for listing in response.listings:
            row = {"Listing": listing.listing_name, "Slug": listing.listing_slug}
            for point in listing.rating_trend:
                row[point.period] = point.normalized_average
            rows.append(row)

        if not rows:
            logger.warning("No listings in response, creating empty trend table")
            return pd.DataFrame(columns=TREND_ID_COLUMNS)

        df = pd.DataFrame(rows)
        periods = sorted(col for col in df.columns if col not in TREND_ID_COLUMNS)
        df = df.reindex(columns=TREND_ID_COLUMNS + periods)
        df["Reviews"] = [listing.total_reviews for listing in response.listings]
        df["Average"] = [listing.normalized_average_rating for listing in response.listings]
        return df

    def save_trend_table(self, response: ReviewsResponse, stem: str = "trend") -> str:
        """
        Write the trend table CSV plus metadata JSON.

        Returns:
            Path to the CSV file
        """
        df = self.build_trend_table(response)
        output_path = os.path.join(self.output_root, f"{stem}.csv")
        df.to_csv(output_path, index=False)

        periods = [col for col in df.columns if col not in TREND_ID_COLUMNS + ["Reviews", "Average"]]
        metadata = {
            "generated_at": to_iso(datetime.now(timezone.utc)),
            "response_generated_at": response.generated_at,
            "listings": len(df),
            "periods": periods,
            "filtered_reviews": response.filtered.total_reviews,
            "overall_reviews": response.overall.total_reviews
        }
        self.save_json(metadata, f"{stem}_metadata.json")

        logger.info(f"Trend table saved to {output_path} ({len(df)} listings, {len(periods)} months)")
        return output_path


# Design Rationale and Trade-offs:
#
# 1. Why a separate ExportManager instead of writing from main.py?
#    - All file output in one place
#    - Tests point it at a temporary directory
#    - Trade-off: Extra class for a handful of writes
#
# 2. Why create the output directory in __init__?
#    - Fails early on permission problems
#    - Trade-off: Creates the directory even if nothing is written
#
# 3. Why leave months without ratings empty in the trend CSV?
#    - An empty cell and a 0.0 average mean different things
#    - Trade-off: Consumers must handle blank cells
#
# 4. Why a metadata sidecar next to the CSV?
#    - Records when and from how many reviews the table was built
#    - Trade-off: Two files per export
