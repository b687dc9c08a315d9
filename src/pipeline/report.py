"""
Catalogue Report.

Summarizes the catalogue per media type into a CSV table.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import List

import pandas as pd

from src.models.review import MediaType, ReviewRecord, format_timestamp

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["Type", "Reviews", "Average Rating", "Highest Rating", "Latest Review"]


class CatalogueReport:
    """
    Per-media-type summary of a set of reviews.
    """

    def build_table(self, reviews: List[ReviewRecord]) -> pd.DataFrame:
        """
        Build the summary table.

        One row per media type, including types with no reviews, in
        MediaType declaration order.

        Args:
            reviews: Reviews to summarize

        Returns:
            DataFrame with REPORT_COLUMNS
        """
        df = pd.DataFrame(
            [
                {
                    "Type": r.media_type.value,
                    "rating": float(r.rating),
                    "reviewed": r.review_timestamp.astimezone(timezone.utc),
                }
                for r in reviews
            ],
            columns=["Type", "rating", "reviewed"],
        )

        rows = []
        for media_type in MediaType:
            subset = df[df["Type"] == media_type.value]
            if subset.empty:
                rows.append({
                    "Type": media_type.value,
                    "Reviews": 0,
                    "Average Rating": None,
                    "Highest Rating": None,
                    "Latest Review": None,
                })
                continue

            rows.append({
                "Type": media_type.value,
                "Reviews": len(subset),
                "Average Rating": round(subset["rating"].mean(), 2),
                "Highest Rating": subset["rating"].max(),
                "Latest Review": format_timestamp(subset["reviewed"].max().to_pydatetime()),
            })

        return pd.DataFrame(rows, columns=REPORT_COLUMNS)

    def generate(self, reviews: List[ReviewRecord], output_dir: str = "output") -> str:
        """
        Write the summary table as CSV, with a metadata JSON beside it.

        Args:
            reviews: Reviews to summarize
            output_dir: Directory to save outputs

        Returns:
            Path to generated CSV file
        """
        df = self.build_table(reviews)

        os.makedirs(output_dir, exist_ok=True)
        output_path = os.path.join(output_dir, "catalogue_report.csv")
        df.to_csv(output_path, index=False)

        logger.info(f"Catalogue report saved to {output_path} ({len(reviews)} reviews)")

        metadata_path = os.path.join(output_dir, "catalogue_report_metadata.json")
        metadata = {
            "total_reviews": len(reviews),
            "media_types": len(df),
            "generated_at": format_timestamp(datetime.now(timezone.utc)),
        }
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")

        return output_path
