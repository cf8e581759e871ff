"""
Review Loader.

Reads the Hostaway reviews export ({"status": ..., "result": [...]})
from disk and turns each record into a RawReview.
"""

import json
import logging
import os
from typing import Iterable, List

from flexreviews.models.review import RawReview

logger = logging.getLogger(__name__)


def parse_records(records: Iterable) -> List[RawReview]:
    """
    Convert record dicts to RawReview objects.

    Entries that are not JSON objects are skipped with a warning; anything
    inside an object is left for the normalizer to degrade gracefully.
    """
    reviews = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object review record at position {position}")
            continue
        reviews.append(RawReview.from_dict(record))
    return reviews


class ReviewLoader:
    """
    Loads the raw review corpus.

    Accepts either the Hostaway envelope or a bare list of records.
    """

    def __init__(self, corpus_path: str):
        """
        Initialize loader.

        Args:
            corpus_path: Path to the reviews JSON export
        """
        self.corpus_path = str(corpus_path)
        logger.info(f"Initialized ReviewLoader with corpus_path={self.corpus_path}")

    def load(self) -> List[RawReview]:
        """
        Read and parse the corpus.

        Returns:
            List of RawReview objects

        Raises:
            FileNotFoundError: If the corpus file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        if not os.path.exists(self.corpus_path):
            logger.error(f"Review corpus not found at {self.corpus_path}")
            raise FileNotFoundError(self.corpus_path)

        try:
            with open(self.corpus_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse review corpus {self.corpus_path}: {e}")
            raise

        if isinstance(data, dict):
            if data.get("status") not in (None, "success"):
                logger.warning(f"Corpus envelope reports status={data.get('status')!r}")
            records = data.get("result") or []
        elif isinstance(data, list):
            records = data
        else:
            logger.warning(f"Unexpected corpus root type {type(data).__name__}, treating as empty")
            records = []

        if not isinstance(records, list):
            logger.warning("Corpus 'result' is not a list, treating as empty")
            records = []

        reviews = parse_records(records)
        logger.info(f"Loaded {len(reviews)} raw reviews from {self.corpus_path}")
        return reviews
