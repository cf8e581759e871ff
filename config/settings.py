"""
Configuration settings for Flex Reviews.

Centralized configuration for the normalization and aggregation pipeline.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("FLEX_REVIEWS_DATA_ROOT", PROJECT_ROOT / "data"))
OUTPUT_ROOT = Path(os.getenv("FLEX_REVIEWS_OUTPUT_ROOT", PROJECT_ROOT / "output"))
CORPUS_PATH = Path(os.getenv("FLEX_REVIEWS_CORPUS", DATA_ROOT / "hostaway_reviews.json"))

# Review identity
REVIEW_ID_PREFIX = "hostaway"

# Rating scales
DEFAULT_RATING_SCALE = 5
NORMALIZED_TARGET_SCALE = 5
KNOWN_RATING_SCALES = (5, 10, 20, 100)  # Checked in ascending order
RATING_DECIMALS = 2

# Approval
AUTO_APPROVE_THRESHOLD = 4.4  # Normalized rating at or above this is approved by default

# Fallbacks
DEFAULT_LISTING_NAME = "Flex Living Listing"
DEFAULT_LISTING_SLUG = "listing"
DEFAULT_CATEGORY_KEY = "other"
EPOCH_ISO = "1970-01-01T00:00:00.000Z"

# Sorting
DEFAULT_SORT_FIELD = "date"
DEFAULT_SORT_DIRECTION = "desc"

# Logging
LOG_LEVEL = os.getenv("FLEX_REVIEWS_LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("FLEX_REVIEWS_LOG_FILE", "flexreviews.log")
