"""
Review Filter.

Evaluates a FilterSpec against normalized reviews. Every set predicate
must hold; unset predicates pass.
"""

import logging
from typing import Iterable, List, Optional

from flexreviews.models.query import FilterSpec
from flexreviews.models.review import NormalizedCategoryRating, NormalizedReview
from flexreviews.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)


def _search_haystack(review: NormalizedReview) -> str:
    parts = [
        review.listing_name,
        review.guest_name or "",
        review.public_review or "",
        review.private_review or "",
        review.manager_response or "",
        *review.tags,
    ]
    return " ".join(parts).lower()


def _find_category(review: NormalizedReview, key: str) -> Optional[NormalizedCategoryRating]:
    wanted = key.lower()
    for category in review.category_ratings:
        if category.key.lower() == wanted:
            return category
    return None


def _within_rating_bounds(value: Optional[float], lower: Optional[float], upper: Optional[float]) -> bool:
    if lower is not None and (value is None or value < lower):
        return False
    if upper is not None and (value is None or value > upper):
        return False
    return True


def matches(review: NormalizedReview, spec: FilterSpec) -> bool:
    """
    Decide whether review satisfies every predicate in spec.

    Args:
        review: Normalized review
        spec: Filter predicates

    Returns:
        True if the review is kept
    """
    if spec.listing_id is not None and review.listing_id != spec.listing_id:
        return False

    if spec.listing_slug and review.listing_slug != spec.listing_slug:
        return False

    if spec.channels and review.channel not in spec.channels:
        return False

    if spec.types and review.type not in spec.types:
        return False

    if spec.statuses and review.status not in spec.statuses:
        return False

    if spec.approved is not None and review.is_approved != spec.approved:
        return False

    if not _within_rating_bounds(review.normalized_rating, spec.min_rating, spec.max_rating):
        return False

    # The category must be present, whatever its rating
    if spec.category:
        category = _find_category(review, spec.category)
        if category is None:
            return False
        if not _within_rating_bounds(category.normalized_rating, spec.min_category_rating, None):
            return False

    # Bounds that do not parse are ignored
    start = parse_timestamp(spec.start_date) if spec.start_date else None
    end = parse_timestamp(spec.end_date) if spec.end_date else None
    if start is not None or end is not None:
        submitted = parse_timestamp(review.submitted_at)
        if submitted is None:
            return False
        if start is not None and submitted < start:
            return False
        if end is not None and submitted > end:
            return False

    if spec.search and spec.search.strip():
        haystack = _search_haystack(review)
        if not all(term in haystack for term in spec.search.lower().split()):
            return False

    return True


class ReviewFilter:
    """Applies one FilterSpec to a review set."""

    def __init__(self, spec: Optional[FilterSpec] = None):
        self.spec = spec or FilterSpec()

    def apply(self, reviews: Iterable[NormalizedReview]) -> List[NormalizedReview]:
        """Keep reviews matching the spec, preserving order."""
        reviews = list(reviews)
        kept = [review for review in reviews if matches(review, self.spec)]

        if len(kept) < len(reviews):
            logger.debug(f"Filtered out {len(reviews) - len(kept)} of {len(reviews)} reviews")

        return kept


# Design Rationale and Trade-offs:
#
# 1. Why one matches() function instead of a chain of filter classes?
#    - Every predicate is a short equality or bound check
#    - Sequential filters equal one combined filter, so composition is free
#    - Trade-off: Adding a predicate means editing this function
#
# 2. Why ignore unparseable date bounds?
#    - A typo in a query string should not empty the result
#    - Trade-off: The caller gets no signal that a bound was dropped
#
# 3. Why split search on whitespace?
#    - "wifi terrace" finds reviews mentioning both, in any order
#    - Trade-off: Exact phrase search is not available
