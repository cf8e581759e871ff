"""
Review Sorter.

Orders the working set by date, rating, listing name or channel.
Ties keep their incoming order (stable sort, no secondary key).
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from flexreviews.models.query import SortSpec
from flexreviews.models.review import NormalizedReview
from flexreviews.utils.dates import EPOCH, parse_timestamp

logger = logging.getLogger(__name__)


def _date_key(review: NormalizedReview):
    return parse_timestamp(review.submitted_at) or EPOCH


def _rating_key(review: NormalizedReview) -> float:
    # Unrated reviews sort as -inf: last when descending, first when ascending
    return review.normalized_rating if review.normalized_rating is not None else float("-inf")


def _listing_key(review: NormalizedReview):
    return (review.listing_name.casefold(), review.listing_name)


def _channel_key(review: NormalizedReview) -> str:
    return review.channel.value


SORT_KEYS: Dict[str, Callable[[NormalizedReview], object]] = {
    "date": _date_key,
    "rating": _rating_key,
    "listing": _listing_key,
    "channel": _channel_key,
}


def sort_reviews(
    reviews: Iterable[NormalizedReview],
    spec: Optional[SortSpec] = None
) -> List[NormalizedReview]:
    """
    Return a new list ordered by spec (date:desc when spec is None).

    Args:
        reviews: Reviews to order
        spec: Sort field and direction

    Returns:
        Sorted list; the input is not modified
    """
    spec = spec or SortSpec()
    key = SORT_KEYS.get(spec.field, _date_key)

    ordered = sorted(reviews, key=key, reverse=spec.descending)
    logger.debug(f"Sorted {len(ordered)} reviews by {spec.field}:{spec.direction}")
    return ordered
