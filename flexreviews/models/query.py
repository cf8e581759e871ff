"""
Query models.

FilterSpec and SortSpec describe one request against the normalized
corpus. Both can be built from URL-style query parameters.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

import config.settings as settings
from flexreviews.models.review import ReviewChannel, ReviewStatus, ReviewType

logger = logging.getLogger(__name__)

SORT_FIELDS = ("date", "rating", "listing", "channel")
SORT_DIRECTIONS = ("asc", "desc")


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def _to_bool(value: Optional[str]) -> Optional[bool]:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        parsed = float(value)
    except ValueError:
        return None
    return None if math.isnan(parsed) else parsed


def _to_int(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass
class FilterSpec:
    """
    Filter predicates, combined with AND.

    None (or an empty list / blank string) leaves a predicate unset.
    """
    listing_id: Optional[object] = None
    listing_slug: Optional[str] = None
    channels: List[ReviewChannel] = field(default_factory=list)
    types: List[ReviewType] = field(default_factory=list)
    statuses: List[ReviewStatus] = field(default_factory=list)
    approved: Optional[bool] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None
    category: Optional[str] = None
    min_category_rating: Optional[float] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    search: Optional[str] = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "FilterSpec":
        """
        Build a FilterSpec from query-string parameters.

        Unrecognized channel/type/status tokens are coerced to their
        fallback members (other/unknown/published) instead of rejected.
        """
        category = params.get("category")
        spec = cls(
            listing_id=_to_int(params.get("listingId")),
            listing_slug=params.get("listingSlug") or None,
            channels=[ReviewChannel.parse(t) for t in _split_csv(params.get("channel"))],
            types=[ReviewType.parse(t) for t in _split_csv(params.get("type"))],
            statuses=[ReviewStatus.parse(t) for t in _split_csv(params.get("status"))],
            approved=_to_bool(params.get("approved")),
            min_rating=_to_float(params.get("minRating")),
            max_rating=_to_float(params.get("maxRating")),
            category=category.lower() if category else None,
            min_category_rating=_to_float(params.get("minCategoryRating")),
            start_date=params.get("startDate") or None,
            end_date=params.get("endDate") or None,
            search=params.get("search") or None
        )
        logger.debug(f"Parsed filter spec: {spec}")
        return spec


@dataclass(frozen=True)
class SortSpec:
    """Sort key and direction, e.g. rating:desc."""
    field: str = settings.DEFAULT_SORT_FIELD
    direction: str = settings.DEFAULT_SORT_DIRECTION

    @property
    def descending(self) -> bool:
        return self.direction != "asc"

    @classmethod
    def parse(cls, token: Optional[str]) -> "SortSpec":
        """
        Parse a field:direction token.

        Missing token -> date:desc. Unknown field -> date.
        Missing or unknown direction -> desc.
        """
        if not token or not token.strip():
            return cls()

        name, _, direction = token.strip().lower().partition(":")
        name = name.strip()
        direction = direction.strip()

        if name not in SORT_FIELDS:
            logger.debug(f"Unknown sort field {name!r}, using {settings.DEFAULT_SORT_FIELD}")
            name = settings.DEFAULT_SORT_FIELD
        if direction not in SORT_DIRECTIONS:
            direction = settings.DEFAULT_SORT_DIRECTION

        return cls(field=name, direction=direction)
