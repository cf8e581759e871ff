"""
Aggregate data models.

Derived per query and never cached: listing summaries, collection
metrics and the top-level response envelope.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import config.settings as settings


@dataclass
class ChannelBreakdown:
    channel: str
    label: str
    count: int
    ratio: float  # count / reviews in the set, 2 decimals

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "label": self.label,
            "count": self.count,
            "ratio": self.ratio
        }


@dataclass
class CategoryAverage:
    category: str  # Human label, e.g. "Check In"
    average: Optional[float]  # On the category's original scale
    scale: float
    normalized_average: Optional[float]

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "average": self.average,
            "scale": self.scale,
            "normalizedAverage": self.normalized_average
        }


@dataclass
class TrendPoint:
    period: str  # YYYY-MM
    average_rating: Optional[float]
    normalized_average: Optional[float]
    review_count: int

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "averageRating": self.average_rating,
            "normalizedAverage": self.normalized_average,
            "reviewCount": self.review_count
        }


@dataclass
class ListingReviewSummary:
    """Statistics for one listing within the working set."""
    listing_id: object
    listing_name: str
    listing_slug: str
    total_reviews: int
    approved_reviews: int
    last_review_date: Optional[str]
    average_rating: Optional[float]
    normalized_average_rating: Optional[float]
    rating_scale: float = settings.NORMALIZED_TARGET_SCALE
    channels: List[ChannelBreakdown] = field(default_factory=list)
    category_averages: List[CategoryAverage] = field(default_factory=list)
    rating_trend: List[TrendPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "listingId": self.listing_id,
            "listingName": self.listing_name,
            "listingSlug": self.listing_slug,
            "totalReviews": self.total_reviews,
            "approvedReviews": self.approved_reviews,
            "lastReviewDate": self.last_review_date,
            "averageRating": self.average_rating,
            "ratingScale": self.rating_scale,
            "normalizedAverageRating": self.normalized_average_rating,
            "channels": [c.to_dict() for c in self.channels],
            "categoryAverages": [c.to_dict() for c in self.category_averages],
            "ratingTrend": [p.to_dict() for p in self.rating_trend]
        }


@dataclass
class CollectionMetrics:
    total_reviews: int
    approved_reviews: int
    average_rating: Optional[float]
    normalized_average_rating: Optional[float]
    date_from: Optional[str]
    date_to: Optional[str]
    rating_scale: float = settings.NORMALIZED_TARGET_SCALE

    def to_dict(self) -> dict:
        return {
            "totalReviews": self.total_reviews,
            "approvedReviews": self.approved_reviews,
            "averageRating": self.average_rating,
            "ratingScale": self.rating_scale,
            "normalizedAverageRating": self.normalized_average_rating,
            "dateRange": {"from": self.date_from, "to": self.date_to}
        }


@dataclass
class FilterVocabulary:
    """Every option observed in the full, unfiltered corpus."""
    channels: List[str]
    review_types: List[str]
    categories: List[str]
    statuses: List[str]
    date_min: Optional[str]
    date_max: Optional[str]

    def to_dict(self) -> dict:
        return {
            "channels": list(self.channels),
            "reviewTypes": list(self.review_types),
            "categories": list(self.categories),
            "statuses": list(self.statuses),
            "dateRange": {"min": self.date_min, "max": self.date_max}
        }


@dataclass
class ReviewsResponse:
    """Top-level pipeline output."""
    generated_at: str
    filters: FilterVocabulary
    overall: CollectionMetrics
    filtered: CollectionMetrics
    listings: List[ListingReviewSummary]
    reviews: list  # NormalizedReview items, filtered and sorted

    def to_dict(self) -> dict:
        """Convert to the JSON body served to dashboards."""
        return {
            "meta": {
                "generatedAt": self.generated_at,
                "filters": self.filters.to_dict()
            },
            "metrics": {
                "overall": self.overall.to_dict(),
                "filtered": self.filtered.to_dict()
            },
            "listings": [listing.to_dict() for listing in self.listings],
            "reviews": [review.to_dict() for review in self.reviews]
        }
