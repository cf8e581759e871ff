"""
Review data models.

RawReview mirrors one Hostaway record as it arrives (nothing trusted).
NormalizedReview is the canonical shape every later stage works on.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from flexreviews.utils.scales import is_number


class ReviewChannel(str, Enum):
    """Booking channel a review came through."""
    AIRBNB = "airbnb"
    BOOKING = "booking"
    GOOGLE = "google"
    EXPEDIA = "expedia"
    VRBO = "vrbo"
    FLEX = "flex"
    DIRECT = "direct"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> "ReviewChannel":
        """
        Substring match, first hit in priority order wins.

        "Airbnb (Official)" -> AIRBNB, "booking.com" -> BOOKING,
        anything unrecognized or missing -> OTHER.
        """
        if not isinstance(value, str) or not value:
            return cls.OTHER
        lowered = value.lower()
        for channel in CHANNEL_PRIORITY:
            if channel.value in lowered:
                return channel
        return cls.OTHER

    @property
    def label(self) -> str:
        return CHANNEL_LABELS[self]


CHANNEL_PRIORITY = (
    ReviewChannel.AIRBNB,
    ReviewChannel.BOOKING,
    ReviewChannel.GOOGLE,
    ReviewChannel.EXPEDIA,
    ReviewChannel.VRBO,
    ReviewChannel.FLEX,
    ReviewChannel.DIRECT,
)

CHANNEL_LABELS = {
    ReviewChannel.AIRBNB: "Airbnb",
    ReviewChannel.BOOKING: "Booking.com",
    ReviewChannel.GOOGLE: "Google",
    ReviewChannel.EXPEDIA: "Expedia",
    ReviewChannel.VRBO: "Vrbo",
    ReviewChannel.FLEX: "Flex Living",
    ReviewChannel.DIRECT: "Direct",
    ReviewChannel.OTHER: "Other",
}


class ReviewType(str, Enum):
    """Who reviewed whom."""
    GUEST_TO_HOST = "guest-to-host"
    HOST_TO_GUEST = "host-to-guest"
    GUEST_TO_GUEST = "guest-to-guest"
    HOST_TO_HOST = "host-to-host"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value) -> "ReviewType":
        """Exact, case-insensitive match; UNKNOWN otherwise."""
        if not isinstance(value, str):
            return cls.UNKNOWN
        lowered = value.lower()
        for member in cls:
            if member is not cls.UNKNOWN and member.value == lowered:
                return member
        return cls.UNKNOWN


class ReviewStatus(str, Enum):
    """Publication status reported by the source."""
    PUBLISHED = "published"
    PENDING = "pending"
    HIDDEN = "hidden"
    ARCHIVED = "archived"

    @classmethod
    def parse(cls, value) -> "ReviewStatus":
        """Exact, case-insensitive match; PUBLISHED otherwise."""
        if not isinstance(value, str):
            return cls.PUBLISHED
        lowered = value.lower()
        for member in cls:
            if member.value == lowered:
                return member
        return cls.PUBLISHED


def _number_or_none(value) -> Optional[float]:
    """Finite number, or a numeric string, else None."""
    if is_number(value):
        return value
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if is_number(parsed) else None
    return None


@dataclass
class RawCategoryRating:
    """One category sub-rating as sent by the source."""
    category: Optional[str]
    rating: Optional[float] = None

    @classmethod
    def from_dict(cls, data) -> "RawCategoryRating":
        if not isinstance(data, dict):
            return cls(category=None, rating=None)
        category = data.get("category")
        return cls(
            category=category if isinstance(category, str) else None,
            rating=_number_or_none(data.get("rating"))
        )


@dataclass
class RawReview:
    """
    Raw review from the Hostaway reviews export.

    Every field is optional in practice; from_dict() never raises and
    leaves fallbacks to the normalizer.
    """
    id: object  # Source identifier, normally an int
    listing_id: object = None
    listing_name: Optional[str] = None
    type: Optional[str] = None
    channel: Optional[str] = None
    status: Optional[str] = None
    rating: Optional[float] = None
    rating_scale: Optional[float] = None
    public_review: Optional[str] = None
    private_review: Optional[str] = None
    manager_response: Optional[str] = None
    review_category: List[RawCategoryRating] = field(default_factory=list)
    submitted_at: Optional[str] = None
    guest_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    publish_on_flex: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawReview":
        """Create RawReview from a camelCase Hostaway record."""
        categories = data.get("reviewCategory")
        tags = data.get("tags")
        publish = data.get("publishOnFlex")

        def text(key: str) -> Optional[str]:
            value = data.get(key)
            return value if isinstance(value, str) else None

        return cls(
            id=data.get("id"),
            listing_id=data.get("listingId"),
            listing_name=text("listingName"),
            type=text("type"),
            channel=text("channel"),
            status=text("status"),
            rating=_number_or_none(data.get("rating")),
            rating_scale=_number_or_none(data.get("ratingScale")),
            public_review=text("publicReview"),
            private_review=text("privateReview"),
            manager_response=text("managerResponse"),
            review_category=[
                RawCategoryRating.from_dict(item)
                for item in (categories if isinstance(categories, list) else [])
            ],
            submitted_at=text("submittedAt"),
            guest_name=text("guestName"),
            tags=[t for t in (tags if isinstance(tags, list) else []) if isinstance(t, str)],
            publish_on_flex=publish if isinstance(publish, bool) else None
        )


@dataclass(frozen=True)
class NormalizedCategoryRating:
    """A category sub-rating projected onto the 0-5 scale."""
    key: str
    label: str
    rating: Optional[float]
    scale: float
    normalized_rating: Optional[float]

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "rating": self.rating,
            "scale": self.scale,
            "normalizedRating": self.normalized_rating
        }


@dataclass(frozen=True)
class NormalizedReview:
    """
    Canonical review.

    Enumerations always hold members of their closed sets and
    normalized_rating is None or within [0, 5].
    """
    id: str
    source_id: object
    listing_id: object
    listing_name: str
    listing_slug: str
    submitted_at: str  # ISO instant, e.g. 2024-03-01T10:00:00.000Z
    channel: ReviewChannel
    type: ReviewType
    status: ReviewStatus
    guest_name: Optional[str]
    public_review: Optional[str]
    private_review: Optional[str]
    manager_response: Optional[str]
    rating: Optional[float]
    rating_scale: float
    normalized_rating: Optional[float]
    category_ratings: tuple = ()  # NormalizedCategoryRating items
    tags: tuple = ()
    is_approved: bool = False

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "listingId": self.listing_id,
            "listingName": self.listing_name,
            "listingSlug": self.listing_slug,
            "submittedAt": self.submitted_at,
            "channel": self.channel.value,
            "type": self.type.value,
            "status": self.status.value,
            "guestName": self.guest_name,
            "publicReview": self.public_review,
            "privateReview": self.private_review,
            "managerResponse": self.manager_response,
            "rating": self.rating,
            "ratingScale": self.rating_scale,
            "normalizedRating": self.normalized_rating,
            "categoryRatings": [c.to_dict() for c in self.category_ratings],
            "tags": list(self.tags),
            "isApproved": self.is_approved
        }
