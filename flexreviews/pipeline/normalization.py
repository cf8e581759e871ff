"""
Review Normalizer.

Maps heterogeneous Hostaway records onto NormalizedReview: sanitized text,
closed enumerations, 0-5 ratings, slugs and a resolved approval state.
"""

import logging
from typing import Callable, Iterable, List, Optional

import config.settings as settings
from flexreviews.models.review import (
    NormalizedCategoryRating,
    NormalizedReview,
    RawCategoryRating,
    RawReview,
    ReviewChannel,
    ReviewStatus,
    ReviewType,
)
from flexreviews.utils.dates import canonical_timestamp
from flexreviews.utils.sanitize import (
    humanize_key,
    sanitize_or_default,
    sanitize_text,
    slugify,
)
from flexreviews.utils.scales import detect_scale, normalize_to_target

logger = logging.getLogger(__name__)

ApprovalLookup = Callable[[str], Optional[bool]]


def review_id_for(source_id) -> str:
    """Namespaced review id, e.g. 7453 -> hostaway-7453."""
    return f"{settings.REVIEW_ID_PREFIX}-{source_id}"


def normalize_category(category: RawCategoryRating) -> NormalizedCategoryRating:
    """
    Normalize one category sub-rating.

    The scale is detected from the category's own value only; any
    top-level ratingScale hint does not apply.
    """
    scale = detect_scale(category.rating)
    key = sanitize_or_default(category.category, settings.DEFAULT_CATEGORY_KEY)
    return NormalizedCategoryRating(
        key=key,
        label=humanize_key(key),
        rating=category.rating,
        scale=scale,
        normalized_rating=normalize_to_target(category.rating, scale)
    )


def resolve_approval(
    override: Optional[bool],
    publish_flag: Optional[bool],
    normalized_rating: Optional[float]
) -> bool:
    """
    Approval precedence:
    1. Manager override from the approval store
    2. Explicit publishOnFlex flag on the source record
    3. Normalized rating at or above AUTO_APPROVE_THRESHOLD
    """
    if override is not None:
        return override
    if publish_flag is not None:
        return publish_flag
    return normalized_rating is not None and normalized_rating >= settings.AUTO_APPROVE_THRESHOLD


class ReviewNormalizer:
    """
    Converts raw reviews into canonical reviews.

    Pure apart from reading the approval lookup, so the same raw review
    with an unchanged store always yields an equal NormalizedReview.
    """

    def __init__(self, approval_lookup: ApprovalLookup):
        """
        Initialize normalizer.

        Args:
            approval_lookup: Callable returning the stored approval for a
                normalized review id, or None (e.g. ApprovalStore.get)
        """
        self.approval_lookup = approval_lookup

    def normalize(self, raw: RawReview) -> NormalizedReview:
        """
        Normalize a single raw review. Never raises on malformed fields.

        Args:
            raw: Raw review record

        Returns:
            NormalizedReview
        """
        review_id = review_id_for(raw.id)

        scale = detect_scale(raw.rating, raw.rating_scale)
        normalized_rating = normalize_to_target(raw.rating, scale)

        listing_name = sanitize_or_default(raw.listing_name, settings.DEFAULT_LISTING_NAME)
        tags = tuple(t for t in (sanitize_text(tag) for tag in raw.tags) if t)

        approved = resolve_approval(
            override=self.approval_lookup(review_id),
            publish_flag=raw.publish_on_flex,
            normalized_rating=normalized_rating
        )

        review = NormalizedReview(
            id=review_id,
            source_id=raw.id,
            listing_id=raw.listing_id,
            listing_name=listing_name,
            listing_slug=slugify(listing_name),
            submitted_at=canonical_timestamp(raw.submitted_at),
            channel=ReviewChannel.parse(raw.channel),
            type=ReviewType.parse(raw.type),
            status=ReviewStatus.parse(raw.status),
            guest_name=sanitize_text(raw.guest_name),
            public_review=sanitize_text(raw.public_review),
            private_review=sanitize_text(raw.private_review),
            manager_response=sanitize_text(raw.manager_response),
            rating=raw.rating,
            rating_scale=scale,
            normalized_rating=normalized_rating,
            category_ratings=tuple(normalize_category(c) for c in raw.review_category),
            tags=tags,
            is_approved=approved
        )

        logger.debug(
            f"Normalized {review_id}: rating={raw.rating}/{scale} -> {normalized_rating}, "
            f"channel={review.channel.value}, approved={approved}"
        )
        return review

    def normalize_all(self, raws: Iterable[RawReview]) -> List[NormalizedReview]:
        """Normalize a whole corpus, preserving input order."""
        reviews = [self.normalize(raw) for raw in raws]
        logger.info(f"Normalized {len(reviews)} reviews")
        return reviews


# Design Rationale and Trade-offs:
#
# 1. Why inject approval_lookup instead of the store itself?
#    - The normalizer only reads approvals
#    - Tests pass a lambda; the orchestrator passes ApprovalStore.get
#    - Trade-off: Callers wire the lookup explicitly
#
# 2. Why detect category scales independently of the top-level hint?
#    - Hostaway reports category ratings on their own scale (often 10)
#    - Applying the overall hint to categories skews them
#    - Trade-off: A category value of 5 or less is always read as out of 5
#
# 3. Why fall back instead of raising on malformed fields?
#    - One bad record must not break the response for the whole corpus
#    - Every enum has an explicit fallback member
#    - Trade-off: Bad data is visible only as fallback values and DEBUG logs
