"""
Pipeline Orchestrator.

Assembles the reviews response: normalize the whole corpus, filter,
sort, then aggregate the working set into listing summaries and metrics.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from flexreviews.models.query import FilterSpec, SortSpec
from flexreviews.models.review import RawReview
from flexreviews.models.summary import ReviewsResponse
from flexreviews.pipeline.aggregation import ReviewAggregator
from flexreviews.pipeline.filtering import ReviewFilter
from flexreviews.pipeline.normalization import ReviewNormalizer, review_id_for
from flexreviews.pipeline.sorting import sort_reviews
from flexreviews.registry.approval_store import ApprovalStore, ApprovalUpdate
from flexreviews.utils.dates import to_iso

logger = logging.getLogger(__name__)


class ReviewPipelineOrchestrator:
    """
    Coordinates one query against the review corpus.

    Flow:
    1. Normalization (full corpus, reads the approval store)
    2. Filtering → 3. Sorting (working set)
    4. Aggregation: overall metrics and filter vocabulary from the full
       corpus; filtered metrics and listing summaries from the working set

    Nothing is cached between calls. The approval store is the only state
    and it is injected.
    """

    def __init__(self, approval_store: Optional[ApprovalStore] = None):
        """
        Initialize pipeline orchestrator.

        Args:
            approval_store: Store of approval overrides (a fresh one if None)
        """
        self.approval_store = approval_store if approval_store is not None else ApprovalStore()
        self.normalizer = ReviewNormalizer(approval_lookup=self.approval_store.get)
        self.aggregator = ReviewAggregator()

    def seed_approvals(self, raws: Iterable[RawReview]) -> None:
        """
        Seed the store with each record's publishOnFlex flag.

        Idempotent: existing values, including manager overrides, are kept.
        """
        count = 0
        for raw in raws:
            self.approval_store.seed_if_absent(review_id_for(raw.id), raw.publish_on_flex)
            count += 1
        logger.info(f"Seeded approvals for {count} source reviews ({len(self.approval_store)} stored)")

    def build_response(
        self,
        raws: List[RawReview],
        filter_spec: Optional[FilterSpec] = None,
        sort_spec: Optional[SortSpec] = None
    ) -> ReviewsResponse:
        """
        Run the pipeline for one query.

        Args:
            raws: Full raw corpus
            filter_spec: Predicates for the working set (none = keep all)
            sort_spec: Ordering of the working set (none = date:desc)

        Returns:
            ReviewsResponse
        """
        all_reviews = self.normalizer.normalize_all(raws)

        working_set = ReviewFilter(filter_spec).apply(all_reviews)
        working_set = sort_reviews(working_set, sort_spec)

        logger.info(f"Working set: {len(working_set)} of {len(all_reviews)} reviews")

        return ReviewsResponse(
            generated_at=to_iso(datetime.now(timezone.utc)),
            filters=self.aggregator.filter_vocabulary(all_reviews),
            overall=self.aggregator.collection_metrics(all_reviews),
            filtered=self.aggregator.collection_metrics(working_set),
            listings=self.aggregator.listing_summaries(working_set),
            reviews=working_set
        )

    def update_approval(self, payload) -> Dict:
        """
        Apply an approval mutation request body.

        Args:
            payload: {"reviewId": str, "approved": bool}

        Returns:
            {"reviewId", "approved", "updatedAt"}

        Raises:
            ApprovalRequestError: If the body is malformed
        """
        update = ApprovalUpdate.from_payload(payload)
        self.approval_store.set(update.review_id, update.approved)
        return {
            "reviewId": update.review_id,
            "approved": update.approved,
            "updatedAt": to_iso(datetime.now(timezone.utc))
        }

    def approvals(self) -> Dict:
        """Current contents of the approval store."""
        return {"approvals": self.approval_store.snapshot()}


# Design Rationale and Trade-offs:
#
# 1. Why normalize the full corpus on every query?
#    - Approval overrides change between queries and feed normalization
#    - Filter vocabulary and overall metrics always cover the full corpus
#    - Trade-off: Repeats work per call, acceptable without caching
#
# 2. Why pass raws in rather than holding a loader?
#    - Callers decide where the corpus comes from (file, API, fixture)
#    - Trade-off: The caller keeps the corpus alive between calls
