"""
Integration tests for the Review Pipeline Orchestrator.
"""

import json

import pytest

from flexreviews.models.query import FilterSpec, SortSpec
from flexreviews.models.review import ReviewChannel
from flexreviews.orchestrator import ReviewPipelineOrchestrator
from flexreviews.registry.approval_store import ApprovalRequestError, ApprovalStore


@pytest.fixture
def orchestrator():
    return ReviewPipelineOrchestrator(approval_store=ApprovalStore())


def test_empty_corpus(orchestrator):
    """Test an empty corpus yields an empty but well-formed response."""
    response = orchestrator.build_response([])

    assert response.reviews == []
    assert response.listings == []
    assert response.overall.total_reviews == 0
    assert response.filtered.average_rating is None
    assert response.filters.channels == []

    body = response.to_dict()
    assert body["metrics"]["overall"]["dateRange"] == {"from": None, "to": None}
    assert body["meta"]["filters"]["dateRange"] == {"min": None, "max": None}


def test_full_corpus_response(orchestrator, raw_reviews):
    """Test the unfiltered response over the whole corpus."""
    response = orchestrator.build_response(raw_reviews)

    assert [r.id for r in response.reviews] == ["hostaway-4", "hostaway-2", "hostaway-1", "hostaway-3"]
    assert response.overall.total_reviews == 4
    assert response.overall.approved_reviews == 2
    assert response.overall.normalized_average_rating == 4.13
    assert response.filtered == response.overall
    assert [s.listing_id for s in response.listings] == [201, 202]


def test_filtered_metrics_and_full_vocabulary(orchestrator, raw_reviews):
    """Test metadata and overall metrics ignore the filter."""
    response = orchestrator.build_response(
        raw_reviews,
        FilterSpec(channels=[ReviewChannel.AIRBNB])
    )

    assert [r.id for r in response.reviews] == ["hostaway-1", "hostaway-3"]
    assert response.filtered.total_reviews == 2
    assert response.filtered.approved_reviews == 1
    assert response.filtered.normalized_average_rating == 4.5
    assert response.overall.total_reviews == 4
    assert response.filters.channels == ["airbnb", "booking", "google"]
    assert response.filters.categories == ["check_in", "cleanliness", "communication"]


def test_filter_excluding_everything(orchestrator, raw_reviews):
    """Test an empty working set alongside full overall metrics."""
    response = orchestrator.build_response(raw_reviews, FilterSpec(search="nothing-matches-this"))

    assert response.reviews == []
    assert response.listings == []
    assert response.filtered.total_reviews == 0
    assert response.overall.total_reviews == 4


def test_sort_spec_applied(orchestrator, raw_reviews):
    """Test the sort spec orders the returned reviews."""
    response = orchestrator.build_response(raw_reviews, sort_spec=SortSpec.parse("rating:asc"))
    assert [r.id for r in response.reviews] == ["hostaway-3", "hostaway-4", "hostaway-2", "hostaway-1"]


def test_update_approval_reflected_in_next_response(orchestrator, raw_reviews):
    """Test a manager override flips approval on the following query."""
    result = orchestrator.update_approval({"reviewId": "hostaway-4", "approved": True})

    assert result["reviewId"] == "hostaway-4"
    assert result["approved"] is True
    assert result["updatedAt"].endswith("Z")

    response = orchestrator.build_response(raw_reviews, FilterSpec(approved=True))
    assert {r.id for r in response.reviews} == {"hostaway-1", "hostaway-2", "hostaway-4"}
    assert response.overall.approved_reviews == 3


def test_override_beats_publish_flag(orchestrator, raw_reviews):
    """Test a manager rejection survives re-seeding from publishOnFlex."""
    orchestrator.seed_approvals(raw_reviews)
    orchestrator.update_approval({"reviewId": "hostaway-2", "approved": False})
    orchestrator.seed_approvals(raw_reviews)

    response = orchestrator.build_response(raw_reviews)
    review = next(r for r in response.reviews if r.id == "hostaway-2")
    assert review.is_approved is False


def test_update_approval_rejects_malformed_payload(orchestrator):
    """Test a bad approval body raises and leaves the store empty."""
    with pytest.raises(ApprovalRequestError):
        orchestrator.update_approval({"reviewId": "hostaway-1", "approved": "yes"})
    assert orchestrator.approvals() == {"approvals": []}


def test_seed_approvals_idempotent(orchestrator, raw_reviews):
    """Test only explicit publishOnFlex flags are seeded, once."""
    orchestrator.seed_approvals(raw_reviews)
    first = orchestrator.approvals()
    orchestrator.seed_approvals(raw_reviews)

    assert orchestrator.approvals() == first
    assert [record["id"] for record in first["approvals"]] == ["hostaway-2"]
    assert first["approvals"][0]["source"] == "initial"


def test_response_is_json_serializable(orchestrator, raw_reviews):
    """Test the response body survives a JSON round trip."""
    body = orchestrator.build_response(raw_reviews).to_dict()
    encoded = json.loads(json.dumps(body))

    assert set(encoded) == {"meta", "metrics", "listings", "reviews"}
    assert encoded["meta"]["generatedAt"].endswith("Z")
    assert encoded["reviews"][0]["channel"] == "google"
    assert encoded["listings"][0]["listingSlug"] == "shoreditch-heights-a"


def test_sample_corpus_end_to_end(orchestrator):
    """Test the bundled sample export runs through the whole pipeline."""
    import config.settings as settings
    from flexreviews.pipeline.ingestion import ReviewLoader

    raws = ReviewLoader(settings.CORPUS_PATH).load()
    orchestrator.seed_approvals(raws)
    response = orchestrator.build_response(raws, FilterSpec.from_query_params({"listingId": "201"}))

    assert response.overall.total_reviews == 7
    assert all(r.listing_id == 201 for r in response.reviews)
    first = next(r for r in response.reviews if r.id == "hostaway-7453")
    assert first.normalized_rating == 4.5
    assert first.rating_scale == 10


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
