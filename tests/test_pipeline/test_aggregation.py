"""
Unit tests for the Review Aggregator.
"""

import pytest

from flexreviews.pipeline.aggregation import ReviewAggregator, build_frame


@pytest.fixture
def aggregator():
    return ReviewAggregator()


def test_build_frame_alignment(reviews):
    """Test one row per review with UTC month buckets."""
    frame = build_frame(reviews)
    assert len(frame) == 4
    assert frame["period"].tolist() == ["2024-03", "2024-04", "2024-02", "2024-04"]
    assert frame["channel"].tolist() == ["airbnb", "booking", "airbnb", "google"]


def test_collection_metrics(aggregator, reviews):
    """Test counts, average and date range over the corpus."""
    metrics = aggregator.collection_metrics(reviews)

    assert metrics.total_reviews == 4
    assert metrics.approved_reviews == 2
    assert metrics.average_rating == 4.13
    assert metrics.normalized_average_rating == 4.13
    assert metrics.rating_scale == 5
    assert metrics.date_from == "2024-02-20T11:00:00.000Z"
    assert metrics.date_to == "2024-04-18T19:40:12.000Z"


def test_collection_metrics_empty(aggregator):
    """Test empty input gives zero counts and null figures."""
    metrics = aggregator.collection_metrics([])
    assert metrics.total_reviews == 0
    assert metrics.approved_reviews == 0
    assert metrics.average_rating is None
    assert metrics.to_dict()["dateRange"] == {"from": None, "to": None}


def test_channel_breakdown_first_seen_order(aggregator, reviews):
    """Test channel counts and ratios in first-seen order."""
    breakdown = aggregator.channel_breakdown(reviews)

    assert [(c.channel, c.count, c.ratio) for c in breakdown] == [
        ("airbnb", 2, 0.5),
        ("booking", 1, 0.25),
        ("google", 1, 0.25),
    ]
    assert breakdown[1].label == "Booking.com"
    assert aggregator.channel_breakdown([]) == []


def test_category_averages_use_last_scale(aggregator, reviews):
    """Test cleanliness 9/10 then 4/5 -> normalized 4.25 on scale 5."""
    listing_reviews = reviews[:2]
    averages = {c.category: c for c in aggregator.category_averages(listing_reviews)}

    cleanliness = averages["Cleanliness"]
    assert cleanliness.normalized_average == 4.25
    assert cleanliness.scale == 5
    assert cleanliness.average == 4.25

    communication = averages["Communication"]
    assert communication.normalized_average == 5.0
    assert communication.scale == 10
    assert communication.average == 10.0


def test_category_without_values_is_omitted(aggregator, make_review):
    """Test categories whose ratings are all missing are left out."""
    review = make_review(reviewCategory=[
        {"category": "value", "rating": None},
        {"category": "location", "rating": 4},
    ])

    averages = aggregator.category_averages([review])
    assert [c.category for c in averages] == ["Location"]


def test_monthly_trend(aggregator, reviews):
    """Test ascending months with null averages for unrated months."""
    listing_202 = reviews[2:]
    trend = aggregator.monthly_trend(listing_202)

    assert [(p.period, p.normalized_average, p.review_count) for p in trend] == [
        ("2024-02", None, 1),
        ("2024-04", 3.9, 1),
    ]
    assert trend[1].average_rating == 3.9


def test_listing_summaries(aggregator, reviews):
    """Test per-listing statistics and ordering."""
    summaries = aggregator.listing_summaries(reviews)

    assert [s.listing_id for s in summaries] == [201, 202]

    first = summaries[0]
    assert first.listing_name == "Shoreditch Heights A"
    assert first.listing_slug == "shoreditch-heights-a"
    assert first.total_reviews == 2
    assert first.approved_reviews == 2
    assert first.normalized_average_rating == 4.25
    assert first.last_review_date == "2024-04-02T09:15:00.000Z"
    assert [(c.channel, c.ratio) for c in first.channels] == [("airbnb", 0.5), ("booking", 0.5)]
    assert [(p.period, p.review_count) for p in first.rating_trend] == [("2024-03", 1), ("2024-04", 1)]

    second = summaries[1]
    assert second.normalized_average_rating == 3.9
    assert second.approved_reviews == 0
    assert second.last_review_date == "2024-04-18T19:40:12.000Z"


def test_listing_summaries_unrated_last_then_name(aggregator, make_review):
    """Test listings without a rating sort after rated ones; ties by name."""
    unrated = make_review(id=1, listingId=1, listingName="Alpha", rating=None)
    zebra = make_review(id=2, listingId=2, listingName="Zebra", rating=4.0)
    apple = make_review(id=3, listingId=3, listingName="apple", rating=4.0)
    top = make_review(id=4, listingId=4, listingName="Top", rating=5.0)

    summaries = aggregator.listing_summaries([unrated, zebra, apple, top])
    assert [s.listing_name for s in summaries] == ["Top", "apple", "Zebra", "Alpha"]
    assert summaries[-1].normalized_average_rating is None


def test_listing_name_from_first_review(aggregator, make_review):
    """Test that a later rename does not change the summary name."""
    older = make_review(id=1, listingId=7, listingName="Old Name")
    newer = make_review(id=2, listingId=7, listingName="New Name")

    summaries = aggregator.listing_summaries([older, newer])
    assert len(summaries) == 1
    assert summaries[0].listing_name == "Old Name"


def test_listing_ids_keep_their_type(aggregator, make_review):
    """Test 5 and "5" are grouped separately."""
    numeric = make_review(id=1, listingId=5)
    textual = make_review(id=2, listingId="5")

    summaries = aggregator.listing_summaries([numeric, textual])
    assert sorted(repr(s.listing_id) for s in summaries) == ["'5'", "5"]


def test_filter_vocabulary(aggregator, reviews):
    """Test sorted filter options over the corpus."""
    vocabulary = aggregator.filter_vocabulary(reviews)

    assert vocabulary.channels == ["airbnb", "booking", "google"]
    assert vocabulary.review_types == ["guest-to-host", "host-to-guest", "unknown"]
    assert vocabulary.statuses == ["pending", "published"]
    assert vocabulary.categories == ["check_in", "cleanliness", "communication"]
    assert vocabulary.date_min == "2024-02-20T11:00:00.000Z"
    assert vocabulary.date_max == "2024-04-18T19:40:12.000Z"


def test_filter_vocabulary_empty(aggregator):
    """Test empty option lists and date range for no reviews."""
    vocabulary = aggregator.filter_vocabulary([])
    assert vocabulary.channels == []
    assert vocabulary.to_dict()["dateRange"] == {"min": None, "max": None}


def test_summary_to_dict_shape(aggregator, reviews):
    """Test camelCase keys in a listing summary."""
    data = aggregator.listing_summaries(reviews)[0].to_dict()
    assert data["ratingScale"] == 5
    assert data["categoryAverages"][0]["category"] == "Cleanliness"
    assert data["ratingTrend"][0] == {
        "period": "2024-03",
        "averageRating": 4.5,
        "normalizedAverage": 4.5,
        "reviewCount": 1,
    }


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
