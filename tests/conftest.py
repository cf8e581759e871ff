"""
Shared fixtures: a small Hostaway corpus and review factories.
"""

import pytest

from flexreviews.models.review import RawReview
from flexreviews.pipeline.normalization import ReviewNormalizer

BASE_RECORD = {
    "id": 1000,
    "listingId": 900,
    "listingName": "Test Listing",
    "type": "guest-to-host",
    "channel": "airbnb",
    "status": "published",
    "rating": 4.0,
    "ratingScale": None,
    "publicReview": "Nice stay",
    "reviewCategory": [],
    "submittedAt": "2024-01-15 12:00:00",
    "guestName": "Guest",
    "tags": [],
}


@pytest.fixture
def raw_records():
    """Four reviews across two listings with mixed scales and channels."""
    return [
        {
            "id": 1,
            "listingId": 201,
            "listingName": "Shoreditch Heights A",
            "type": "guest-to-host",
            "channel": "Airbnb",
            "status": "published",
            "rating": 9,
            "ratingScale": None,
            "publicReview": "Spotless flat, fast wifi.",
            "reviewCategory": [
                {"category": "cleanliness", "rating": 9},
                {"category": "communication", "rating": 10},
            ],
            "submittedAt": "2024-03-14 18:21:05",
            "guestName": "Shane",
            "tags": ["wifi", "terrace"],
        },
        {
            "id": 2,
            "listingId": 201,
            "listingName": "Shoreditch Heights A",
            "channel": "booking.com",
            "rating": 4,
            "ratingScale": 5,
            "publicReview": "Good location, noisy at night.",
            "reviewCategory": [{"category": "cleanliness", "rating": 4}],
            "submittedAt": "2024-04-02T09:15:00Z",
            "guestName": "Amira",
            "tags": ["noise"],
            "publishOnFlex": True,
        },
        {
            "id": 3,
            "listingId": 202,
            "listingName": "Camden Lock Suites",
            "type": "host-to-guest",
            "channel": "airbnb",
            "rating": None,
            "publicReview": "Lovely guests.",
            "reviewCategory": [{"category": "cleanliness", "rating": 10}],
            "submittedAt": "2024-02-20 11:00:00",
            "guestName": "Jonas",
        },
        {
            "id": 4,
            "listingId": 202,
            "listingName": "Camden Lock Suites",
            "type": "guest-to-host",
            "channel": "Google",
            "status": "pending",
            "rating": 78,
            "ratingScale": 100,
            "publicReview": "Check-in was slow.",
            "managerResponse": "We added a smart lock.",
            "reviewCategory": [{"category": "check_in", "rating": 6}],
            "submittedAt": "2024-04-18T20:40:12+01:00",
            "guestName": "Lena",
            "tags": ["Noise", "late_check-in"],
        },
    ]


@pytest.fixture
def raw_reviews(raw_records):
    return [RawReview.from_dict(record) for record in raw_records]


@pytest.fixture
def normalizer():
    """Normalizer with an empty approval lookup."""
    return ReviewNormalizer(approval_lookup=lambda review_id: None)


@pytest.fixture
def reviews(normalizer, raw_reviews):
    return normalizer.normalize_all(raw_reviews)


@pytest.fixture
def make_review(normalizer):
    """Build a NormalizedReview from BASE_RECORD plus overrides."""
    def _make(**overrides):
        record = dict(BASE_RECORD)
        record.update(overrides)
        return normalizer.normalize(RawReview.from_dict(record))
    return _make
