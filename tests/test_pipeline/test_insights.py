"""
Unit tests for portfolio insights.
"""

import json

import pytest

from flexreviews.pipeline.insights import (
    build_insights,
    category_breakdown,
    channel_distribution,
    format_issue_label,
    global_trend,
    recurring_issues,
)


def test_global_trend_counts_unrated_as_zero(make_review):
    """Test a month holding 4.5 and an unrated review averages 2.25."""
    rated = make_review(id=1, rating=4.5, submittedAt="2024-05-01")
    unrated = make_review(id=2, rating=None, submittedAt="2024-05-20")

    assert global_trend([rated, unrated]) == [{"period": "2024-05", "average": 2.25}]


def test_global_trend_months_ascending(reviews):
    """Test monthly portfolio averages in ascending order."""
    assert global_trend(reviews) == [
        {"period": "2024-02", "average": 0.0},
        {"period": "2024-03", "average": 4.5},
        {"period": "2024-04", "average": 3.95},
    ]
    assert global_trend([]) == []


def test_category_breakdown_best_first(reviews):
    """Test category means sorted best first."""
    rows = category_breakdown(reviews)

    assert [row["key"] for row in rows] == ["communication", "cleanliness", "check_in"]
    assert rows[1]["average"] == pytest.approx(4.5)
    assert rows[1]["count"] == 3
    assert rows[2]["label"] == "Check In"


def test_channel_distribution(reviews):
    """Test channel counts and raw ratios."""
    rows = channel_distribution(reviews)
    assert rows[0] == {"channel": "airbnb", "count": 2, "ratio": 0.5}
    assert sum(row["count"] for row in rows) == 4
    assert channel_distribution([]) == []


def test_recurring_issues_case_insensitive(reviews):
    """Test "Noise" and "noise" are one issue."""
    issues = recurring_issues(reviews)
    assert issues[0] == {"tag": "noise", "count": 2}
    assert {issue["tag"] for issue in issues} == {"noise", "wifi", "terrace", "late_check-in"}


@pytest.mark.parametrize("value, expected", [
    ("late_check-in", "Late Check In"),
    ("noise", "Noise"),
    ("wifi  down", "Wifi Down"),
])
def test_format_issue_label(value, expected):
    """Test tag keys become readable labels."""
    assert format_issue_label(value) == expected


def test_build_insights_is_json_serializable(reviews):
    """Test the insights bundle serializes to JSON."""
    insights = build_insights(reviews)

    assert set(insights) == {"globalTrend", "categoryBreakdown", "channelDistribution", "recurringIssues"}
    assert insights["recurringIssues"][0]["label"] == "Noise"
    json.dumps(insights)


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
