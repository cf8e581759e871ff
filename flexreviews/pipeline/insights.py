"""
Portfolio insights.

Cross-listing views for analytics: global monthly trend, category
leaderboard, channel distribution and recurring guest issues (tags).
"""

import logging
import re
from collections import Counter
from typing import Dict, List, Sequence

from flexreviews.models.review import NormalizedReview
from flexreviews.pipeline.aggregation import build_frame
from flexreviews.utils.scales import round_rating

logger = logging.getLogger(__name__)


def global_trend(reviews: Sequence[NormalizedReview]) -> List[Dict]:
    """
    Monthly portfolio average.

    Unlike the listing trend, unrated reviews count as 0 here, so a month
    full of unrated stays reads low rather than missing.
    """
    if not reviews:
        return []

    frame = build_frame(reviews).dropna(subset=["period"])
    frame = frame.assign(rating_or_zero=frame["normalized_rating"].fillna(0.0))

    monthly = frame.groupby("period", sort=True)["rating_or_zero"].agg(["sum", "count"])
    return [
        {
            "period": str(period),
            "average": round_rating(row["sum"] / row["count"]) if row["count"] else None
        }
        for period, row in monthly.iterrows()
    ]


def category_breakdown(reviews: Sequence[NormalizedReview]) -> List[Dict]:
    """Unrounded mean and sample count per category, best first."""
    totals: Dict[str, Dict] = {}
    for review in reviews:
        for category in review.category_ratings:
            if category.normalized_rating is None:
                continue
            record = totals.setdefault(category.key, {"label": category.label, "total": 0.0, "count": 0})
            record["total"] += category.normalized_rating
            record["count"] += 1

    rows = [
        {
            "key": key,
            "label": stats["label"],
            "average": stats["total"] / stats["count"],
            "count": stats["count"]
        }
        for key, stats in totals.items()
    ]
    rows.sort(key=lambda row: row["average"], reverse=True)
    return rows


def channel_distribution(reviews: Sequence[NormalizedReview]) -> List[Dict]:
    """Count and unrounded share per channel, most frequent first."""
    counts = Counter(review.channel.value for review in reviews)
    overall = len(reviews) or 1
    return [
        {"channel": channel, "count": count, "ratio": count / overall}
        for channel, count in counts.most_common()
    ]


def recurring_issues(reviews: Sequence[NormalizedReview]) -> List[Dict]:
    """Tag frequencies (case-insensitive), most frequent first."""
    counts = Counter(tag.lower() for review in reviews for tag in review.tags if tag)
    return [{"tag": tag, "count": count} for tag, count in counts.most_common()]


def format_issue_label(value: str) -> str:
    """late_check-in -> Late Check In"""
    words = [w for w in re.split(r"[_\-\s]+", value) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def build_insights(reviews: Sequence[NormalizedReview]) -> Dict:
    """All portfolio insights in one JSON-serializable dict."""
    insights = {
        "globalTrend": global_trend(reviews),
        "categoryBreakdown": category_breakdown(reviews),
        "channelDistribution": channel_distribution(reviews),
        "recurringIssues": [
            {**issue, "label": format_issue_label(issue["tag"])}
            for issue in recurring_issues(reviews)
        ],
    }
    logger.info(
        f"Built insights: {len(insights['globalTrend'])} months, "
        f"{len(insights['categoryBreakdown'])} categories, "
        f"{len(insights['recurringIssues'])} recurring issues"
    )
    return insights
