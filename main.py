"""
Flex Reviews - Hostaway review normalization and aggregation

CLI entry point for running the reviews pipeline.
"""

import argparse
import json
import logging
import sys

from flexreviews.models.query import FilterSpec, SortSpec
from flexreviews.orchestrator import ReviewPipelineOrchestrator
from flexreviews.pipeline.ingestion import ReviewLoader
from flexreviews.pipeline.insights import build_insights
from flexreviews.registry.approval_store import ApprovalRequestError
from flexreviews.utils.storage import ExportManager
import config.settings as settings

# CLI flag -> query-string parameter understood by FilterSpec.from_query_params
QUERY_FLAGS = {
    "listing_slug": "listingSlug",
    "listing_id": "listingId",
    "channel": "channel",
    "type": "type",
    "status": "status",
    "approved": "approved",
    "min_rating": "minRating",
    "max_rating": "maxRating",
    "category": "category",
    "min_category_rating": "minCategoryRating",
    "start_date": "startDate",
    "end_date": "endDate",
    "search": "search",
}


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flex Reviews - normalize and aggregate Hostaway guest reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Approved reviews for one property, newest first
  python main.py --listing-slug shoreditch-heights-a --approved true

  # Airbnb and Booking.com reviews rated 4+ mentioning "wifi"
  python main.py --channel airbnb,booking --min-rating 4 --search wifi

  # Override approvals, then export JSON and the trend CSV
  python main.py --approve hostaway-7453 --reject hostaway-7454 --trend-csv
        """
    )

    parser.add_argument(
        "--corpus",
        default=str(settings.CORPUS_PATH),
        help=f"Hostaway reviews JSON export (default: {settings.CORPUS_PATH})"
    )
    parser.add_argument(
        "--output-root",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    # Query
    parser.add_argument("--listing-slug", help="Only this listing slug")
    parser.add_argument("--listing-id", help="Only this listing id")
    parser.add_argument("--channel", help="Comma-separated channels (e.g. airbnb,booking)")
    parser.add_argument("--type", help="Comma-separated review types")
    parser.add_argument("--status", help="Comma-separated statuses")
    parser.add_argument("--approved", choices=["true", "false"], help="Approval state")
    parser.add_argument("--min-rating", help="Minimum normalized rating (0-5)")
    parser.add_argument("--max-rating", help="Maximum normalized rating (0-5)")
    parser.add_argument("--category", help="Category key that must be present")
    parser.add_argument("--min-category-rating", help="Minimum normalized rating for --category")
    parser.add_argument("--start-date", help="Earliest submission (ISO date/time)")
    parser.add_argument("--end-date", help="Latest submission (ISO date/time)")
    parser.add_argument("--search", help="Whitespace-separated terms, all must match")
    parser.add_argument(
        "--sort",
        default=None,
        help="field:direction with field in date|rating|listing|channel (default: date:desc)"
    )

    # Approvals
    parser.add_argument("--approve", action="append", default=[], metavar="REVIEW_ID",
                        help="Mark a review approved before querying (repeatable)")
    parser.add_argument("--reject", action="append", default=[], metavar="REVIEW_ID",
                        help="Mark a review not approved before querying (repeatable)")

    # Output
    parser.add_argument("--output", default="reviews.json", help="Response JSON filename")
    parser.add_argument("--trend-csv", action="store_true", help="Also write the listing trend table")
    parser.add_argument("--insights", action="store_true", help="Also write portfolio insights")
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )
    return parser


def query_params_from_args(args: argparse.Namespace) -> dict:
    """Collect query flags into the query-string shape."""
    params = {}
    for attr, param in QUERY_FLAGS.items():
        value = getattr(args, attr)
        if value is not None:
            params[param] = value
    return params


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        raws = ReviewLoader(args.corpus).load()

        orchestrator = ReviewPipelineOrchestrator()
        orchestrator.seed_approvals(raws)

        for review_id in args.approve:
            orchestrator.update_approval({"reviewId": review_id, "approved": True})
        for review_id in args.reject:
            orchestrator.update_approval({"reviewId": review_id, "approved": False})

        filter_spec = FilterSpec.from_query_params(query_params_from_args(args))
        sort_spec = SortSpec.parse(args.sort)

        response = orchestrator.build_response(raws, filter_spec, sort_spec)

        exporter = ExportManager(args.output_root)
        response_path = exporter.save_response(response, args.output)
        trend_path = exporter.save_trend_table(response) if args.trend_csv else None
        insights_path = (
            exporter.save_json(build_insights(response.reviews), "insights.json")
            if args.insights else None
        )

        print("=" * 60)
        print("Flex Reviews")
        print("=" * 60)
        print(f"Reviews: {response.filtered.total_reviews} of {response.overall.total_reviews}")
        print(f"Approved: {response.filtered.approved_reviews}")
        print(f"Average (0-5): {response.filtered.normalized_average_rating}")
        print(f"Listings: {len(response.listings)}")
        for listing in response.listings:
            print(f"  {listing.listing_name}: {listing.normalized_average_rating} "
                  f"({listing.total_reviews} reviews)")
        print(f"Response: {response_path}")
        if trend_path:
            print(f"Trend table: {trend_path}")
        if insights_path:
            print(f"Insights: {insights_path}")
        print("=" * 60)

        logger.info("Flex Reviews completed successfully")
        sys.exit(0)

    except ApprovalRequestError as e:
        logger.error(f"Invalid approval override: {e}")
        print(json.dumps({"error": str(e)}))
        sys.exit(2)

    except KeyboardInterrupt:
        logger.warning("Pipeline interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Pipeline failed: {e}", exc_info=True)
        print(f"\nPipeline failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
