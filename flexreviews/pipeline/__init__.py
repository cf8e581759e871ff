"""
Pipeline stages for Flex Reviews.

Each stage processes reviews on the way to a ReviewsResponse:
- Ingestion (corpus loader)
- Normalization
- Filtering and Sorting
- Aggregation (listing summaries, collection metrics)
- Insights (portfolio analytics)
"""
