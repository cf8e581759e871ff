"""
Data models for Flex Reviews.

- review: RawReview input records, NormalizedReview and the closed enumerations
- summary: Listing summaries, collection metrics, response envelope
- query: FilterSpec and SortSpec
"""
