"""
Utility modules for Flex Reviews.

Cross-cutting concerns:
- Sanitize: Free-text cleanup, slugs and labels
- Scales: Rating scale detection and normalization
- Dates: Timestamp parsing and canonical ISO formatting
- Storage: JSON/CSV exports of pipeline output
"""
