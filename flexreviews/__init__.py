"""Flex Reviews - normalization and aggregation of Hostaway guest reviews."""

__version__ = "1.0.0"
