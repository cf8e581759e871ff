"""Configuration package for Flex Reviews."""
