"""Utility functions for FeedHarvest."""

from .helpers import (
    format_timestamp,
    parse_timestamp,
    timestamp_date,
    to_absolute_url,
    validate_url,
)

__all__ = [
    "format_timestamp",
    "parse_timestamp",
    "timestamp_date",
    "to_absolute_url",
    "validate_url",
]
