"""
Utility helper functions.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional
from urllib.parse import urljoin, urlparse

logger = logging.getLogger(__name__)


def parse_timestamp(timestamp: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Malformed or empty values yield ``None``; callers treat that the same
    as a missing timestamp.

    Args:
        timestamp: Timestamp string, e.g. ``2024-01-15T09:30:00.000Z``

    Returns:
        Aware datetime in UTC, or None
    """
    if not timestamp:
        return None
    try:
        dt = datetime.fromisoformat(timestamp.strip().replace('Z', '+00:00'))
    except (ValueError, TypeError):
        logger.debug(f"Unparseable timestamp: {timestamp!r}")
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def timestamp_date(timestamp: Optional[str]) -> Optional[date]:
    """Return the UTC calendar date of a timestamp string, or None."""
    dt = parse_timestamp(timestamp)
    return dt.date() if dt else None


def format_timestamp(timestamp: str) -> str:
    """
    Format timestamp to readable format.

    Args:
        timestamp: Timestamp string

    Returns:
        Formatted timestamp
    """
    dt = parse_timestamp(timestamp)
    if dt is None:
        return timestamp
    return dt.strftime('%Y-%m-%d %H:%M:%S')


def to_absolute_url(href: str, base_url: str) -> str:
    """
    Convert a possibly relative link into an absolute URL.

    Args:
        href: Link as found in the markup
        base_url: URL of the page the link was found on

    Returns:
        Absolute URL
    """
    href = href.strip()
    if href.startswith(('http://', 'https://')):
        return href
    return urljoin(base_url, href)


def validate_url(url: str) -> bool:
    """
    Validate URL format.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except ValueError:
        return False
