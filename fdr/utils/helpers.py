"""
Helper functions for the feed digest reader.
Contains utility functions for date parsing and relative time display.
"""
import logging
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, List, Optional

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR


def collapse_whitespace(text: str) -> str:
    """
    Replace every run of whitespace (spaces, tabs, line breaks) with a single
    space and strip the ends.

    Args:
        text: Raw text

    Returns:
        Single-line text
    """
    if not text:
        return ""
    return " ".join(text.split())


def _parse_rfc2822(date_string: str) -> datetime:
    """Parse the standard RSS ``pubDate`` format (RFC 2822)."""
    parsed = parsedate_to_datetime(date_string)
    if parsed is None:
        raise ValueError(f"not an RFC 2822 date: {date_string!r}")
    return parsed


def _parse_generic(date_string: str) -> datetime:
    """Parse any timestamp dateutil understands (ISO 8601, RFC 3339, ...)."""
    return date_parser.parse(date_string)


# Tried in order; the first strategy that returns a datetime wins.
DATE_PARSE_STRATEGIES: List[Callable[[str], datetime]] = [
    _parse_rfc2822,
    _parse_generic,
]


def parse_publish_date(date_string: str,
                       strategies: Optional[List[Callable[[str], datetime]]] = None) -> Optional[datetime]:
    """
    Parse a feed publication date into a timezone-aware datetime.

    Args:
        date_string: Raw date string from the feed entry
        strategies: Parse functions to try in order (default: DATE_PARSE_STRATEGIES)

    Returns:
        Aware datetime, or None if no strategy could parse the string.
        Naive results are interpreted as UTC.
    """
    if not date_string or not date_string.strip():
        return None

    for strategy in strategies or DATE_PARSE_STRATEGIES:
        try:
            parsed = strategy(date_string.strip())
        except (ValueError, TypeError, OverflowError) as e:
            logger.debug(f"{strategy.__name__} could not parse '{date_string}': {e}")
            continue

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return None


def format_time_ago(delta: timedelta) -> str:
    """
    Convert an elapsed time into a human friendly string,
    e.g. "just now", "day ago", "3 weeks ago".

    Years and months are reported as ``days % 365`` and ``days % 30``.
    Negative deltas read "just now".

    Args:
        delta: Time elapsed since publication

    Returns:
        Relative time phrase
    """
    seconds = max(int(delta.total_seconds()), 0)
    days = seconds // SECONDS_PER_DAY
    weeks = days // 7
    hours = seconds // SECONDS_PER_HOUR
    minutes = seconds // SECONDS_PER_MINUTE

    if days == 365:
        return "year ago"
    if days > 365:
        return f"{days % 365} years ago"
    if weeks == 4:
        return "month ago"
    if weeks > 4:
        return f"{days % 30} months ago"
    if weeks == 1:
        return "week ago"
    if weeks > 1:
        return f"{weeks} weeks ago"
    if days == 1:
        return "day ago"
    if days > 1:
        return f"{days} days ago"
    if hours == 1:
        return "hour ago"
    if hours > 1:
        return f"{hours} hours ago"
    if minutes == 1:
        return "minute ago"
    if minutes > 1:
        return f"{minutes} minutes ago"
    return "just now"
