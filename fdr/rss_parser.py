"""
RSS Parser module for processing RSS feeds.
Turns feed entries into canonical FeedItem records.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Tuple

import feedparser

from fdr.exceptions import FetchError, ValidationError
from fdr.utils.helpers import collapse_whitespace, parse_publish_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedItem:
    """A normalized feed entry."""

    identifier: str
    title: str
    link: str
    published_at: datetime
    source_name: str
    source_url: str


@dataclass(frozen=True)
class FetchedFeed:
    """A parsed feed document together with the name and URL of its source."""

    document: Any
    source_name: str
    source_url: str


class RSSParser:
    """
    Parses RSS feeds and normalizes their entries.
    """

    def __init__(self):
        """Initialize the RSS parser."""
        logger.debug("RSSParser initialized")

    def parse_document(self, content, source_name: str, source_url: str) -> FetchedFeed:
        """
        Parse raw feed content.

        The channel's own title and link are preferred as source metadata;
        the subscription name and URL are used when the channel omits them.

        Args:
            content: Raw RSS XML (str or bytes)
            source_name: Subscription name
            source_url: Subscription URL

        Returns:
            FetchedFeed wrapping the feedparser document

        Raises:
            FetchError: If the document is malformed and yielded no entries
        """
        feed = feedparser.parse(content)

        if feed.get('bozo') and not feed.get('entries'):
            raise FetchError(source_url, f"malformed feed: {feed.get('bozo_exception')}")

        channel = feed.get('feed', {})
        name = (channel.get('title') or '').strip() or source_name
        link = (channel.get('link') or '').strip() or source_url

        logger.info(f"Parsed feed '{name}' with {len(feed.get('entries', []))} entries")
        return FetchedFeed(document=feed, source_name=name, source_url=link)

    def normalize(self, entry: Mapping[str, Any], source_name: str, source_url: str) -> FeedItem:
        """
        Build a FeedItem from a raw feed entry.

        Args:
            entry: Feed entry from feedparser
            source_name: Name of the containing feed
            source_url: URL of the containing feed

        Returns:
            FeedItem

        Raises:
            ValidationError: If title, link or publish date is missing or invalid
        """
        title = (entry.get('title') or '').strip()
        if not title:
            raise ValidationError("missing title")

        # feedparser copies a permalink <guid> into link when <link> is absent
        link = '' if entry.get('guidislink') else (entry.get('link') or '').strip()
        if not link:
            raise ValidationError("missing link")

        raw_date = entry.get('published') or entry.get('updated')
        if not raw_date:
            raise ValidationError("missing publish date")

        published_at = parse_publish_date(raw_date)
        if published_at is None:
            raise ValidationError("invalid publish date")

        return FeedItem(
            identifier=self.make_identifier(entry.get('id'), title, link),
            title=title,
            link=link,
            published_at=published_at,
            source_name=source_name,
            source_url=source_url,
        )

    @staticmethod
    def make_identifier(guid, title: str, link: str) -> str:
        """
        Return the entry's GUID, or a pseudo GUID built from title and link.

        The pseudo GUID changes whenever the title or link is edited upstream.
        Runs of whitespace, including line breaks, collapse to a single space
        so the identifier always fits on one line of the seen-state file.
        """
        guid = collapse_whitespace(str(guid)) if guid else ''
        if guid:
            return guid
        return f"{collapse_whitespace(title)}-{collapse_whitespace(link)}"

    def read_feed_items(self, feed, source_name: str, source_url: str) -> Tuple[List[FeedItem], List[str]]:
        """
        Normalize every entry of a feed in a single pass.

        Invalid entries are reported and dropped; they never abort the batch.

        Args:
            feed: feedparser document (or anything exposing ``entries``)
            source_name: Name of the feed
            source_url: URL of the feed

        Returns:
            Tuple of (valid items, failure reasons)
        """
        items: List[FeedItem] = []
        failures: List[str] = []

        entries = feed.get('entries', []) if isinstance(feed, Mapping) else getattr(feed, 'entries', [])
        for entry in entries:
            try:
                items.append(self.normalize(entry, source_name, source_url))
            except ValidationError as e:
                failures.append(e.reason)
                logger.warning(f"Invalid feed item in feed: {e.reason}")

        logger.debug(f"Extracted {len(items)} valid items from '{source_name}' ({len(failures)} dropped)")
        return items, failures
