"""
Feed aggregation: merges items from every source, filters out the ones
already shown and records the new ones as seen.
"""
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

import click

from fdr.exceptions import FetchError
from fdr.opml_reader import Subscription
from fdr.rss_fetcher import RSSFetcher
from fdr.rss_parser import FeedItem, RSSParser
from fdr.storage_manager import SeenStore
from fdr.utils.helpers import format_time_ago
from fdr.utils.logging_utils import log_run_summary

logger = logging.getLogger(__name__)

Source = Tuple[object, str, str]


class SortMode(Enum):
    ORIGINAL = 'original'
    DESCENDING = 'desc'
    ASCENDING = 'asc'


def sort_items(items: List[FeedItem], order: SortMode) -> List[FeedItem]:
    """
    Order items by publication time.

    ``sorted`` is stable, also with ``reverse=True``, so items with equal
    timestamps keep their arrival order.
    """
    if order is SortMode.ASCENDING:
        return sorted(items, key=lambda item: item.published_at)
    if order is SortMode.DESCENDING:
        return sorted(items, key=lambda item: item.published_at, reverse=True)
    return list(items)


def format_item(item: FeedItem, now: datetime, already_seen: bool, styled: bool = True) -> str:
    """
    Render one display line.

    Args:
        item: Item to show
        now: Reference time for the relative date
        already_seen: Whether the item was shown in an earlier run
        styled: Add terminal styling (dimmed when seen, bold when new)

    Returns:
        "{source}{marker}: {title} ({time ago}) {link}"
    """
    plain, fancy = render_item(item, now, already_seen)
    return fancy if styled else plain


def render_item(item: FeedItem, now: datetime, already_seen: bool) -> Tuple[str, str]:
    """Return the (plain, styled) display lines for an item."""
    ago = format_time_ago(now - item.published_at)
    marker = '' if already_seen else ' (*new*)'
    title = click.style(item.title, dim=True) if already_seen else click.style(item.title, bold=True)

    plain = f"{item.source_name}{marker}: {item.title} ({ago}) {item.link}"
    fancy = f"{item.source_name}{marker}: {title} ({click.style(ago, dim=True)}) {item.link}"
    return plain, fancy


class FeedAggregator:
    """
    Orchestrates normalization, novelty filtering, ordering and seen-state
    updates for one run.
    """

    def __init__(self, store: SeenStore, parser: Optional[RSSParser] = None,
                 fetcher: Optional[RSSFetcher] = None,
                 writer: Optional[Callable[[str], None]] = None,
                 styled: Optional[bool] = None):
        """
        Args:
            store: Seen-state store
            parser: Entry normalizer
            fetcher: Feed fetcher, only needed by ``collect``
            writer: Receives each display line (default: print to stdout)
            styled: Force styling on or off (default: only when stdout is a tty)
        """
        self.store = store
        self.parser = parser or RSSParser()
        self.fetcher = fetcher
        self.writer = writer or click.echo
        self.styled = sys.stdout.isatty() if styled is None else styled

    def collect(self, subscriptions: Iterable[Subscription]) -> Iterator[Source]:
        """
        Fetch every subscription in turn.

        Feeds that fail to fetch or parse are logged and skipped.

        Yields:
            (feed document, source name, source url)
        """
        if self.fetcher is None:
            self.fetcher = RSSFetcher(parser=self.parser)

        for subscription in subscriptions:
            try:
                fetched = self.fetcher.fetch_feed(subscription.url, subscription.name)
            except FetchError as e:
                logger.error(f"Skipping feed '{subscription.name}': {e}")
                continue
            yield fetched.document, fetched.source_name, fetched.source_url

    def gather_items(self, sources: Iterable[Source]) -> List[FeedItem]:
        """Normalize the entries of every source, in arrival order."""
        items: List[FeedItem] = []
        dropped = 0

        for document, source_name, source_url in sources:
            valid, failures = self.parser.read_feed_items(document, source_name, source_url)
            items.extend(valid)
            dropped += len(failures)

        if dropped:
            logger.info(f"Dropped {dropped} invalid feed items")
        return items

    def run(self, sources: Iterable[Source], now: datetime,
            show_all: bool = False, order: SortMode = SortMode.ORIGINAL) -> List[str]:
        """
        Show unseen items and remember them.

        Args:
            sources: (feed document, source name, source url) per feed
            now: Current time, timezone-aware
            show_all: Also show items seen in earlier runs
            order: Output ordering

        Returns:
            Plain display lines in the order they were shown

        Raises:
            StoreWriteError: If the seen state could not be saved
        """
        items = sort_items(self.gather_items(sources), order)
        record = self.store.load()

        shown: List[str] = []
        new_count = 0

        for item in items:
            already_seen = self.store.contains(record, item.identifier)
            if already_seen and not show_all:
                continue

            plain, fancy = render_item(item, now, already_seen)
            self.writer(fancy if self.styled else plain)
            shown.append(plain)

            if not already_seen:
                record = self.store.append(record, item.identifier)
                new_count += 1

        self.store.save(record)
        log_run_summary(logger, len(items), len(shown), new_count)
        return shown
