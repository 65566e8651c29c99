"""
Feed Digest Reader

Aggregates the RSS feeds listed in an OPML file and shows only the items
that were not shown before.
"""

__version__ = "1.0.0"
__author__ = "fdr contributors"

# Package-level imports for convenience
from .aggregator import FeedAggregator, SortMode
from .config_manager import ConfigManager
from .rss_fetcher import RSSFetcher
from .rss_parser import FeedItem, RSSParser
from .storage_manager import SeenStore

__all__ = [
    'ConfigManager',
    'FeedAggregator',
    'FeedItem',
    'RSSFetcher',
    'RSSParser',
    'SeenStore',
    'SortMode',
]
