"""
Main entry point for the feed digest reader.
Shows unseen items from the feeds listed in an OPML file.
"""
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

import click

from fdr import __version__
from fdr.aggregator import FeedAggregator, SortMode
from fdr.config_manager import ConfigManager
from fdr.exceptions import ConfigError, FdrError, StoreWriteError
from fdr.opml_reader import get_rss_subscriptions, read_opml
from fdr.rss_fetcher import RSSFetcher
from fdr.rss_parser import RSSParser
from fdr.storage_manager import SeenStore
from fdr.utils.logging_utils import setup_logging, verbosity_to_level

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="fdr",
        description="Feed digest reader - show new items from your RSS subscriptions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fdr show-news feeds.opml               # Show items not seen before
  fdr show-news feeds.opml desc          # Newest first
  fdr show-news --all feeds.opml asc     # Everything, oldest first
  fdr show-sources feeds.opml            # List subscribed feeds
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a JSON settings file (optional)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"fdr v{__version__}"
    )

    subparsers = parser.add_subparsers(dest="operation", required=True)

    show_news = subparsers.add_parser("show-news", help="Show unseen feed items")
    show_news.add_argument("opml", help="OPML subscription file")
    show_news.add_argument(
        "-a", "--all",
        action="store_true",
        default=None,
        dest="show_all",
        help="Also show items seen in earlier runs"
    )
    show_news.add_argument(
        "sort",
        nargs="?",
        default=None,
        choices=[mode.value for mode in SortMode],
        help="Output order (default: original)"
    )

    show_sources = subparsers.add_parser("show-sources", help="List RSS subscriptions")
    show_sources.add_argument("opml", help="OPML subscription file")

    return parser


def show_news(config_manager: ConfigManager, opml: str, show_all: bool, sort: SortMode,
              now: datetime) -> List[str]:
    """
    Fetch every RSS subscription and show the unseen items.

    Returns:
        Plain display lines that were shown
    """
    subscriptions = get_rss_subscriptions(read_opml(opml))

    parser = RSSParser()
    fetcher = RSSFetcher(
        timeout=config_manager.get_config_value("networking.timeout_seconds", 30),
        user_agent=config_manager.get_config_value("networking.user_agent"),
        parser=parser,
    )
    store = SeenStore(config_manager.get_config_value("storage.seen_file", "seen.txt"))
    aggregator = FeedAggregator(store, parser=parser, fetcher=fetcher)

    try:
        return aggregator.run(aggregator.collect(subscriptions), now, show_all=show_all, order=sort)
    finally:
        fetcher.close()


def show_sources(opml: str) -> None:
    """Print the title of each RSS subscription."""
    for subscription in get_rss_subscriptions(read_opml(opml)):
        click.echo(subscription.name)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the script.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    now = datetime.now().astimezone()

    try:
        config_manager = ConfigManager(args.config)
    except ConfigError as e:
        setup_logging()
        logger.critical(f"Configuration error: {e}")
        return 1

    log_level = verbosity_to_level(args.verbose, config_manager.get_config_value("logging.level", "WARNING"))
    setup_logging(log_level=log_level, log_dir=config_manager.get_config_value("logging.log_dir"))

    try:
        if args.operation == "show-sources":
            show_sources(args.opml)
            return 0

        show_all = args.show_all if args.show_all is not None else config_manager.get_config_value("display.show_all")
        sort = SortMode(args.sort or config_manager.get_config_value("display.sort"))
        show_news(config_manager, args.opml, show_all, sort, now)
        return 0

    except StoreWriteError as e:
        logger.critical(f"Seen state was not saved, items may be shown again next time: {e}")
        return 1
    except FdrError as e:
        logger.critical(f"{e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.critical(f"An unexpected critical error occurred: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
