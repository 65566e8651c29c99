"""
OPML subscription list reader.
"""
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, List

from fdr.exceptions import SubscriptionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Subscription:
    """One feed listed in the subscription file."""

    name: str
    url: str
    feed_type: str


def read_opml(file_path: str) -> List[Subscription]:
    """
    Read every feed outline from an OPML file.

    Folder outlines (no ``xmlUrl``) are descended into but not returned.

    Args:
        file_path: Path to the OPML file

    Returns:
        Subscriptions in document order

    Raises:
        SubscriptionError: If the file is missing or is not valid OPML
    """
    try:
        tree = ET.parse(file_path)
    except FileNotFoundError as e:
        raise SubscriptionError(f"Subscription file not found: {file_path}") from e
    except (ET.ParseError, OSError) as e:
        raise SubscriptionError(f"Cannot parse subscription file {file_path}: {e}") from e

    body = tree.getroot().find('body')
    if body is None:
        raise SubscriptionError(f"Subscription file {file_path} has no <body> element")

    subscriptions = []
    for outline in body.iter('outline'):
        url = (outline.get('xmlUrl') or '').strip()
        if not url:
            continue

        name = outline.get('title') or outline.get('text') or url
        subscriptions.append(Subscription(
            name=name.strip(),
            url=url,
            feed_type=(outline.get('type') or '').strip(),
        ))

    logger.info(f"Loaded {len(subscriptions)} subscriptions from {file_path}")
    return subscriptions


def get_rss_subscriptions(subscriptions: Iterable[Subscription]) -> List[Subscription]:
    """Keep only subscriptions of type ``rss``."""
    return [s for s in subscriptions if s.feed_type == 'rss']
