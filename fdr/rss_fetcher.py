#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rss_fetcher.py - Module for fetching RSS feeds using requests.
"""

import logging
from typing import Optional

import requests
from user_agent import generate_user_agent

from fdr.exceptions import FetchError
from fdr.rss_parser import FetchedFeed, RSSParser

logger = logging.getLogger(__name__)


class RSSFetcher:
    """
    Class for fetching RSS feeds using a requests session.
    Relies on RSSParser for parsing the fetched content.
    """

    def __init__(self, timeout: float = 30, user_agent: Optional[str] = None,
                 parser: Optional[RSSParser] = None):
        """
        Initialize the RSS Fetcher.

        Args:
            timeout (float): Request timeout in seconds.
            user_agent (Optional[str]): User-Agent header; generated when not given.
            parser (Optional[RSSParser]): Parser for fetched content.
        """
        self.timeout = timeout
        self.parser = parser or RSSParser()

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent or generate_user_agent(),
            'Accept': 'application/rss+xml, application/xml, text/xml;q=0.9, */*;q=0.8',
        })

        logger.debug("RSSFetcher initialized with requests session and parser")

    def _fetch_raw_content(self, url: str) -> bytes:
        """
        Fetch raw feed content with a single request.

        Args:
            url (str): URL of the RSS feed

        Returns:
            bytes: Raw feed body

        Raises:
            FetchError: On network errors or non-2xx responses
        """
        logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(url, str(e)) from e

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def fetch_feed(self, url: str, name: str) -> FetchedFeed:
        """
        Fetch and parse one feed.

        Args:
            url (str): Feed URL
            name (str): Subscription name, used when the channel has no title

        Returns:
            FetchedFeed: Parsed document with its source metadata

        Raises:
            FetchError: If fetching or parsing failed
        """
        logger.info(f"Fetching feed '{name}': {url}")
        raw_content = self._fetch_raw_content(url)
        return self.parser.parse_document(raw_content, name, url)

    def close(self) -> None:
        self.session.close()
