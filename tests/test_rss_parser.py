"""
Unit tests for RSS parser module.
"""

import unittest
from datetime import datetime, timezone

from fdr.exceptions import FetchError, ValidationError
from fdr.rss_parser import FeedItem, RSSParser

SAMPLE_RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
    <channel>
        <title>Example Blog</title>
        <link>https://example.com/</link>
        <item>
            <title>First Post</title>
            <link>https://example.com/first</link>
            <guid isPermaLink="false">post-1</guid>
            <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
        </item>
        <item>
            <link>https://example.com/untitled</link>
            <pubDate>Mon, 01 Jan 2024 13:00:00 GMT</pubDate>
        </item>
        <item>
            <title>Second Post</title>
            <link>https://example.com/second</link>
            <guid isPermaLink="false">post-2</guid>
            <pubDate>Tue, 02 Jan 2024 12:00:00 GMT</pubDate>
        </item>
    </channel>
</rss>"""


class TestRSSParser(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures."""
        self.parser = RSSParser()

        self.sample_entry = {
            'id': 'urn:example:1',
            'title': 'Sample News Title',
            'link': 'https://example.com/news/1',
            'published': 'Mon, 01 Jan 2024 12:00:00 GMT',
        }

    def test_normalize_complete(self):
        """Test normalizing an entry with all fields present."""
        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        expected = FeedItem(
            identifier='urn:example:1',
            title='Sample News Title',
            link='https://example.com/news/1',
            published_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            source_name='Example',
            source_url='https://example.com',
        )
        self.assertEqual(item, expected)

    def test_normalize_without_guid_uses_title_and_link(self):
        """Test the pseudo GUID built from title and link."""
        del self.sample_entry['id']

        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(item.identifier, 'Sample News Title-https://example.com/news/1')

    def test_normalize_blank_guid_uses_title_and_link(self):
        self.sample_entry['id'] = '   '

        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(item.identifier, 'Sample News Title-https://example.com/news/1')

    def test_normalize_missing_title(self):
        del self.sample_entry['title']

        with self.assertRaises(ValidationError) as cm:
            self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(cm.exception.reason, 'missing title')

    def test_normalize_missing_link(self):
        self.sample_entry['link'] = ''

        with self.assertRaises(ValidationError) as cm:
            self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(cm.exception.reason, 'missing link')

    def test_normalize_missing_date(self):
        del self.sample_entry['published']

        with self.assertRaises(ValidationError) as cm:
            self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(cm.exception.reason, 'missing publish date')

    def test_normalize_invalid_date(self):
        self.sample_entry['published'] = 'sometime last week'

        with self.assertRaises(ValidationError) as cm:
            self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(cm.exception.reason, 'invalid publish date')

    def test_normalize_iso_date_fallback(self):
        self.sample_entry['published'] = '2024-01-01T12:00:00Z'

        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(item.published_at, datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))

    def test_normalize_uses_updated_for_atom_entries(self):
        del self.sample_entry['published']
        self.sample_entry['updated'] = '2024-03-01T08:30:00+00:00'

        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        self.assertEqual(item.published_at, datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc))

    def test_feed_item_is_immutable(self):
        item = self.parser.normalize(self.sample_entry, 'Example', 'https://example.com')

        with self.assertRaises(AttributeError):
            item.title = 'Changed'

    def test_read_feed_items_drops_invalid_entries(self):
        """Test that one bad entry yields one warning and leaves the rest intact."""
        feed = {'entries': [
            self.sample_entry,
            {'title': 'No link', 'published': 'Mon, 01 Jan 2024 12:00:00 GMT'},
            dict(self.sample_entry, id='urn:example:2'),
        ]}

        with self.assertLogs('fdr.rss_parser', level='WARNING') as logs:
            items, failures = self.parser.read_feed_items(feed, 'Example', 'https://example.com')

        self.assertEqual([item.identifier for item in items], ['urn:example:1', 'urn:example:2'])
        self.assertEqual(failures, ['missing link'])
        self.assertEqual(logs.output, ['WARNING:fdr.rss_parser:Invalid feed item in feed: missing link'])

    def test_read_feed_items_empty_feed(self):
        items, failures = self.parser.read_feed_items({'entries': []}, 'Example', 'https://example.com')

        self.assertEqual(items, [])
        self.assertEqual(failures, [])

    def test_parse_document(self):
        """Test parsing a real RSS document."""
        fetched = self.parser.parse_document(SAMPLE_RSS, 'Subscription name', 'https://example.com/rss')

        self.assertEqual(fetched.source_name, 'Example Blog')
        self.assertEqual(fetched.source_url, 'https://example.com/')

        with self.assertLogs('fdr.rss_parser', level='WARNING'):
            items, failures = self.parser.read_feed_items(fetched.document, fetched.source_name,
                                                          fetched.source_url)

        self.assertEqual([item.title for item in items], ['First Post', 'Second Post'])
        self.assertEqual([item.identifier for item in items], ['post-1', 'post-2'])
        self.assertEqual(failures, ['missing title'])
        self.assertEqual(items[1].published_at, datetime(2024, 1, 2, 12, 0, tzinfo=timezone.utc))

    def test_parse_document_falls_back_to_subscription_metadata(self):
        content = """<?xml version="1.0"?>
        <rss version="2.0"><channel>
            <item><title>Only item</title><link>https://example.com/a</link></item>
        </channel></rss>"""

        fetched = self.parser.parse_document(content, 'My Feed', 'https://example.com/rss')

        self.assertEqual(fetched.source_name, 'My Feed')
        self.assertEqual(fetched.source_url, 'https://example.com/rss')

    def test_permalink_guid_is_not_a_link(self):
        """Test that an item without <link> is dropped even when its guid is a URL."""
        content = """<?xml version="1.0"?>
        <rss version="2.0"><channel><title>C</title><link>https://c.example/</link>
            <item>
                <title>No link here</title>
                <guid>https://c.example/guid-1</guid>
                <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
            </item>
            <item>
                <title>Linked</title>
                <link>https://c.example/linked</link>
                <guid>https://c.example/guid-2</guid>
                <pubDate>Mon, 01 Jan 2024 12:00:00 GMT</pubDate>
            </item>
        </channel></rss>"""
        fetched = self.parser.parse_document(content, 'C', 'https://c.example/rss')

        with self.assertLogs('fdr.rss_parser', level='WARNING') as logs:
            items, failures = self.parser.read_feed_items(fetched.document, fetched.source_name,
                                                          fetched.source_url)

        self.assertEqual(failures, ['missing link'])
        self.assertEqual(len(logs.records), 1)
        self.assertEqual([(item.title, item.link) for item in items], [('Linked', 'https://c.example/linked')])
        self.assertEqual(items[0].identifier, 'https://c.example/guid-2')

    def test_identifier_is_single_line(self):
        """Test that line breaks in title, link or guid never reach the identifier."""
        self.assertEqual(RSSParser.make_identifier(None, 'Line one\nline two', 'https://c.example/a'),
                         'Line one line two-https://c.example/a')
        self.assertEqual(RSSParser.make_identifier(' urn:x:\r\n1 ', 'T', 'L'), 'urn:x: 1')
        self.assertEqual(RSSParser.make_identifier(' \n ', 'T', 'L'), 'T-L')

    def test_parse_document_malformed(self):
        """Test that an unparseable document is a fetch failure."""
        with self.assertRaises(FetchError):
            self.parser.parse_document("this is not xml at all <<<", 'Broken', 'https://broken.example')


if __name__ == '__main__':
    unittest.main()
