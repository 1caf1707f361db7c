"""Shared test fixtures for RSS IRC Bot tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

SAMPLE_RSS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test Feed</title>
    <link>https://example.com</link>
    <description>A test RSS feed</description>
    <language>en-us</language>
    <item>
      <title>First Article</title>
      <link>https://example.com/article-1</link>
      <guid>article-1</guid>
      <description>&lt;p&gt;Description of the &lt;b&gt;first&lt;/b&gt; article&lt;/p&gt;</description>
    </item>
    <item>
      <title>Second Article</title>
      <link>https://example.com/article-2</link>
      <guid>article-2</guid>
      <description>Description of the second article</description>
    </item>
    <item>
      <title>Third Article</title>
      <link>https://example.com/article-3</link>
      <description>No guid on this one</description>
    </item>
  </channel>
</rss>"""

SAMPLE_LATIN1_RSS_XML = """<?xml version="1.0" encoding="ISO-8859-1"?>
<rss version="2.0">
  <channel>
    <title>Café Feed</title>
    <link>https://example.fr</link>
    <description>Nouvelles</description>
    <item>
      <title>Crème brûlée</title>
      <link>https://example.fr/creme</link>
      <guid>creme</guid>
    </item>
  </channel>
</rss>""".encode("iso-8859-1")

SAMPLE_ATOM_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Test Atom Feed</title>
  <link href="https://example.com"/>
  <subtitle>A test Atom feed</subtitle>
  <entry>
    <title>Atom Entry 1</title>
    <link href="https://example.com/entry-1"/>
    <id>urn:uuid:entry-1</id>
    <summary>Summary of entry 1</summary>
    <updated>2026-02-13T10:00:00Z</updated>
  </entry>
</feed>"""

SAMPLE_NOT_A_FEED = b"this is plain text, not a syndication document"


@pytest.fixture
def sample_rss_xml():
    """Sample valid RSS 2.0 XML."""
    return SAMPLE_RSS_XML


@pytest.fixture
def sample_latin1_rss_xml():
    """Sample RSS declared and encoded as ISO-8859-1."""
    return SAMPLE_LATIN1_RSS_XML


@pytest.fixture
def sample_atom_xml():
    """Sample valid Atom XML."""
    return SAMPLE_ATOM_XML


@pytest.fixture
def sample_not_a_feed():
    """Content that is not a feed."""
    return SAMPLE_NOT_A_FEED


@pytest.fixture
def mock_stream_writer():
    """A StreamWriter stand-in that records written bytes."""
    writer = MagicMock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()
    return writer
