"""RSS Feed Processing module for RSS IRC Bot."""

from pathlib import Path

import feedparser
import requests
from bs4 import BeautifulSoup

from .logging_config import create_execution_logger
from .models import Feed, FeedItem

FILE_SCHEME = "file://"


class FeedError(Exception):
    """Base class for feed retrieval and decoding failures."""


class FetchError(FeedError):
    """Raised when feed content cannot be retrieved."""


class FeedDecodeError(FeedError):
    """Raised when feed content is not a usable RSS/Atom document."""


class FeedProcessor:
    """Handles RSS/Atom feed retrieval, decoding and normalization."""

    def __init__(self, timeout: int = 30, execution_id: str | None = None):
        """Initialize FeedProcessor with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_processor", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "RSS-IRC-Bot/1.0 (Generic RSS to IRC Bot)"}
        )

    def parse_feed(self, feed_url: str) -> Feed:
        """Fetch and decode a single RSS/Atom feed.

        Args:
            feed_url: URL of the feed, or a file:// reference

        Returns:
            Decoded Feed

        Raises:
            FetchError: If the content cannot be retrieved
            FeedDecodeError: If the content is not an RSS/Atom document
        """
        content = self.fetch_content(feed_url)
        return self.decode_feed(content, feed_url)

    def fetch_content(self, feed_url: str) -> bytes:
        """Retrieve raw feed content from the filesystem or over HTTP.

        Args:
            feed_url: URL of the feed; a file:// prefix reads a local path

        Returns:
            Raw document bytes

        Raises:
            FetchError: On any filesystem, network or HTTP status failure
        """
        self.logger.info(f"Fetching URL: {feed_url}", feed_url=feed_url)

        if feed_url.startswith(FILE_SCHEME):
            path = Path(feed_url[len(FILE_SCHEME) :])
            try:
                return path.read_bytes()
            except OSError as e:
                raise FetchError(f"Error reading file for '{feed_url}': {e}") from e

        try:
            response = self.session.get(feed_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Error getting url '{feed_url}': {e}") from e

        self.logger.debug(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.content

    def decode_feed(self, content: bytes, feed_url: str = "") -> Feed:
        """Decode raw content into a Feed.

        feedparser reads the XML declaration itself, including its declared
        encoding, so a leading declaration line is tolerated.

        Args:
            content: Raw document bytes
            feed_url: Source URL, used for logging only

        Returns:
            Decoded Feed with items in document order

        Raises:
            FeedDecodeError: If the document is not recognized as RSS or Atom
        """
        parsed = feedparser.parse(content)

        if not parsed.get("version"):
            reason = parsed.get("bozo_exception") or "not an RSS or Atom document"
            raise FeedDecodeError(f"Error parsing XML for '{feed_url}': {reason}")

        if parsed.bozo:
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: {parsed.bozo_exception}",
                feed_url=feed_url,
            )

        channel = parsed.feed
        return Feed(
            channel_title=channel.get("title", ""),
            channel_link=channel.get("link", ""),
            channel_description=channel.get("description")
            or channel.get("subtitle", ""),
            channel_language=channel.get("language", ""),
            items=[self.normalize_item(entry) for entry in parsed.entries],
        )

    def normalize_item(self, entry) -> FeedItem:
        """Normalize a feedparser entry into a FeedItem.

        Args:
            entry: Raw feed entry from feedparser

        Returns:
            FeedItem with plain-text description
        """
        description = entry.get("summary") or entry.get("description") or ""
        return FeedItem(
            title=entry.get("title", ""),
            description=self.clean_html_content(description),
            link="".join(entry.get("link", "").split()),
            guid=entry.get("id") or None,
        )

    def clean_html_content(self, content: str | None) -> str:
        """Remove HTML tags from content and collapse whitespace to one line.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Single-line text without HTML tags
        """
        if not content:
            return ""

        if "<" in content or ">" in content:
            soup = BeautifulSoup(content, "html.parser")
            for script in soup(["script", "style"]):
                script.decompose()
            content = soup.get_text(separator=" ")
            # Stray brackets left over from malformed markup
            content = content.replace("<", "").replace(">", "")

        return " ".join(content.split())
