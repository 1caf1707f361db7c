"""Feed-to-channel routing for RSS IRC Bot."""

import asyncio
from urllib.parse import urlparse

from .codec import Line
from .config import IRCConfig, PollerConfig
from .connection import ConnectionManager
from .logging_config import create_execution_logger
from .models import Connect, Disconnect, Event, FeedItem
from .poller import FeedPoller
from .responder import PingResponder

RPL_WELCOME = "001"
ERR_NICKNAMEINUSE = "433"


def extract_source_name(feed_url: str) -> str:
    """Extract a short source name from a feed URL.

    Args:
        feed_url: The feed URL

    Returns:
        Source name for display, empty for URLs without a host
    """
    domain = urlparse(feed_url).netloc.lower().split(":")[0]
    for prefix in ("www.", "feeds."):
        if domain.startswith(prefix):
            domain = domain[len(prefix) :]

    domain_parts = domain.split(".")
    if len(domain_parts) >= 2:
        return domain_parts[-2].capitalize()
    return domain.capitalize()


def _truncate_utf8(text: str, max_bytes: int) -> str:
    """Cut text to at most max_bytes of UTF-8 without splitting a character."""
    return text.encode("utf-8")[: max(max_bytes, 0)].decode("utf-8", errors="ignore")


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def format_announcement(item: FeedItem, source_url: str, max_length: int = 400) -> str:
    """Format a feed item as one line of channel text.

    The title is shortened first so the link survives truncation. Line
    breaks and NUL are removed everywhere, since either would end or
    corrupt the IRC line.

    Args:
        item: The feed item to announce
        source_url: URL of the feed the item came from
        max_length: Maximum size of the returned text in UTF-8 bytes

    Returns:
        Single-line text of at most max_length UTF-8 bytes
    """
    source = extract_source_name(source_url)
    head = f"[{source}] " if source else ""
    # Whitespace never belongs inside a URL
    link = "".join(item.link.split()).replace("\0", "")
    tail = f" - {link}" if link else ""
    title = " ".join(item.title.replace("\0", "").split()) or "(untitled)"

    room = max_length - _utf8_len(head) - _utf8_len(tail)
    if _utf8_len(title) > room:
        title = _truncate_utf8(title, room - 3) + "..."

    return _truncate_utf8(head + title + tail, max_length)


class FeedBot:
    """Joins one channel and announces new feed items in it."""

    def __init__(
        self,
        irc_config: IRCConfig,
        poller_config: PollerConfig,
        execution_id: str | None = None,
    ):
        self.irc_config = irc_config
        self.nick = irc_config.nick
        self.joined = False
        self.logger = create_execution_logger("bot", execution_id)
        self.connection = ConnectionManager(
            irc_config.server, execution_id=execution_id
        )
        self.responder = PingResponder(self.connection.send)
        self.pollers = [
            FeedPoller(
                url,
                refetch_minutes=poller_config.refetch_minutes,
                execution_id=execution_id,
            )
            for url in poller_config.feed_urls
        ]

    def handle_event(self, event: Event) -> None:
        """Apply keepalive, registration and join rules to one inbound event."""
        if self.responder.handle(event):
            return

        if isinstance(event, Connect):
            self.nick = self.irc_config.nick
            self._register()
        elif isinstance(event, Disconnect):
            self.joined = False
            self.logger.warning("Disconnected from server")
        elif event.command == RPL_WELCOME:
            self.connection.send(Line("JOIN", [self.irc_config.channel]))
        elif event.command == ERR_NICKNAMEINUSE:
            self.nick += "_"
            self.logger.warning(f"Nick in use, retrying as {self.nick}")
            self.connection.send(Line("NICK", [self.nick]))
        elif event.command == "JOIN" and self._is_own_join(event):
            self.joined = True
            self.logger.info(f"Joined {self.irc_config.channel}")

    def announce(self, item: FeedItem, source_url: str) -> bool:
        """Send a feed item to the channel.

        Returns:
            True if the message was queued for sending
        """
        if not self.joined:
            self.logger.log_item_processing(item.title, "dropped_not_joined", False)
            return False

        text = format_announcement(item, source_url, self.irc_config.max_message_length)
        sent = self.connection.send(
            Line("PRIVMSG", [self.irc_config.channel], suffix=text)
        )
        self.logger.log_item_processing(item.title, "announced", sent)
        return sent

    async def run(self) -> None:
        """Run the connection, the pollers and the routing loops forever."""
        self.logger.info(
            f"Starting bot with {len(self.pollers)} feeds",
            server=self.irc_config.server,
        )
        await asyncio.gather(
            self.connection.run(),
            self._dispatch_events(),
            *(poller.run() for poller in self.pollers),
            *(self._forward_items(poller) for poller in self.pollers),
        )

    async def _dispatch_events(self) -> None:
        while True:
            event = await self.connection.rx.get()
            self.handle_event(event)

    async def _forward_items(self, poller: FeedPoller) -> None:
        while True:
            item = await poller.items.get()
            self.announce(item, poller.feed_url)

    def _register(self) -> None:
        self.connection.send(Line("NICK", [self.nick]))
        self.connection.send(
            Line("USER", [self.nick, "0", "*"], suffix=self.irc_config.realname)
        )

    def _is_own_join(self, event: Line) -> bool:
        channel = event.arguments[0] if event.arguments else event.suffix
        return (
            event.prefix.split("!")[0] == self.nick
            and channel.lower() == self.irc_config.channel.lower()
        )
