"""Configuration management for RSS IRC Bot."""

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .connection import parse_server_address


@dataclass
class IRCConfig:
    """Configuration for the IRC side of the bot."""

    server: str
    nick: str = "rssbot"
    realname: str = "RSS IRC Bot"
    channel: str = "#rss"
    max_message_length: int = 400


@dataclass
class PollerConfig:
    """Configuration shared by all feed pollers."""

    feed_urls: list[str]
    refetch_minutes: float = 15


class Config:
    """Main configuration manager."""

    # Default feeds file path
    FEEDS_FILE = "feeds.json"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.server = os.getenv("IRC_SERVER", "irc.libera.chat:6667")
        self.nick = os.getenv("IRC_NICK", "rssbot")
        self.realname = os.getenv("IRC_REALNAME", "RSS IRC Bot")
        self.channel = os.getenv("IRC_CHANNEL", "#rss")
        self.refetch_minutes = os.getenv("REFETCH_MINUTES", "15")
        self.feeds_file = os.getenv("FEEDS_FILE", self.FEEDS_FILE)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_feed_urls(self) -> list[str]:
        """Get feed URLs from the feeds file."""
        feeds_file = Path(self.feeds_file)
        if not feeds_file.exists():
            raise FileNotFoundError(f"Feeds file not found: {self.feeds_file}")

        try:
            with open(feeds_file) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in feeds file: {e}") from e

        feeds = data.get("feeds", []) if isinstance(data, dict) else []
        enabled_urls = [
            feed["url"]
            for feed in feeds
            if isinstance(feed, dict) and feed.get("enabled", True) and "url" in feed
        ]

        if not enabled_urls:
            raise ValueError(f"No enabled feeds found in {self.feeds_file}")

        return enabled_urls

    def get_irc_config(self) -> IRCConfig:
        """Get IRC configuration."""
        parse_server_address(self.server)
        if not self.channel.startswith(("#", "&")):
            raise ValueError(f"IRC channel must start with # or &: {self.channel}")
        return IRCConfig(
            server=self.server,
            nick=self.nick,
            realname=self.realname,
            channel=self.channel,
        )

    def get_poller_config(self) -> PollerConfig:
        """Get feed poller configuration."""
        try:
            refetch_minutes = float(self.refetch_minutes)
        except ValueError as e:
            raise ValueError(
                f"REFETCH_MINUTES must be a number: {self.refetch_minutes!r}"
            ) from e
        if not refetch_minutes > 0:
            raise ValueError("REFETCH_MINUTES must be positive")

        return PollerConfig(
            feed_urls=self.get_feed_urls(), refetch_minutes=refetch_minutes
        )
