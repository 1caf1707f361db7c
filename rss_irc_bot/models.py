"""Data models for RSS IRC Bot."""

from dataclasses import dataclass, field
from enum import Enum

from .codec import Line


class ConnectionState(Enum):
    """Lifecycle state of the IRC connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class Connect:
    """Emitted when a connection period starts."""


@dataclass(frozen=True)
class Disconnect:
    """Emitted when a connection period ends."""


# Only Line has a wire encoding; lifecycle events are never transmitted.
Event = Connect | Disconnect | Line


@dataclass
class FeedItem:
    """Represents a single RSS/Atom feed item."""

    title: str
    description: str
    link: str
    guid: str | None = None


@dataclass
class Feed:
    """Represents a decoded feed document."""

    channel_title: str
    channel_link: str
    channel_description: str
    channel_language: str
    items: list[FeedItem] = field(default_factory=list)
