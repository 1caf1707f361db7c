"""Deduplication module for RSS IRC Bot."""

from typing import Protocol

from .models import FeedItem


class DedupCache(Protocol):
    """Store of item identities already seen for one feed."""

    def seen(self, item_id: str) -> bool: ...

    def add(self, item_id: str) -> None: ...

    def remove(self, item_id: str) -> None: ...


class MemoryDedupCache:
    """In-memory DedupCache. Entries live until the process exits.

    One instance belongs to exactly one feed poller, so no locking is done.
    """

    def __init__(self):
        self._ids: set[str] = set()

    def seen(self, item_id: str) -> bool:
        return item_id in self._ids

    def add(self, item_id: str) -> None:
        self._ids.add(item_id)

    def remove(self, item_id: str) -> None:
        self._ids.discard(item_id)

    def __len__(self) -> int:
        return len(self._ids)


def generate_item_id(item: FeedItem) -> str:
    """Generate the dedup identifier for a feed item.

    Uses the GUID when present and non-empty, otherwise the title. Titles
    are a weaker key: two items with the same title collapse into one.

    Args:
        item: The feed item to generate ID for

    Returns:
        Identifier string
    """
    if item.guid:
        return item.guid
    return item.title
