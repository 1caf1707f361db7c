"""Background polling loop for a single feed."""

import asyncio

from .dedup import DedupCache, MemoryDedupCache, generate_item_id
from .logging_config import create_execution_logger
from .models import Feed, FeedItem
from .rss import FeedError, FeedProcessor

DEFAULT_REFETCH_MINUTES = 15


class FeedPoller:
    """Polls one feed on a fixed interval and queues items not seen before.

    The first successful cycle only seeds the cache, so a feed's backlog is
    not announced at startup.
    """

    def __init__(
        self,
        feed_url: str,
        refetch_minutes: float = DEFAULT_REFETCH_MINUTES,
        cache: DedupCache | None = None,
        processor: FeedProcessor | None = None,
        queue_size: int = 1,
        execution_id: str | None = None,
    ):
        """Initialize the poller.

        Args:
            feed_url: Feed URL or file:// reference
            refetch_minutes: Wait between cycles, in minutes
            cache: Seen-item store owned by this poller (in-memory if omitted)
            processor: FeedProcessor used to fetch and decode
            queue_size: Capacity of the output queue
            execution_id: Execution ID for logging context
        """
        self.feed_url = feed_url
        self.refetch_minutes = refetch_minutes
        self.cache = cache if cache is not None else MemoryDedupCache()
        self.processor = processor or FeedProcessor(execution_id=execution_id)
        self.items: asyncio.Queue[FeedItem] = asyncio.Queue(maxsize=queue_size)
        self.first_run = True
        self.logger = create_execution_logger("feed_poller", execution_id)

    async def poll_once(self) -> list[FeedItem]:
        """Run one fetch/decode/dedup cycle.

        Returns:
            Items to announce, in document order. Empty on the first
            successful cycle and on any fetch or decode failure.
        """
        try:
            feed = await asyncio.to_thread(self.processor.parse_feed, self.feed_url)
        except FeedError as e:
            self.logger.error(str(e), feed_url=self.feed_url, error=str(e))
            return []

        new_items = self._collect_new_items(feed)
        self.first_run = False
        self.logger.log_feed_processing(self.feed_url, len(new_items))
        return new_items

    def _collect_new_items(self, feed: Feed) -> list[FeedItem]:
        new_items = []
        for item in feed.items:
            item_id = generate_item_id(item)
            if self.cache.seen(item_id):
                continue

            self.logger.debug(f"Adding item id: {item_id}", feed_url=self.feed_url)
            self.cache.add(item_id)
            if not self.first_run:
                new_items.append(item)
        return new_items

    async def run(self) -> None:
        """Poll the feed forever, putting new items on the output queue."""
        self.logger.info(
            f"Poller started (interval: {self.refetch_minutes} min)",
            feed_url=self.feed_url,
        )
        while True:
            for item in await self.poll_once():
                await self.items.put(item)

            await self._wait(self.refetch_minutes * 60)
            self.logger.debug(
                f"{self.refetch_minutes} min elapsed, refetching",
                feed_url=self.feed_url,
            )

    async def _wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
