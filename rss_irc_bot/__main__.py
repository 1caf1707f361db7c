"""Entry point for RSS IRC Bot: python -m rss_irc_bot"""

import asyncio
from datetime import UTC, datetime

from .bot import FeedBot
from .config import Config
from .logging_config import create_execution_logger, setup_structured_logging


def main() -> None:
    """Load configuration and run the bot until interrupted."""
    config = Config()
    setup_structured_logging(config.log_level)

    execution_id = f"run_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    logger = create_execution_logger("main", execution_id)

    irc_config = config.get_irc_config()
    poller_config = config.get_poller_config()
    logger.info(
        f"Configuration loaded: {len(poller_config.feed_urls)} feeds",
        server=irc_config.server,
    )

    bot = FeedBot(irc_config, poller_config, execution_id=execution_id)
    try:
        asyncio.run(bot.run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
