"""Unit tests for structured logging."""

import json
import logging
from io import StringIO

from rss_irc_bot.logging_config import (
    StructuredFormatter,
    create_execution_logger,
    setup_structured_logging,
)


class TestStructuredLoggingUnit:
    """Unit tests for StructuredFormatter and ExecutionLogger."""

    def setup_method(self):
        self.stream = StringIO()
        self.handler = logging.StreamHandler(self.stream)
        self.handler.setFormatter(StructuredFormatter())
        self.logger = logging.getLogger("rss_irc_bot")
        self.logger.addHandler(self.handler)
        self.original_level = self.logger.level
        self.logger.setLevel(logging.DEBUG)

    def teardown_method(self):
        self.logger.removeHandler(self.handler)
        self.logger.setLevel(self.original_level)

    def records(self) -> list[dict]:
        return [json.loads(line) for line in self.stream.getvalue().splitlines()]

    def test_context_fields_are_emitted(self):
        logger = create_execution_logger("connection", "run_test")

        logger.warning("Could not connect", server="irc.example.net:6667", attempt=2)

        (record,) = self.records()
        assert record["level"] == "WARNING"
        assert record["logger"] == "rss_irc_bot.connection"
        assert record["message"] == "Could not connect"
        assert record["execution_id"] == "run_test"
        assert record["component"] == "connection"
        assert record["server"] == "irc.example.net:6667"
        assert record["attempt"] == 2

    def test_feed_processing_record(self):
        logger = create_execution_logger("feed_poller", "run_test")

        logger.log_feed_processing("https://example.com/feed", 3)

        (record,) = self.records()
        assert record["feed_url"] == "https://example.com/feed"
        assert record["items_count"] == 3

    def test_failed_item_is_logged_as_warning(self):
        logger = create_execution_logger("bot", "run_test")

        logger.log_item_processing("Some title", "dropped_not_joined", False)

        (record,) = self.records()
        assert record["level"] == "WARNING"
        assert record["item_title"] == "Some title"
        assert record["action"] == "dropped_not_joined"
        assert record["success"] is False

    def test_fetch_details_are_emitted(self):
        logger = create_execution_logger("feed_processor", "run_test")

        logger.debug("Fetched feed", status_code=200, content_length=1024)

        (record,) = self.records()
        assert record["status_code"] == 200
        assert record["content_length"] == 1024

    def test_generated_execution_id(self):
        logger = create_execution_logger("main")

        assert logger.execution_id.startswith("run_")

    def test_setup_installs_json_handler(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            setup_structured_logging("debug")

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
