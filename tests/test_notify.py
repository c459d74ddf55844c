"""
Tests for the notification backends.
"""

from feedharvest.config.settings import Config
from feedharvest.engine.schema import RetainedItem, collection_complete_event, status_update_event
from feedharvest.notify import (
    CallbackNotifier,
    ConsoleNotifier,
    MultiNotifier,
    NullNotifier,
    get_notifier,
)


class TestGetNotifier:
    """Test the notifier factory."""

    def test_console_only(self):
        """Test console output alone gives a ConsoleNotifier."""
        notifier = get_notifier(Config(notify_console=True))
        assert isinstance(notifier, ConsoleNotifier)

    def test_nothing_enabled(self):
        """Test no channel gives a NullNotifier."""
        notifier = get_notifier(Config(notify_console=False))
        assert isinstance(notifier, NullNotifier)

    def test_console_and_callback(self):
        """Test several channels are combined."""
        received = []
        notifier = get_notifier(Config(notify_console=True), callback=received.append)

        assert isinstance(notifier, MultiNotifier)
        notifier.send(status_update_event("Scraped 1 posts...", 1))
        assert received == [{"action": "STATUS_UPDATE", "message": "Scraped 1 posts...", "item_count": 1}]


class TestMultiNotifier:
    """Test fan-out delivery."""

    def test_failure_does_not_block_others(self):
        """Test a failing channel is skipped."""
        received = []

        def broken(event):
            raise RuntimeError("boom")

        notifier = MultiNotifier([CallbackNotifier(broken), CallbackNotifier(received.append)])
        notifier.send(status_update_event("hello", 0))

        assert len(received) == 1


class TestConsoleNotifier:
    """Test console output."""

    def test_summary_printed(self, capsys):
        """Test the completion summary lists collected items."""
        thread = ("first part", "second part")
        items = [
            RetainedItem(text="a single post", author="Alice", timestamp="2024-01-15T10:00:00.000Z"),
            RetainedItem(text="first part", author="Bob", is_thread=True, thread_items=thread, thread_position=1),
        ]

        ConsoleNotifier(Config(), preview_limit=1).send(collection_complete_event(items))
        out = capsys.readouterr().out

        assert "FeedHarvest collected 2 posts" in out
        assert "1. Alice" in out
        assert "Time: 2024-01-15 10:00:00" in out
        assert "... and 1 more" in out

    def test_thread_marker(self, capsys):
        """Test thread members show their position."""
        thread = ("first part", "second part")
        item = RetainedItem(text="second part", author="Bob", is_thread=True, thread_items=thread, thread_position=2)

        ConsoleNotifier(Config()).send(collection_complete_event([item]))

        assert "[thread 2/2]" in capsys.readouterr().out

    def test_empty_summary(self, capsys):
        """Test nothing is printed for an empty run."""
        ConsoleNotifier(Config()).send(collection_complete_event([]))
        assert capsys.readouterr().out == ""

    def test_status_is_logged(self, capsys, caplog):
        """Test status updates go to the log, not stdout."""
        with caplog.at_level("INFO"):
            ConsoleNotifier(Config()).send(status_update_event("Scraped 3 posts...", 3))

        assert "Scraped 3 posts..." in caplog.text
        assert capsys.readouterr().out == ""
