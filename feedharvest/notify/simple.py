"""Simple console and callback notifiers.

Features:
- Progress lines go to the log
- The completion event prints a formatted summary
- No external dependencies required

Usage:
    from feedharvest.notify import get_notifier
    from feedharvest.config.settings import Config

    config = Config(notify_console=True)
    notifier = get_notifier(config)
    notifier.send(event)
"""

import logging
from typing import Any, Callable, Dict

from ..engine.schema import COLLECTION_COMPLETE, STATUS_UPDATE
from ..utils.helpers import format_timestamp

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Console output for engine events.

    Output Format (completion):
        ============================================================
        FeedHarvest collected 3 posts
        ============================================================

        1. Author Name  [thread 1/2]
           Time: 2024-01-01 12:00:00
           First 150 characters of text...

        ============================================================

    Attributes:
        config: Configuration object
        preview_limit: Number of items shown in the summary
    """

    def __init__(self, config, preview_limit: int = 10):
        self.config = config
        self.preview_limit = preview_limit

    def send(self, event: Dict[str, Any]) -> None:
        action = event.get("action")
        if action == STATUS_UPDATE:
            logger.info(f"{event.get('message')} ({event.get('item_count', 0)} posts)")
        elif action == COLLECTION_COMPLETE:
            self._print_summary(event.get("items", []))
        else:
            logger.debug(f"Ignoring unknown event: {action}")

    def _print_summary(self, items) -> None:
        if not items:
            logger.info("No posts collected")
            return

        print("\n" + "=" * 60)
        print(f"FeedHarvest collected {len(items)} posts")
        print("=" * 60 + "\n")

        for i, item in enumerate(items[:self.preview_limit], 1):
            author = item.get("author") or "Unknown"
            header = f"{i}. {author}"
            if item.get("is_thread"):
                header += f"  [thread {item['thread_position']}/{len(item['thread_items'])}]"
            print(header)
            if item.get("timestamp"):
                print(f"   Time: {format_timestamp(item['timestamp'])}")
            text = item.get("text", "")[:150].replace("\n", " ")
            print(f"   {text}...")
            print()

        if len(items) > self.preview_limit:
            print(f"... and {len(items) - self.preview_limit} more\n")
        print("=" * 60)
        logger.info(f"Console summary printed for {len(items)} posts")


class CallbackNotifier:
    """Forward every event to a callable, e.g. an external control surface."""

    def __init__(self, callback: Callable[[Dict[str, Any]], None]):
        self.callback = callback

    def send(self, event: Dict[str, Any]) -> None:
        self.callback(event)
