"""Notification module for FeedHarvest - the engine's event boundary.

The engine produces two kinds of events, both plain dicts:

- ``{"action": "STATUS_UPDATE", "message": str, "item_count": int}``,
  at least once per collection cycle
- ``{"action": "COLLECTION_COMPLETE", "items": [...], "item_count": int}``,
  exactly once per run

Usage:
    from feedharvest.notify import get_notifier
    from feedharvest.config.settings import Config

    config = Config(notify_console=True)
    notifier = get_notifier(config, callback=ui.post_message)
    notifier.send(event)
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .simple import CallbackNotifier, ConsoleNotifier

logger = logging.getLogger(__name__)


class BaseNotifier:
    """Base class for all notifiers."""

    def send(self, event: Dict[str, Any]) -> None:
        """Deliver one engine event."""
        raise NotImplementedError("Subclasses must implement send()")


class MultiNotifier(BaseNotifier):
    """Composite notifier that sends to multiple channels."""

    def __init__(self, notifiers: List[Any]):
        """
        Initialize multi-notifier.

        Args:
            notifiers: List of notifier instances to dispatch to
        """
        self.notifiers = notifiers

    def send(self, event: Dict[str, Any]) -> None:
        for notifier in self.notifiers:
            try:
                notifier.send(event)
            except Exception as e:
                # Log error but continue with other notifiers
                logger.error(f"Notification failed for {notifier.__class__.__name__}: {e}")


class NullNotifier(BaseNotifier):
    """Drops every event."""

    def send(self, event: Dict[str, Any]) -> None:
        pass


def get_notifier(config, callback: Optional[Callable[[Dict[str, Any]], None]] = None):
    """
    Factory function to get the notification backend(s) based on configuration.

    Args:
        config: Configuration object with notification settings
        callback: Optional callable receiving every event

    Returns:
        A single notifier, a MultiNotifier, or a NullNotifier when nothing
        is enabled
    """
    notifiers = []

    if getattr(config, 'notify_console', True):
        notifiers.append(ConsoleNotifier(config))

    if callback is not None:
        notifiers.append(CallbackNotifier(callback))

    if not notifiers:
        return NullNotifier()
    elif len(notifiers) == 1:
        return notifiers[0]
    else:
        return MultiNotifier(notifiers)


__all__ = [
    "BaseNotifier",
    "CallbackNotifier",
    "ConsoleNotifier",
    "MultiNotifier",
    "NullNotifier",
    "get_notifier",
]
