"""
Command boundary of the engine.

An external control surface talks to the engine with small dict
messages. ``handle`` never raises; problems come back as
``{"status": "error", "error": ...}``.

Commands:
    {"action": "START", "config": {"mode": "count", "max_items": 100}}
    {"action": "STOP"}
    {"action": "GET_STATUS"}
    {"action": "GET_ITEMS"}
"""

import logging
from typing import Any, Dict, List

from ..config.settings import Config
from .controller import PaginationController
from .schema import RetainedItem, ScrapeConfig

logger = logging.getLogger(__name__)


class HarvestService:
    """Dispatch command messages to a PaginationController."""

    def __init__(self, view, notifier, config: Config):
        self.controller = PaginationController(view, notifier, config)

    async def handle(self, command: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(command, dict):
            logger.warning(f"Ignoring malformed command: {command!r}")
            return {"status": "error", "error": "Command must be a dict"}

        action = command.get("action")
        handler = {
            "START": self._start,
            "STOP": self._stop,
            "GET_STATUS": self._get_status,
            "GET_ITEMS": self._get_items,
        }.get(action)

        if handler is None:
            logger.warning(f"Unknown action: {action}")
            return {"status": "error", "error": f"Unknown action: {action}"}

        try:
            return await handler(command)
        except Exception as e:
            logger.error(f"Command {action} failed: {e}")
            return {"status": "error", "error": str(e)}

    async def _start(self, command: Dict[str, Any]) -> Dict[str, Any]:
        if self.controller.active:
            return {"status": "ignored"}
        try:
            scrape_config = ScrapeConfig.from_dict(command.get("config") or {})
        except ValueError as e:
            return {"status": "error", "error": str(e)}
        self.controller.start(scrape_config)
        return {"status": "started"}

    async def _stop(self, command: Dict[str, Any]) -> Dict[str, Any]:
        self.controller.stop()
        await self.controller.wait()
        return {"status": "stopped"}

    async def _get_status(self, command: Dict[str, Any]) -> Dict[str, Any]:
        return self.controller.status()

    async def _get_items(self, command: Dict[str, Any]) -> Dict[str, Any]:
        return {"items": [item.to_dict() for item in self.controller.items()]}

    async def wait(self) -> List[RetainedItem]:
        """Wait for the active run, if any, to finish."""
        return await self.controller.wait()


__all__ = ["HarvestService"]
