"""
Base class for rendered views - the engine's only window onto the page.

A view answers three questions: which item nodes are rendered right now,
please expand truncated items, please scroll further down. Everything else
(extraction, grouping, dedup, stop decisions) is done by the engine
against the nodes a view hands out, so the engine can be driven by a live
browser or by saved HTML alike.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

from bs4 import BeautifulSoup, Tag

from ..config.constants import DEFAULT_BASE_URL, ITEM_SELECTOR

logger = logging.getLogger(__name__)


class BaseView(ABC):
    """Abstract base class for rendered views."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        """
        Initialize base view.

        Args:
            base_url: URL used to absolutize relative links
        """
        self.base_url = base_url

    @abstractmethod
    async def snapshot(self) -> List[Tag]:
        """
        Return the currently rendered item nodes.

        Returns:
            Item nodes in rendered order, all from one parsed document
        """
        pass

    @abstractmethod
    async def expand_show_more(self) -> int:
        """
        Trigger every "show more" control of a primary item once.

        Controls nested in quoted items are left alone.

        Returns:
            Number of controls triggered
        """
        pass

    @abstractmethod
    async def scroll_to_bottom(self) -> None:
        """Scroll to the bottom of the growing view."""
        pass

    async def open(self) -> None:
        """Acquire resources. Default is a no-op."""

    async def close(self) -> None:
        """Release resources. Default is a no-op."""

    async def __aenter__(self) -> "BaseView":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @staticmethod
    def _parse_items(html: str) -> List[Tag]:
        """Parse a page and return its item nodes in document order."""
        soup = BeautifulSoup(html, 'lxml')
        return soup.select(ITEM_SELECTOR)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url})"


__all__ = ["BaseView"]
