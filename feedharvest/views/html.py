"""
Static HTML view - replays saved page renderings.

Each frame is one full HTML document as it looked at some scroll
position. Scrolling advances to the next frame and stays on the last one,
which is how a feed behaves once nothing more loads.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from bs4 import Tag

from ..config.constants import DEFAULT_BASE_URL, QUOTE_CONTAINER_SELECTOR, SHOW_MORE_SELECTOR
from .base import BaseView

logger = logging.getLogger(__name__)


class StaticHTMLView(BaseView):
    """
    View over a fixed sequence of HTML documents.

    Example:
        >>> view = StaticHTMLView([page_1_html, page_2_html])
        >>> nodes = await view.snapshot()
    """

    def __init__(self, frames: Iterable[str], base_url: str = DEFAULT_BASE_URL):
        super().__init__(base_url)
        self.frames: List[str] = list(frames)
        if not self.frames:
            raise ValueError("StaticHTMLView needs at least one frame")
        self.position = 0
        self.scroll_count = 0
        self.expand_count = 0
        # Set once a scroll is attempted with no frame left to show
        self.exhausted = False
        self._items: Optional[List[Tag]] = None

    @classmethod
    def from_files(cls, paths: Iterable[str | Path], base_url: str = DEFAULT_BASE_URL) -> "StaticHTMLView":
        """Load frames from saved HTML files, in the given order."""
        frames = [Path(path).read_text(encoding="utf-8") for path in paths]
        return cls(frames, base_url=base_url)

    async def snapshot(self) -> List[Tag]:
        if self._items is None:
            self._items = self._parse_items(self.frames[self.position])
        return self._items

    async def expand_show_more(self) -> int:
        """Count primary show-more controls; saved markup cannot be expanded."""
        count = 0
        for node in await self.snapshot():
            for control in node.select(SHOW_MORE_SELECTOR):
                if control.css.closest(QUOTE_CONTAINER_SELECTOR) is None:
                    count += 1
        self.expand_count += count
        return count

    async def scroll_to_bottom(self) -> None:
        self.scroll_count += 1
        if self.at_last_frame:
            self.exhausted = True
        else:
            self.position += 1
            self._items = None
            logger.debug(f"Advanced to frame {self.position + 1}/{len(self.frames)}")

    @property
    def at_last_frame(self) -> bool:
        return self.position == len(self.frames) - 1

    def __repr__(self) -> str:
        return f"StaticHTMLView(frames={len(self.frames)}, position={self.position})"


__all__ = ["StaticHTMLView"]
