"""
Dynamic view - a live, JavaScript-rendered feed driven by Playwright.

The page is opened once per run. Every snapshot re-reads the DOM, because
the feed is virtualized and nodes come and go as it scrolls.
"""

import logging
from typing import List
from urllib.parse import urlparse

from bs4 import Tag

from ..config.constants import (
    BROWSER_ARGS,
    DEFAULT_VIEWPORT,
    ITEM_SELECTOR,
    QUOTE_CONTAINER_SELECTOR,
    SHOW_MORE_SELECTOR,
)
from ..config.settings import Config
from .base import BaseView

logger = logging.getLogger(__name__)

_EXPAND_SCRIPT = """
([itemSelector, showMoreSelector, quoteSelector]) => {
    let clicked = 0;
    document.querySelectorAll(itemSelector).forEach((item) => {
        item.querySelectorAll(showMoreSelector).forEach((control) => {
            if (!control.closest(quoteSelector)) {
                control.click();
                clicked++;
            }
        });
    });
    return clicked;
}
"""

_SCROLL_SCRIPT = "window.scrollTo(0, document.body.scrollHeight);"


class PlaywrightView(BaseView):
    """
    Live browser view.

    Features:
    - Chromium via Playwright's async API
    - Optional persistent profile directory, so a logged-in session survives
    - Headless or headed

    Example:
        >>> async with PlaywrightView(config) as view:
        ...     nodes = await view.snapshot()
    """

    def __init__(self, config: Config):
        super().__init__(self._origin(config.target_url))
        self.config = config
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    @staticmethod
    def _origin(url: str) -> str:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    async def open(self) -> None:
        """Launch the browser and navigate to the target URL."""
        from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeoutError

        try:
            self._playwright = await async_playwright().start()
            chromium = self._playwright.chromium
            if self.config.user_data_dir:
                self._context = await chromium.launch_persistent_context(
                    self.config.user_data_dir,
                    headless=self.config.headless,
                    args=BROWSER_ARGS,
                    viewport=DEFAULT_VIEWPORT,
                )
            else:
                self._browser = await chromium.launch(headless=self.config.headless, args=BROWSER_ARGS)
                self._context = await self._browser.new_context(viewport=DEFAULT_VIEWPORT)
            self._page = await self._context.new_page()
            logger.debug("Playwright initialized")
        except Exception as e:
            logger.error(f"Failed to initialize Playwright: {e}")
            await self.close()
            raise

        logger.info(f"Opening {self.config.target_url}")
        await self._page.goto(
            self.config.target_url,
            wait_until='domcontentloaded',
            timeout=self.config.timeout * 1000,
        )
        try:
            await self._page.wait_for_selector(ITEM_SELECTOR, timeout=self.config.timeout * 1000)
        except PlaywrightTimeoutError:
            logger.warning(f"No items rendered within {self.config.timeout}s")
        self.base_url = self._origin(self._page.url)

    def _require_page(self):
        if self._page is None:
            raise RuntimeError("Browser not initialized")
        return self._page

    async def snapshot(self) -> List[Tag]:
        page = self._require_page()
        html = await page.content()
        return self._parse_items(html)

    async def expand_show_more(self) -> int:
        page = self._require_page()
        clicked = await page.evaluate(
            _EXPAND_SCRIPT, [ITEM_SELECTOR, SHOW_MORE_SELECTOR, QUOTE_CONTAINER_SELECTOR]
        )
        if clicked:
            logger.debug(f"Expanded {clicked} truncated items")
        return int(clicked or 0)

    async def scroll_to_bottom(self) -> None:
        page = self._require_page()
        await page.evaluate(_SCROLL_SCRIPT)

    async def close(self) -> None:
        """Cleanup Playwright resources."""
        try:
            if self._context:
                await self._context.close()
            if self._browser:
                await self._browser.close()
            if self._playwright:
                await self._playwright.stop()
            logger.debug("Playwright cleaned up")
        except Exception as e:
            logger.warning(f"Cleanup warning: {e}")
        finally:
            self._page = None
            self._context = None
            self._browser = None
            self._playwright = None


__all__ = ["PlaywrightView"]
