"""
Field extractor - turns one rendered item node into a candidate record.

The markup has no stable contract, so text resolution is a three-tier
fallback and everything else is best effort. A node that yields nothing
is simply skipped; it is seen again on the next cycle, usually after more
of it has rendered.
"""

import logging
from typing import List, Optional

from bs4 import Tag

from ..config.constants import (
    AUTHOR_SELECTORS,
    CLICKABLE_ROLES,
    CLICKABLE_TAGS,
    DEFAULT_BASE_URL,
    GENERIC_TEXT_SELECTOR,
    HANDLE_SIGIL,
    LANG_TEXT_SELECTOR,
    MEDIA_HOST_RE,
    MEDIA_SOURCE_SELECTOR,
    MIN_GENERIC_TEXT_LENGTH,
    MIN_LANG_TEXT_LENGTH,
    MIN_TEXT_LENGTH,
    NUMERIC_RE,
    PHOTO_PERMALINK_RE,
    QUOTE_CONTAINER_SELECTOR,
    ROW_CONTAINER_SELECTOR,
    SEPARATOR_GLYPH,
    SHOW_MORE_SELECTOR,
    STATUS_PERMALINK_RE,
    TEXT_SELECTOR,
    THREAD_CONNECTOR_SELECTOR,
    TIME_SELECTOR,
    UI_CHROME_RE,
    UI_LABEL_RE,
    VIDEO_PERMALINK_RE,
)
from ..utils.helpers import to_absolute_url
from .schema import CandidateRecord

logger = logging.getLogger(__name__)


def _text_of(element: Tag) -> str:
    return element.get_text().strip()


class FieldExtractor:
    """
    Extract a CandidateRecord from an item node.

    Nodes are BeautifulSoup tags that still belong to the parsed page, so
    the extractor can look at the row container around an item and at the
    row rendered before it.

    Example:
        >>> extractor = FieldExtractor(base_url="https://x.com")
        >>> record = extractor.extract(node)
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL):
        self.base_url = base_url

    def extract(self, node: Tag) -> Optional[CandidateRecord]:
        """
        Extract fields from one rendered item.

        Args:
            node: Item node (``[data-testid="tweet"]``)

        Returns:
            CandidateRecord, or None if the node is not a usable item
        """
        text = self.resolve_text(node)
        if text is None:
            logger.debug("No text element found in item node")
            return None

        if len(text) < MIN_TEXT_LENGTH or UI_CHROME_RE.match(text):
            logger.debug(f"Rejected UI chrome text: {text!r}")
            return None

        return CandidateRecord(
            text=text,
            timestamp=self.extract_timestamp(node),
            author=self.extract_author(node),
            quoted_url=self.extract_quoted_url(node),
            media_urls=self.extract_media_urls(node),
            continues_thread=self.has_continuation_marker(node),
        )

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def resolve_text(self, node: Tag) -> Optional[str]:
        """Resolve item text; the first tier that finds an element wins."""
        for tier in (self._canonical_text, self._lang_text, self._generic_text):
            text = tier(node)
            if text is not None:
                return text
        return None

    def _canonical_text(self, node: Tag) -> Optional[str]:
        element = node.select_one(TEXT_SELECTOR)
        return _text_of(element) if element is not None else None

    def _lang_text(self, node: Tag) -> Optional[str]:
        for element in node.select(LANG_TEXT_SELECTOR):
            text = _text_of(element)
            if (
                len(text) > MIN_LANG_TEXT_LENGTH
                and SEPARATOR_GLYPH not in text
                and not text.startswith(HANDLE_SIGIL)
            ):
                return text
        return None

    def _generic_text(self, node: Tag) -> Optional[str]:
        for element in node.select(GENERIC_TEXT_SELECTOR):
            text = _text_of(element)
            if len(text) <= MIN_GENERIC_TEXT_LENGTH or UI_LABEL_RE.search(text):
                continue
            if NUMERIC_RE.match(text) or self._in_clickable(element, node):
                continue
            return text
        return None

    @staticmethod
    def _in_clickable(element: Tag, root: Tag) -> bool:
        """True if the element shares a parent with a button or sits inside a link/button."""
        parent = element.parent
        if parent is not None and parent.find("button") is not None:
            return True
        for ancestor in element.parents:
            if ancestor is root:
                break
            if ancestor.name in CLICKABLE_TAGS or ancestor.get("role") in CLICKABLE_ROLES:
                return True
        return False

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def extract_timestamp(self, node: Tag) -> Optional[str]:
        """Return the datetime attribute of the first time element."""
        element = node.select_one(TIME_SELECTOR)
        if element is None:
            return None
        return element.get("datetime") or None

    def extract_author(self, node: Tag) -> Optional[str]:
        for selector in AUTHOR_SELECTORS:
            element = node.select_one(selector)
            if element is not None:
                return _text_of(element) or None
        return None

    def extract_quoted_url(self, node: Tag) -> Optional[str]:
        """Permalink of the quoted post, taken from the quote's show-more link."""
        selector = f"{QUOTE_CONTAINER_SELECTOR} a{SHOW_MORE_SELECTOR}[href]"
        for link in node.select(selector):
            href = link["href"]
            if STATUS_PERMALINK_RE.search(href):
                return to_absolute_url(href, self.base_url)
        return None

    def extract_media_urls(self, node: Tag) -> List[str]:
        """
        Collect media URLs in encounter order.

        Photo and video permalinks and direct media sources are read in one
        document-order walk. A permalink and the image inside it both count.
        """
        urls: List[str] = []
        for element in node.select(MEDIA_SOURCE_SELECTOR):
            if element.name == "a":
                href = element["href"]
                if PHOTO_PERMALINK_RE.search(href) or VIDEO_PERMALINK_RE.search(href):
                    urls.append(to_absolute_url(href, self.base_url))
                continue
            for attr in ("src", "poster"):
                value = element.get(attr)
                if not value:
                    continue
                url = to_absolute_url(value, self.base_url)
                if MEDIA_HOST_RE.match(url):
                    urls.append(url)
        return urls

    # ------------------------------------------------------------------
    # Thread marker
    # ------------------------------------------------------------------

    def has_continuation_marker(self, node: Tag) -> bool:
        """
        True if the thread connector line is drawn on this item, or on the
        row rendered immediately before it.
        """
        if node.select_one(THREAD_CONNECTOR_SELECTOR) is not None:
            return True

        row = node.css.closest(ROW_CONTAINER_SELECTOR)
        if row is None:
            return False
        previous = row.find_previous_sibling()
        return previous is not None and previous.select_one(THREAD_CONNECTOR_SELECTOR) is not None


__all__ = ["FieldExtractor"]
