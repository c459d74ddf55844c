"""
Content fingerprinting for items that have no stable identifier.

Virtualized rendering drops and re-creates nodes as the view scrolls, so
the same post is observed many times. Two observations are the same item
when their fingerprints match, or when their raw text matches exactly
(covers a timestamp that was momentarily not rendered).
"""

import hashlib
import logging
from typing import Iterable, Optional, Set

from ..config.constants import FINGERPRINT_PREFIX_LENGTH, HASH_ALGORITHM

logger = logging.getLogger(__name__)


def fingerprint(text: str, timestamp: Optional[str]) -> str:
    """
    Derive the dedup key of an item.

    Args:
        text: Item text
        timestamp: ISO timestamp or None

    Returns:
        Hex digest of ``(text[:50], timestamp)``
    """
    key = f"{text[:FINGERPRINT_PREFIX_LENGTH]}\x1f{timestamp or ''}"
    return hashlib.new(HASH_ALGORITHM, key.encode("utf-8")).hexdigest()


class FingerprintIndex:
    """Fingerprints and raw texts of every retained item."""

    def __init__(self, items: Iterable = ()):
        self._fingerprints: Set[str] = set()
        self._texts: Set[str] = set()
        for item in items:
            self.add(item)

    def add(self, item) -> None:
        self._fingerprints.add(fingerprint(item.text, item.timestamp))
        self._texts.add(item.text)

    def __contains__(self, record) -> bool:
        return (
            record.text in self._texts
            or fingerprint(record.text, record.timestamp) in self._fingerprints
        )

    def __len__(self) -> int:
        return len(self._fingerprints)


def is_new(record, index: FingerprintIndex) -> bool:
    """Return True if ``record`` has not been retained yet."""
    if record in index:
        logger.debug(f"Duplicate skipped: {record.text[:40]!r}")
        return False
    return True
