"""
Data model for the collection engine.

ScrapeConfig is supplied once per run and never mutated. CandidateRecord
is produced fresh every cycle by the extractor. RetainedItem is what ends
up in the accumulated result, and RunState is the single object the
controller and the collection cycle pass between each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

from .dedup import FingerprintIndex

STATUS_UPDATE = "STATUS_UPDATE"
COLLECTION_COMPLETE = "COLLECTION_COMPLETE"

_ISO_PREFIX_RE = re.compile(r"^\d{4}-")


class ScrapeMode(str, Enum):
    """How a run decides that it has collected enough."""

    ALL = "all"
    COUNT = "count"
    DATE_RANGE = "date_range"


class Phase(str, Enum):
    """Controller phases."""

    IDLE = "idle"
    SEEKING = "seeking"
    COLLECTING = "collecting"
    STOPPED = "stopped"


def _to_date(value: Any) -> date:
    """Coerce a date, datetime or date string (``2024-01-15``, ``15 Jan 2024``) to a date."""
    import dateparser

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        if _ISO_PREFIX_RE.match(text):
            raise ValueError(f"Invalid date: {value!r}") from None

    # Written-out dates must name the day, month and year
    parsed = dateparser.parse(text, settings={"STRICT_PARSING": True}) if text else None
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return parsed.date()


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date window."""

    start: date
    end: date

    def __post_init__(self):
        object.__setattr__(self, "start", _to_date(self.start))
        object.__setattr__(self, "end", _to_date(self.end))
        if self.start > self.end:
            raise ValueError(f"date_range start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> Dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ScrapeConfig:
    """Per-run collection settings."""

    mode: ScrapeMode = ScrapeMode.ALL
    max_items: Optional[int] = None
    date_range: Optional[DateRange] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "mode", ScrapeMode(self.mode))
        except ValueError:
            raise ValueError(f"Invalid mode: {self.mode}") from None
        self._validate()

    def _validate(self) -> None:
        if self.mode is ScrapeMode.COUNT:
            if self.max_items is None:
                raise ValueError("max_items is required when mode is 'count'")
            if isinstance(self.max_items, bool) or not isinstance(self.max_items, int) or self.max_items < 1:
                raise ValueError("max_items must be a positive integer")
        elif self.max_items is not None:
            raise ValueError("max_items is only allowed when mode is 'count'")

        if self.mode is ScrapeMode.DATE_RANGE:
            if self.date_range is None:
                raise ValueError("date_range is required when mode is 'date_range'")
        elif self.date_range is not None:
            raise ValueError("date_range is only allowed when mode is 'date_range'")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapeConfig":
        """
        Build a ScrapeConfig from a command payload.

        Args:
            data: ``{"mode": ..., "max_items": ..., "date_range": {"start", "end"}}``

        Returns:
            ScrapeConfig instance

        Raises:
            ValueError: If the payload is inconsistent
        """
        data = data or {}
        date_range = data.get("date_range")
        if isinstance(date_range, dict):
            if "start" not in date_range or "end" not in date_range:
                raise ValueError("date_range requires 'start' and 'end'")
            date_range = DateRange(date_range["start"], date_range["end"])
        max_items = data.get("max_items")
        if isinstance(max_items, str):
            try:
                max_items = int(max_items)
            except ValueError:
                raise ValueError(f"max_items must be a positive integer, got {max_items!r}") from None
        return cls(
            mode=data.get("mode", ScrapeMode.ALL),
            max_items=max_items,
            date_range=date_range,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"mode": self.mode.value}
        if self.max_items is not None:
            data["max_items"] = self.max_items
        if self.date_range is not None:
            data["date_range"] = self.date_range.to_dict()
        return data


@dataclass
class CandidateRecord:
    """One item as extracted from the current rendering."""

    text: str
    timestamp: Optional[str] = None
    author: Optional[str] = None
    quoted_url: Optional[str] = None
    media_urls: List[str] = field(default_factory=list)
    # The node carries the visual line joining it to the item above
    continues_thread: bool = False


@dataclass(frozen=True)
class RetainedItem:
    """An item kept in the accumulated result."""

    text: str
    timestamp: Optional[str] = None
    author: Optional[str] = None
    is_thread: bool = False
    thread_items: Optional[Tuple[str, ...]] = None
    thread_position: Optional[int] = None
    quoted_url: Optional[str] = None
    media_urls: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.is_thread:
            if not self.thread_items or len(self.thread_items) < 2:
                raise ValueError("a thread item needs at least two thread_items")
            if not self.thread_position or not 1 <= self.thread_position <= len(self.thread_items):
                raise ValueError("thread_position must index into thread_items")
        elif self.thread_items is not None or self.thread_position is not None:
            raise ValueError("thread fields are only set on thread items")

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateRecord,
        thread_items: Optional[Tuple[str, ...]] = None,
        thread_position: Optional[int] = None,
    ) -> "RetainedItem":
        return cls(
            text=candidate.text,
            timestamp=candidate.timestamp or None,
            author=candidate.author or None,
            is_thread=thread_items is not None,
            thread_items=thread_items,
            thread_position=thread_position,
            quoted_url=candidate.quoted_url,
            media_urls=tuple(candidate.media_urls),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert item to a plain dict for events and JSON export."""
        data: Dict[str, Any] = {
            "text": self.text,
            "timestamp": self.timestamp,
            "author": self.author,
            "is_thread": self.is_thread,
        }
        if self.is_thread:
            data["thread_items"] = list(self.thread_items)
            data["thread_position"] = self.thread_position
        if self.quoted_url:
            data["quoted_url"] = self.quoted_url
        if self.media_urls:
            data["media_urls"] = list(self.media_urls)
        return data


@dataclass
class RunState:
    """Everything one run owns. Created on start, discarded on the next start."""

    config: ScrapeConfig
    active: bool = False
    phase: Phase = Phase.IDLE
    accumulated: List[RetainedItem] = field(default_factory=list)
    index: FingerprintIndex = field(default_factory=FingerprintIndex)

    @property
    def item_count(self) -> int:
        return len(self.accumulated)

    def append(self, item: RetainedItem) -> None:
        """Append an item the deduplicator has already accepted."""
        self.accumulated.append(item)
        self.index.add(item)


def status_update_event(message: str, item_count: int) -> Dict[str, Any]:
    return {"action": STATUS_UPDATE, "message": message, "item_count": item_count}


def collection_complete_event(items: List[RetainedItem]) -> Dict[str, Any]:
    return {
        "action": COLLECTION_COMPLETE,
        "items": [item.to_dict() for item in items],
        "item_count": len(items),
    }
