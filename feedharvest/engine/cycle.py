"""
Collection cycle - one pass over the current rendering.

Expand truncated items, extract, group into threads, filter by the run's
mode, dedupe, and merge into the accumulated result.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from bs4 import Tag

from ..config.settings import Config
from ..utils.helpers import parse_timestamp, timestamp_date
from .dedup import is_new
from .extractor import FieldExtractor
from .schema import RetainedItem, RunState, ScrapeMode, status_update_event
from .threads import ThreadReconstructor

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """What one cycle saw and did."""

    rendered: int = 0
    extracted: int = 0
    added: int = 0
    # Parsed timestamps of the leading rendered items; None where unreadable
    leading: List[Optional[datetime]] = field(default_factory=list)


class CollectionCycle:
    """
    Run collection passes against a view.

    Args:
        view: Rendered view (see :class:`feedharvest.views.BaseView`)
        notifier: Event sink with a ``send(event)`` method
        config: Application settings (delays, sample size)
    """

    def __init__(self, view, notifier, config: Config,
                 extractor: Optional[FieldExtractor] = None,
                 reconstructor: Optional[ThreadReconstructor] = None):
        self.view = view
        self.notifier = notifier
        self.config = config
        self.extractor = extractor or FieldExtractor(view.base_url)
        self.reconstructor = reconstructor or ThreadReconstructor()

    async def run(self, state: RunState) -> CycleResult:
        """
        Run one cycle and merge its items into ``state``.

        Args:
            state: The run's state; mutated in place

        Returns:
            CycleResult for this pass
        """
        await self.view.expand_show_more()
        await asyncio.sleep(self.config.expand_delay)

        nodes = await self.view.snapshot()
        self.extractor.base_url = self.view.base_url

        candidates = []
        for node in nodes:
            candidate = self.extractor.extract(node)
            if candidate is not None:
                candidates.append(candidate)

        records = self.reconstructor.reconstruct(candidates)
        added = self.merge(state, records)

        result = CycleResult(
            rendered=len(nodes),
            extracted=len(candidates),
            added=added,
            leading=self.sample(nodes),
        )
        logger.info(
            f"Scraped {state.item_count} unique posts so far "
            f"({added} new, {len(candidates)}/{len(nodes)} rendered items extracted)"
        )
        self._notify(status_update_event(f"Scraped {state.item_count} posts...", state.item_count))
        return result

    def merge(self, state: RunState, records: Sequence[RetainedItem]) -> int:
        """
        Filter, dedupe and append records in rendered order.

        Returns:
            Number of items appended
        """
        config = state.config
        added = 0
        for record in records:
            if config.mode is ScrapeMode.COUNT and state.item_count >= config.max_items:
                break
            if config.mode is ScrapeMode.DATE_RANGE:
                day = timestamp_date(record.timestamp)
                if day is not None and not config.date_range.contains(day):
                    continue
            if is_new(record, state.index):
                state.append(record)
                added += 1
        return added

    def sample(self, nodes: Sequence[Tag]) -> List[Optional[datetime]]:
        """Parsed timestamps of the first ``sample_size`` rendered items."""
        return [
            parse_timestamp(self.extractor.extract_timestamp(node))
            for node in nodes[:self.config.sample_size]
        ]

    async def sample_view(self) -> List[Optional[datetime]]:
        """Sample the leading timestamps of the current rendering."""
        nodes = await self.view.snapshot()
        return self.sample(nodes)

    def _notify(self, event) -> None:
        try:
            self.notifier.send(event)
        except Exception as e:
            logger.error(f"Failed to deliver {event.get('action')} event: {e}")


__all__ = ["CollectionCycle", "CycleResult"]
