"""
Pagination controller - the run's state machine.

    IDLE -> SEEKING (date_range only) -> COLLECTING -> STOPPED
    IDLE -> COLLECTING                               (all / count)

Steps run one at a time on the event loop. Between steps the controller
waits a fixed settle delay; that wait is the only thing a stop request
cancels. A step already in flight always runs to completion first.

The decisions themselves (:func:`classify_sample`, :func:`decide_seek`,
:func:`should_stop`) are plain functions of the sampled timestamps and
the run state.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..config.settings import Config
from .cycle import CollectionCycle, CycleResult
from .schema import (
    DateRange,
    Phase,
    RetainedItem,
    RunState,
    ScrapeConfig,
    ScrapeMode,
    collection_complete_event,
    status_update_event,
)

logger = logging.getLogger(__name__)


class SampleVerdict(str, Enum):
    """Where the leading items sit relative to the target window."""

    UNREADABLE = "unreadable"
    INSIDE = "inside"
    NEWER = "newer"
    OLDER = "older"
    STRADDLE = "straddle"


class SeekDecision(str, Enum):
    COLLECT = "collect"
    COLLECT_ANYWAY = "collect_anyway"
    SCROLL = "scroll"
    GIVE_UP = "give_up"


@dataclass
class SeekProgress:
    attempts: int = 0
    older_streak: int = 0


def classify_sample(leading: Sequence[Optional[datetime]], date_range: DateRange) -> SampleVerdict:
    """
    Classify the sampled leading timestamps against the window.

    Args:
        leading: Parsed timestamps, None where unreadable
        date_range: Target window

    Returns:
        SampleVerdict
    """
    days = [stamp.date() for stamp in leading if stamp is not None]
    if not days:
        return SampleVerdict.UNREADABLE
    if any(date_range.contains(day) for day in days):
        return SampleVerdict.INSIDE
    if all(day > date_range.end for day in days):
        return SampleVerdict.NEWER
    if all(day < date_range.start for day in days):
        return SampleVerdict.OLDER
    return SampleVerdict.STRADDLE


def decide_seek(verdict: SampleVerdict, progress: SeekProgress, config: Config) -> SeekDecision:
    """
    Decide the next seeking move.

    ``progress`` must already count the current attempt, and its
    ``older_streak`` must include the current verdict.
    """
    if verdict in (SampleVerdict.INSIDE, SampleVerdict.STRADDLE):
        return SeekDecision.COLLECT
    if verdict is SampleVerdict.OLDER and progress.older_streak > config.seek_grace_attempts:
        return SeekDecision.GIVE_UP
    if progress.attempts >= config.seek_max_attempts:
        return SeekDecision.COLLECT_ANYWAY
    return SeekDecision.SCROLL


def should_stop(state: RunState, result: CycleResult, config: Config) -> bool:
    """
    Evaluate the stop condition after a collection cycle.

    count: the cap is reached. all: never. date_range: enough leading items
    carry a timestamp and every one of them is older than the window.
    """
    scrape = state.config
    if scrape.mode is ScrapeMode.COUNT:
        return state.item_count >= scrape.max_items
    if scrape.mode is ScrapeMode.DATE_RANGE:
        days = [stamp.date() for stamp in result.leading if stamp is not None]
        return len(days) >= config.sample_size and all(day < scrape.date_range.start for day in days)
    return False


class PaginationController:
    """
    Drive collection cycles and scrolling until the run is done.

    Example:
        >>> controller = PaginationController(view, notifier, config)
        >>> controller.start(ScrapeConfig(mode="count", max_items=50))
        >>> items = await controller.wait()
    """

    def __init__(self, view, notifier, config: Config, cycle: Optional[CollectionCycle] = None):
        self.view = view
        self.notifier = notifier
        self.config = config
        self.cycle = cycle or CollectionCycle(view, notifier, config)
        self.state = RunState(config=ScrapeConfig())
        self._seek = SeekProgress()
        self._task: Optional[asyncio.Task] = None
        self._pending: Optional[asyncio.Future] = None
        self._stop_requested = False

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self.state.active

    def start(self, scrape_config: ScrapeConfig) -> bool:
        """
        Reset state and schedule a new run on the running event loop.

        Returns:
            False if a run is already active (the request is ignored)
        """
        if self.state.active:
            logger.info("Start requested while a run is active; ignoring")
            return False

        self.state = RunState(config=scrape_config, active=True)
        self._seek = SeekProgress()
        self._stop_requested = False
        logger.info(f"Starting collection with config: {scrape_config.to_dict()}")
        self._task = asyncio.get_running_loop().create_task(self._run(self.state))
        return True

    def stop(self) -> None:
        """Request a stop; cancels the pending scheduled step, if any."""
        if not self.state.active:
            return
        self._stop_requested = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()

    async def wait(self) -> List[RetainedItem]:
        """Wait for the current run to finish and return its items."""
        if self._task is not None and self._task is not asyncio.current_task():
            await asyncio.shield(self._task)
        return list(self.state.accumulated)

    async def run(self, scrape_config: ScrapeConfig) -> List[RetainedItem]:
        """Start a run and wait for it."""
        self.start(scrape_config)
        return await self.wait()

    def status(self) -> Dict[str, Any]:
        return {
            "active": self.state.active,
            "item_count": self.state.item_count,
            "phase": self.state.phase.value,
        }

    def items(self) -> List[RetainedItem]:
        return list(self.state.accumulated)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    async def _run(self, state: RunState) -> None:
        try:
            self._status(state, "Starting scraping...")
            if state.config.mode is ScrapeMode.DATE_RANGE:
                state.phase = Phase.SEEKING
            else:
                state.phase = Phase.COLLECTING

            while not self._stop_requested:
                if state.phase is Phase.SEEKING:
                    delay = await self._seek_step(state)
                else:
                    delay = await self._collect_step(state)

                if state.phase is Phase.STOPPED or self._stop_requested:
                    break
                if delay is not None:
                    await self._schedule(delay)
        except Exception as e:
            logger.error(f"Collection failed: {e}")
            self._status(state, f"Collection failed: {e}")
        finally:
            self._finish(state)

    async def _seek_step(self, state: RunState) -> Optional[float]:
        seek = self._seek
        seek.attempts += 1
        leading = await self.cycle.sample_view()
        verdict = classify_sample(leading, state.config.date_range)
        seek.older_streak = seek.older_streak + 1 if verdict is SampleVerdict.OLDER else 0
        decision = decide_seek(verdict, seek, self.config)
        logger.info(f"Seek attempt {seek.attempts}: sample {verdict.value} -> {decision.value}")

        if decision is SeekDecision.COLLECT:
            state.phase = Phase.COLLECTING
            self._status(state, "Found target date range, collecting...")
            return None
        if decision is SeekDecision.COLLECT_ANYWAY:
            state.phase = Phase.COLLECTING
            self._status(state, "Date range not located, collecting from current position...")
            return None
        if decision is SeekDecision.GIVE_UP:
            state.phase = Phase.STOPPED
            self._status(state, "No posts found in the selected date range")
            return None

        await self.view.scroll_to_bottom()
        self._status(state, f"Seeking date range (attempt {seek.attempts})...")
        return self.config.settle_delay

    async def _collect_step(self, state: RunState) -> Optional[float]:
        result = await self.cycle.run(state)
        if should_stop(state, result, self.config):
            state.phase = Phase.STOPPED
            return None

        await self.view.scroll_to_bottom()
        return self.config.settle_delay

    async def _schedule(self, delay: float) -> None:
        self._pending = asyncio.ensure_future(asyncio.sleep(delay))
        try:
            await self._pending
        except asyncio.CancelledError:
            if not self._stop_requested:
                raise
        finally:
            self._pending = None

    def _finish(self, state: RunState) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        state.phase = Phase.STOPPED
        state.active = False
        logger.info(f"Finished scraping {state.item_count} posts.")
        self._status(state, "Scraping completed")
        self._emit(collection_complete_event(state.accumulated))

    def _status(self, state: RunState, message: str) -> None:
        self._emit(status_update_event(message, state.item_count))

    def _emit(self, event: Dict[str, Any]) -> None:
        try:
            self.notifier.send(event)
        except Exception as e:
            logger.error(f"Failed to deliver {event.get('action')} event: {e}")


__all__ = [
    "PaginationController",
    "SampleVerdict",
    "SeekDecision",
    "SeekProgress",
    "classify_sample",
    "decide_seek",
    "should_stop",
]
