"""
Main execution logic for FeedHarvest.
"""

import asyncio
import logging
import signal
from typing import List, Optional

from .config.settings import Config
from .engine.controller import PaginationController
from .engine.schema import RetainedItem, ScrapeConfig
from .notify import MultiNotifier, CallbackNotifier, get_notifier
from .views import BaseView, PlaywrightView, StaticHTMLView

logger = logging.getLogger(__name__)


def _install_interrupt_handler(loop: asyncio.AbstractEventLoop, controller: PaginationController) -> bool:
    """Turn Ctrl-C into an external stop request."""
    try:
        loop.add_signal_handler(signal.SIGINT, controller.stop)
        return True
    except (NotImplementedError, RuntimeError):
        # Windows event loops do not support signal handlers
        return False


async def run_harvest(
    config: Config,
    scrape_config: ScrapeConfig,
    view: Optional[BaseView] = None,
    notifier=None,
    handle_interrupt: bool = False,
) -> List[RetainedItem]:
    """
    Run one collection to completion.

    Args:
        config: Application settings
        scrape_config: What to collect in this run
        view: Rendered view; a PlaywrightView on ``config.target_url`` by default
        notifier: Event sink; built from ``config`` by default
        handle_interrupt: Install a SIGINT handler that stops the run

    Returns:
        The accumulated items
    """
    view = view or PlaywrightView(config)
    notifier = notifier or get_notifier(config)

    # A replayed view that has run out of frames stops the run like an operator would
    if isinstance(view, StaticHTMLView):
        def _stop_when_exhausted(event):
            if view.exhausted:
                controller.stop()

        notifier = MultiNotifier([notifier, CallbackNotifier(_stop_when_exhausted)])

    loop = asyncio.get_running_loop()
    async with view:
        controller = PaginationController(view, notifier, config)

        interrupt = handle_interrupt and _install_interrupt_handler(loop, controller)
        timer = None
        if config.max_duration:
            timer = loop.call_later(config.max_duration, controller.stop)

        logger.info("Starting collection run")
        try:
            controller.start(scrape_config)
            items = await controller.wait()
        finally:
            if timer is not None:
                timer.cancel()
            if interrupt:
                loop.remove_signal_handler(signal.SIGINT)

    logger.info(f"Collection run finished with {len(items)} items")
    return items


def main():
    """Main entry point for CLI usage."""
    from .cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
