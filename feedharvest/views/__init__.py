"""Rendered views - where item nodes come from.

Architecture:
    BaseView: Abstract interface the engine depends on

    StaticHTMLView: Saved HTML documents replayed frame by frame
    PlaywrightView: Live JavaScript-rendered feed (Playwright)

Usage:
    from feedharvest.views import StaticHTMLView

    view = StaticHTMLView.from_files(["page1.html", "page2.html"])
    nodes = await view.snapshot()
"""

from .base import BaseView
from .html import StaticHTMLView
from .dynamic import PlaywrightView

__all__ = [
    "BaseView",
    "StaticHTMLView",
    "PlaywrightView",
]
