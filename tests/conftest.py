"""
Shared fixtures for FeedHarvest tests.

Pages are built from small synthetic fragments that mimic the x.com
timeline markup: one ``cellInnerDiv`` row per post, each holding an
``article[data-testid="tweet"]``.
"""

from typing import Any, Dict, List, Optional

import pytest

from feedharvest.config.settings import Config

CONNECTOR = '<div class="css-175oi2r r-1bnu78o r-f8sm7e r-m5arl1 r-16y2uox r-14gqq1x"></div>'


def tweet_html(
    text: str = "A perfectly ordinary post",
    author: Optional[str] = "Alice",
    handle: str = "alice",
    timestamp: Optional[str] = "2024-01-15T10:00:00.000Z",
    connector: bool = False,
    body: Optional[str] = None,
    extra: str = "",
) -> str:
    """Build one timeline row."""
    user = ""
    if author is not None:
        user = (
            f'<div data-testid="User-Name"><a href="/{handle}"><span><span>{author}</span></span></a>'
            f'<a href="/{handle}"><span>@{handle}</span></a></div>'
        )
    time = f'<a href="/{handle}/status/1"><time datetime="{timestamp}">Jan 15</time></a>' if timestamp else ""
    if body is None:
        body = f'<div data-testid="tweetText" lang="en" dir="auto"><span>{text}</span></div>'
    line = CONNECTOR if connector else ""
    return (
        '<div data-testid="cellInnerDiv">'
        f'<article data-testid="tweet" role="article">{line}{user}{time}{body}{extra}</article>'
        '</div>'
    )


def page_html(*rows: str) -> str:
    """Wrap rows into a full page."""
    return f'<html><body><main><section><div>{"".join(rows)}</div></section></main></body></html>'


def dated_page(*stamps: Optional[str], prefix: str = "post") -> str:
    """A page with one post per timestamp, each with distinct text and author."""
    rows = [
        tweet_html(text=f"{prefix} number {i} at {stamp}", author=f"Author {prefix} {i}",
                   handle=f"user{i}", timestamp=stamp)
        for i, stamp in enumerate(stamps)
    ]
    return page_html(*rows)


class RecordingNotifier:
    """Keeps every event it is sent."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def send(self, event: Dict[str, Any]) -> None:
        self.events.append(event)

    def of(self, action: str) -> List[Dict[str, Any]]:
        return [event for event in self.events if event["action"] == action]

    @property
    def messages(self) -> List[str]:
        return [event["message"] for event in self.of("STATUS_UPDATE")]


@pytest.fixture
def notifier():
    """Create a recording notifier."""
    return RecordingNotifier()


@pytest.fixture
def fast_config():
    """Config with no delays and a small seek budget."""
    return Config(
        settle_delay=0,
        expand_delay=0,
        seek_max_attempts=10,
        seek_grace_attempts=2,
        notify_console=False,
    )
