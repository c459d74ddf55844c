"""
Tests for the field extractor.
"""

import pytest

from feedharvest.engine.extractor import FieldExtractor
from feedharvest.views.base import BaseView

from conftest import page_html, tweet_html


def _nodes(*rows):
    return BaseView._parse_items(page_html(*rows))


def _node(**kwargs):
    return _nodes(tweet_html(**kwargs))[0]


@pytest.fixture
def extractor():
    """Create an extractor for x.com links."""
    return FieldExtractor(base_url="https://x.com")


class TestTextResolution:
    """Test the three-tier text fallback."""

    def test_canonical_text(self, extractor):
        """Test the dedicated text element is used when present."""
        record = extractor.extract(_node(text="Hello from the canonical element"))

        assert record.text == "Hello from the canonical element"
        assert record.author == "Alice"
        assert record.timestamp == "2024-01-15T10:00:00.000Z"

    def test_canonical_text_strips_whitespace(self, extractor):
        """Test surrounding whitespace is removed."""
        record = extractor.extract(_node(text="   padded text   "))
        assert record.text == "padded text"

    def test_canonical_element_wins_even_when_short(self, extractor):
        """Test a present canonical element wins even if its text is then rejected."""
        body = (
            '<div data-testid="tweetText">x</div>'
            '<div lang="en">A much longer language tagged block</div>'
        )
        assert extractor.extract(_node(body=body)) is None

    def test_lang_tier(self, extractor):
        """Test language-tagged elements are used without the canonical element."""
        body = (
            '<div lang="en">short</div>'
            '<div lang="en">@someone replied to this thread</div>'
            '<div lang="en">Alice · 2h ago, still loading</div>'
            '<div lang="en">The real language tagged content</div>'
        )
        record = extractor.extract(_node(body=body))

        assert record.text == "The real language tagged content"

    def test_generic_tier(self, extractor):
        """Test generic text blocks skip labels, numbers and clickable areas."""
        body = (
            '<div dir="auto">Too short to count</div>'
            '<div dir="auto">12 Reposts and 40 Likes so far</div>'
            '<div dir="auto">123456789012345678901234</div>'
            '<div><div dir="auto">Text sitting next to a button here</div><button>Follow</button></div>'
            '<div role="link"><div dir="ltr">Text inside a link wrapper here</div></div>'
            '<div role="button"><div dir="auto">Text inside a role button region</div></div>'
            '<div><div dir="ltr">Generic text that survives every filter</div></div>'
        )
        record = extractor.extract(_node(body=body))

        assert record.text == "Generic text that survives every filter"

    def test_no_text_anywhere(self, extractor):
        """Test a node with no text element yields nothing."""
        assert extractor.extract(_node(body="")) is None

    @pytest.mark.parametrize("text", ["1", "42", "·", "@bob", "Show", "Reply", "Like", "Quote"])
    def test_ui_chrome_rejected(self, extractor, text):
        """Test text that is UI chrome is rejected."""
        assert extractor.extract(_node(text=text)) is None

    def test_chrome_words_inside_content_kept(self, extractor):
        """Test chrome words are only rejected as the whole text."""
        record = extractor.extract(_node(text="Show me the way"))
        assert record.text == "Show me the way"


class TestMetadata:
    """Test timestamp, author, quote and media extraction."""

    def test_missing_timestamp_and_author(self, extractor):
        """Test absent metadata is None."""
        record = extractor.extract(_node(author=None, timestamp=None))

        assert record.timestamp is None
        assert record.author is None

    def test_first_time_element_wins(self, extractor):
        """Test the first time element is the item's timestamp."""
        extra = '<div role="link"><time datetime="2020-01-01T00:00:00.000Z">old</time></div>'
        record = extractor.extract(_node(extra=extra))

        assert record.timestamp == "2024-01-15T10:00:00.000Z"

    def test_author_fallback_to_block(self, extractor):
        """Test the whole name block is used when it has no nested spans."""
        body = (
            '<div data-testid="User-Name">Plain Name</div>'
            '<div data-testid="tweetText">Some content here</div>'
        )
        record = extractor.extract(_node(author=None, body=body))

        assert record.author == "Plain Name"

    def test_quoted_url(self, extractor):
        """Test the quoted post permalink is taken from the quote's show-more link."""
        extra = (
            '<div role="link"><div data-testid="tweetText">quoted text</div>'
            '<a data-testid="tweet-text-show-more-link" href="/bob/status/123">Show more</a></div>'
        )
        record = extractor.extract(_node(text="Primary text here", extra=extra))

        assert record.text == "Primary text here"
        assert record.quoted_url == "https://x.com/bob/status/123"

    def test_quoted_url_ignores_primary_show_more(self, extractor):
        """Test a show-more link outside a quote is not a quoted URL."""
        extra = '<a data-testid="tweet-text-show-more-link" href="/alice/status/9">Show more</a>'
        record = extractor.extract(_node(extra=extra))

        assert record.quoted_url is None

    def test_quoted_url_requires_status_link(self, extractor):
        """Test links that are not post permalinks are ignored."""
        extra = (
            '<div role="link">'
            '<a data-testid="tweet-text-show-more-link" href="/bob/likes">Show more</a></div>'
        )
        record = extractor.extract(_node(extra=extra))

        assert record.quoted_url is None

    def test_media_urls(self, extractor):
        """Test media URLs come in encounter order and avatars are excluded."""
        extra = (
            '<a href="/alice/status/1/photo/1"><img src="https://pbs.twimg.com/media/abc?format=jpg"></a>'
            '<a href="/alice/status/1/video/1"></a>'
            '<video poster="https://pbs.twimg.com/ext_tw_video_thumb/1/pu/img/x.jpg" '
            'src="https://video.twimg.com/ext_tw_video/1/vid.mp4"></video>'
            '<img src="https://pbs.twimg.com/profile_images/1/a.jpg">'
            '<img src="https://abs-0.twimg.com/emoji/v2/svg/1f600.svg">'
        )
        record = extractor.extract(_node(extra=extra))

        assert record.media_urls == [
            "https://x.com/alice/status/1/photo/1",
            "https://pbs.twimg.com/media/abc?format=jpg",
            "https://x.com/alice/status/1/video/1",
            "https://video.twimg.com/ext_tw_video/1/vid.mp4",
            "https://pbs.twimg.com/ext_tw_video_thumb/1/pu/img/x.jpg",
        ]

    def test_media_urls_follow_document_order(self, extractor):
        """Test a video link rendered before a photo link comes first."""
        extra = (
            '<a href="/alice/status/1/video/1"></a>'
            '<a href="/alice/status/1/photo/1"></a>'
        )
        record = extractor.extract(_node(extra=extra))

        assert record.media_urls == [
            "https://x.com/alice/status/1/video/1",
            "https://x.com/alice/status/1/photo/1",
        ]

    def test_no_media(self, extractor):
        """Test an item without media has an empty list."""
        assert extractor.extract(_node()).media_urls == []


class TestContinuationMarker:
    """Test detection of the thread connector line."""

    def test_marker_on_item(self, extractor):
        """Test a connector drawn on the item itself."""
        assert extractor.extract(_node(connector=True)).continues_thread is True

    def test_marker_on_previous_row(self, extractor):
        """Test a connector on the preceding row carries over."""
        first, second = _nodes(
            tweet_html(text="First in thread", connector=True),
            tweet_html(text="Second in thread"),
        )

        assert extractor.has_continuation_marker(second) is True

    def test_no_marker(self, extractor):
        """Test items with no connector nearby."""
        first, second = _nodes(
            tweet_html(text="Unrelated one"),
            tweet_html(text="Unrelated two"),
        )

        assert extractor.has_continuation_marker(first) is False
        assert extractor.has_continuation_marker(second) is False

    def test_marker_only_from_immediate_predecessor(self, extractor):
        """Test a connector two rows up does not carry over."""
        nodes = _nodes(
            tweet_html(text="Has the connector", connector=True),
            tweet_html(text="Middle item"),
            tweet_html(text="Last item"),
        )

        assert extractor.has_continuation_marker(nodes[2]) is False
