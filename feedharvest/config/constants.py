"""
Constants and configuration defaults for FeedHarvest.

Centralized location for DOM selectors, heuristic thresholds and timing
constants. The selectors track the markup of the x.com web client and are
the first thing to revisit when extraction starts missing items.
"""

import re

# ============================================================================
# Timing Constants
# ============================================================================

MIN_TIMEOUT = 5  # Minimum seconds for page navigation
DEFAULT_SETTLE_DELAY = 3.0  # seconds to let lazy content render after a scroll
DEFAULT_EXPAND_DELAY = 0.5  # seconds to let "show more" content render

# ============================================================================
# Pagination / Seeking Configuration
# ============================================================================

DEFAULT_SAMPLE_SIZE = 3  # leading items sampled for date decisions
DEFAULT_SEEK_MAX_ATTEMPTS = 40  # global ceiling before collecting anyway
DEFAULT_SEEK_GRACE_ATTEMPTS = 5  # all-older samples tolerated before giving up

# ============================================================================
# Fingerprinting
# ============================================================================

FINGERPRINT_PREFIX_LENGTH = 50  # leading characters of text used in the key
HASH_ALGORITHM = "sha256"

# ============================================================================
# Item Selectors
# ============================================================================

DEFAULT_BASE_URL = "https://x.com"

ITEM_SELECTOR = '[data-testid="tweet"]'
ROW_CONTAINER_SELECTOR = '[data-testid="cellInnerDiv"]'
TEXT_SELECTOR = '[data-testid="tweetText"]'
LANG_TEXT_SELECTOR = "[lang]"
GENERIC_TEXT_SELECTOR = 'div[dir="auto"], div[dir="ltr"]'
AUTHOR_SELECTORS = [
    '[data-testid="User-Name"] span span',
    '[data-testid="User-Name"]',
]
TIME_SELECTOR = "time"
MEDIA_SOURCE_SELECTOR = "a[href], img[src], video[src], video[poster], source[src]"

# Vertical connector line drawn between consecutive posts of a self-thread
THREAD_CONNECTOR_SELECTOR = ".r-1bnu78o.r-f8sm7e.r-m5arl1.r-16y2uox.r-14gqq1x"

SHOW_MORE_SELECTOR = '[data-testid="tweet-text-show-more-link"]'
QUOTE_CONTAINER_SELECTOR = 'div[role="link"]'
CLICKABLE_ROLES = {"button", "link"}
CLICKABLE_TAGS = {"a", "button"}

# ============================================================================
# Text Heuristics
# ============================================================================

MIN_TEXT_LENGTH = 2
MIN_LANG_TEXT_LENGTH = 10  # tier 2 requires strictly longer text
MIN_GENERIC_TEXT_LENGTH = 20  # tier 3 requires strictly longer text
SEPARATOR_GLYPH = "·"
HANDLE_SIGIL = "@"

# Whole-text matches that are UI chrome rather than post content
UI_CHROME_RE = re.compile(
    r"^(\d+|·|@\w+|Show|Hide|More|Reply|Repost|Quote|Like|Share)$"
)
# Action-bar labels that disqualify a generic text block
UI_LABEL_RE = re.compile(r"\b(?:Repost|Like|Reply)")
NUMERIC_RE = re.compile(r"^\d+$")

# ============================================================================
# Link Patterns
# ============================================================================

STATUS_PERMALINK_RE = re.compile(r"/[^/?#]+/status/\d+/?(?:[?#].*)?$")
PHOTO_PERMALINK_RE = re.compile(r"/status/\d+/photo/\d+")
VIDEO_PERMALINK_RE = re.compile(r"/status/\d+/video/\d+")
MEDIA_HOST_RE = re.compile(
    r"^https?://(?:pbs|video)\.twimg\.com/(?!profile_images|profile_banners|emoji|hashflags)"
)

# ============================================================================
# Validation Rules
# ============================================================================

VALID_EXPORT_FORMATS = ["csv", "json"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# ============================================================================
# Export
# ============================================================================

EXPORT_HEADERS = [
    "Text",
    "Author",
    "Timestamp",
    "Is Thread",
    "Thread Position",
    "Full Thread",
    "Quoted URL",
    "Media URLs",
]
EXPORT_JOINER = " | "
EXPORT_UNKNOWN = "Unknown"
EXPORT_FILE_PREFIX = "tweets"

# ============================================================================
# File System Configuration
# ============================================================================

DEFAULT_CONFIG_DIR = "configs"
DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_DIR = "logs"

# ============================================================================
# Browser Defaults
# ============================================================================

DEFAULT_VIEWPORT = {"width": 1280, "height": 2000}
BROWSER_ARGS = ["--no-sandbox", "--disable-dev-shm-usage"]
