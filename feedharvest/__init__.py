"""
FeedHarvest - incremental collector for infinitely scrolling feeds

Harvests posts from a virtualized, scroll-loaded timeline, groups
self-threads, deduplicates repeated observations, and exports the result
as CSV or JSON.
"""

__version__ = "0.1.0"
__author__ = "FeedHarvest Team"

from .main import main, run_harvest
from .config.settings import Config

__all__ = ["main", "run_harvest", "Config"]
