"""
Tabular export of collected items.

Every CSV field is quoted with embedded quotes doubled; thread text and
media URLs are joined with " | ".
"""

import csv
import io
import json
import logging
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from .config.constants import EXPORT_FILE_PREFIX, EXPORT_HEADERS, EXPORT_JOINER, EXPORT_UNKNOWN
from .engine.schema import RetainedItem

logger = logging.getLogger(__name__)


def to_row(item: RetainedItem) -> List[str]:
    """Flatten one item into export columns."""
    return [
        item.text,
        item.author or EXPORT_UNKNOWN,
        item.timestamp or EXPORT_UNKNOWN,
        "Yes" if item.is_thread else "No",
        str(item.thread_position) if item.thread_position else "",
        EXPORT_JOINER.join(item.thread_items) if item.is_thread else "",
        item.quoted_url or "",
        EXPORT_JOINER.join(item.media_urls),
    ]


def to_csv(items: Iterable[RetainedItem]) -> str:
    """Render items as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for item in items:
        writer.writerow(to_row(item))
    return buffer.getvalue()


def write_csv(items: Iterable[RetainedItem], path: str | Path) -> Path:
    """
    Write items to a CSV file.

    Args:
        items: Items to export
        path: Destination file; parent directories are created

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv(items), encoding="utf-8")
    logger.info(f"Exported CSV to {path}")
    return path


def write_json(items: Iterable[RetainedItem], path: str | Path) -> Path:
    """Write items to a JSON file as a list of objects."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([item.to_dict() for item in items], f, ensure_ascii=False, indent=2)
    logger.info(f"Exported JSON to {path}")
    return path


def default_export_path(output_dir: str | Path, fmt: str = "csv", today: Optional[date] = None) -> Path:
    """Default export file name, ``tweets_YYYY-MM-DD.<fmt>``."""
    today = today or date.today()
    return Path(output_dir) / f"{EXPORT_FILE_PREFIX}_{today.isoformat()}.{fmt}"


def export_items(items: Iterable[RetainedItem], path: str | Path, fmt: str = "csv") -> Path:
    """Write items in the requested format."""
    if fmt == "csv":
        return write_csv(items, path)
    if fmt == "json":
        return write_json(items, path)
    raise ValueError(f"Invalid export format: {fmt}")


__all__ = ["default_export_path", "export_items", "to_csv", "to_row", "write_csv", "write_json"]
