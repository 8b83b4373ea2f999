"""Ranking and serialization of the final digest."""

import json
from datetime import UTC, datetime
from pathlib import Path

from dateutil import parser as date_parser

from .logging_config import create_execution_logger
from .models import DigestItem

INVALID_DATE = "Invalid Date"

# dateutil fills missing fields from its default; parsing against two
# defaults that differ in year, month and day exposes partial dates
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_pub_date(value: str) -> datetime | None:
    """Parse a feed publish date into a timezone-aware datetime.

    Naive timestamps are taken as UTC. Returns None when the value cannot
    be parsed or lacks a year, month or day.
    """
    if not value or not value.strip():
        return None

    try:
        first, second = (
            date_parser.parse(value, default=default) for default in _FILL_DEFAULTS
        )
    except (ValueError, TypeError, OverflowError):
        return None

    if first != second:
        return None

    published = first
    if published.tzinfo is None:
        published = published.replace(tzinfo=UTC)
    return published


def format_pub_date(value: str) -> str:
    """Format a feed publish date as a short M/D/YYYY date."""
    published = parse_pub_date(value)
    if published is None:
        return INVALID_DATE
    return f"{published.month}/{published.day}/{published.year}"


def rank_items(items: list[DigestItem]) -> list[DigestItem]:
    """Sort items newest first.

    Items whose date does not parse keep their relative order after all
    dated items.
    """

    def sort_key(item: DigestItem) -> tuple[int, float]:
        published = parse_pub_date(item.pub_date)
        if published is None:
            return (1, 0.0)
        return (0, -published.timestamp())

    return sorted(items, key=sort_key)


def write_digest(items: list[DigestItem], output_file: str | Path) -> Path:
    """Write the digest as a JSON array, replacing any previous file.

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(output_file)
    if path.parent != Path("."):
        path.parent.mkdir(parents=True, exist_ok=True)

    payload = [item.to_dict() for item in items]
    path.write_text(
        json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )
    return path


def finalize(
    items: list[DigestItem],
    output_file: str | Path,
    execution_id: str | None = None,
) -> list[DigestItem]:
    """Rank the collected items and write them out.

    Returns:
        The ranked items, as written
    """
    logger = create_execution_logger("writer", execution_id)

    ranked = rank_items(items)
    path = write_digest(ranked, output_file)
    logger.info(
        f"Wrote {len(ranked)} items to {path}",
        output_file=str(path),
        items_count=len(ranked),
    )
    return ranked
