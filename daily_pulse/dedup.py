"""Title deduplication for a single digest run."""

from .logging_config import create_execution_logger


def normalize_title(title: str) -> str:
    """Normalize a title for duplicate detection (surrounding whitespace only)."""
    return title.strip()


class TitleDeduplicator:
    """Tracks titles accepted during one run.

    The seen set lives on the instance, so independent runs never share
    state. Titles are compared after normalize_title.
    """

    def __init__(self, execution_id: str | None = None):
        self.logger = create_execution_logger("deduplicator", execution_id)
        self.seen_titles: set[str] = set()

    def is_duplicate(self, title: str) -> bool:
        """Check whether an equivalent title was already accepted."""
        return normalize_title(title) in self.seen_titles

    def mark_seen(self, title: str) -> None:
        """Record a title as accepted."""
        normalized = normalize_title(title)
        self.seen_titles.add(normalized)
        self.logger.debug("Marked title as seen", item_title=normalized)

    def reset(self) -> None:
        """Forget all seen titles."""
        self.seen_titles.clear()

    def __len__(self) -> int:
        return len(self.seen_titles)
