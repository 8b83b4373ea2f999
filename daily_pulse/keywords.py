"""Topic relevance filtering for feed items."""

from collections.abc import Iterable

from .models import RawFeedItem


def matches(text: str, keywords: Iterable[str]) -> bool:
    """Return True if any keyword occurs in text, ignoring case.

    Matching is plain substring search: "senior" matches "seniors" and
    "old age" matches "bold agenda". Blank keywords are ignored.
    """
    if not text:
        return False

    haystack = text.casefold()
    return any(
        keyword.strip() and keyword.casefold() in haystack for keyword in keywords
    )


class KeywordMatcher:
    """Relevance gate over a fixed keyword set."""

    def __init__(self, keywords: Iterable[str]):
        self.keywords = tuple(keywords)

    def matches_item(self, item: RawFeedItem) -> bool:
        """Check title, description and content together."""
        text = " ".join((item.title, item.description, item.content))
        return matches(text, self.keywords)
