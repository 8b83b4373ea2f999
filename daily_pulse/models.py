"""Data models for the Daily Pulse digest builder."""

from dataclasses import dataclass, field


@dataclass
class RawFeedItem:
    """A single item as returned by the feed conversion API."""

    title: str
    link: str
    description: str = ""
    content: str = ""
    pub_date: str = ""
    thumbnail: str = ""
    enclosure_link: str = ""


@dataclass
class FeedPayload:
    """Items of one source feed, in the order the API returned them."""

    feed_url: str
    source_name: str
    items: list[dict] = field(default_factory=list)


@dataclass(frozen=True)
class DigestItem:
    """Represents one output-ready news entry."""

    title: str
    link: str
    image: str
    pub_date: str
    pub_date_string: str
    source: str

    def to_dict(self) -> dict[str, str]:
        """Serialize with the artifact's field names."""
        return {
            "title": self.title,
            "link": self.link,
            "image": self.image,
            "pubDate": self.pub_date,
            "pubDateString": self.pub_date_string,
            "source": self.source,
        }
