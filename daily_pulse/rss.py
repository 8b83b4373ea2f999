"""Feed fetching through the rss2json conversion API."""

from typing import Any

import requests

from .config import RssToJsonConfig
from .logging_config import create_execution_logger
from .models import FeedPayload, RawFeedItem


class FeedFetcher:
    """Fetches feeds as structured JSON from the conversion API."""

    def __init__(self, config: RssToJsonConfig, execution_id: str | None = None):
        """Initialize FeedFetcher with configuration.

        Args:
            config: Conversion API endpoint, key and timeout
            execution_id: Execution ID for logging context
        """
        self.config = config
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": "Daily-Pulse/1.0 (News digest builder)"}
        )

        self.logger.info(
            "FeedFetcher initialized",
            endpoint=config.endpoint,
            timeout=config.timeout,
            api_key_configured=bool(config.api_key),
        )

    def fetch(self, feed_url: str) -> FeedPayload:
        """Fetch a single feed through the conversion API.

        Args:
            feed_url: URL of the RSS/Atom feed

        Returns:
            FeedPayload with the feed title and raw items

        Raises:
            requests.RequestException: If the API request fails
            ValueError: If the payload is malformed or its status is not "ok"
        """
        params = {"rss_url": feed_url}
        if self.config.api_key:
            params["api_key"] = self.config.api_key

        self.logger.info("Requesting feed", feed_url=feed_url)
        response = self.session.get(
            self.config.endpoint, params=params, timeout=self.config.timeout
        )
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise ValueError(f"Feed API returned invalid JSON for {feed_url}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Feed API returned a non-object payload for {feed_url}")

        status = data.get("status")
        if status != "ok":
            message = data.get("message", "no message")
            raise ValueError(
                f"Feed API returned status {status!r} for {feed_url}: {message}"
            )

        items = data.get("items", [])
        if not isinstance(items, list):
            raise ValueError(f"Feed API returned malformed items for {feed_url}")

        feed = data.get("feed")
        source_name = ""
        if isinstance(feed, dict) and isinstance(feed.get("title"), str):
            source_name = feed["title"].strip()

        self.logger.log_feed_processing(feed_url, len(items))
        return FeedPayload(
            feed_url=feed_url,
            source_name=source_name or "Unknown",
            items=items,
        )


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def normalize_item(raw_item: Any) -> RawFeedItem | None:
    """Normalize a raw API item into a RawFeedItem.

    Args:
        raw_item: One element of the payload's items array

    Returns:
        RawFeedItem, or None if title or link is missing
    """
    if not isinstance(raw_item, dict):
        return None

    title = _text(raw_item.get("title"))
    link = _text(raw_item.get("link")).strip()
    if not title.strip() or not link:
        return None

    enclosure = raw_item.get("enclosure")
    enclosure_link = ""
    if isinstance(enclosure, dict):
        enclosure_link = _text(enclosure.get("link"))

    return RawFeedItem(
        title=title,
        link=link,
        description=_text(raw_item.get("description")),
        content=_text(raw_item.get("content")),
        pub_date=_text(raw_item.get("pubDate")),
        thumbnail=_text(raw_item.get("thumbnail")),
        enclosure_link=enclosure_link,
    )
