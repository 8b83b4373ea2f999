"""Aggregation pipeline: fetch, filter, dedup and collect digest items."""

from typing import Any, Protocol

from .dedup import TitleDeduplicator, normalize_title
from .images import ImageResolver
from .keywords import KeywordMatcher
from .logging_config import create_execution_logger
from .models import DigestItem, FeedPayload, RawFeedItem
from .rss import normalize_item
from .writer import format_pub_date


class FeedSource(Protocol):
    def fetch(self, feed_url: str) -> FeedPayload: ...


class ImagePublisher(Protocol):
    def publish(self, source_url: str) -> str | None: ...


class DigestPipeline:
    """Collects the first relevant, unique items across feeds in priority order."""

    def __init__(
        self,
        feed_urls: list[str],
        fetcher: FeedSource,
        publisher: ImagePublisher,
        matcher: KeywordMatcher,
        placeholder_image: str,
        cap: int = 10,
        resolver: ImageResolver | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the pipeline.

        Args:
            feed_urls: Feed URLs, highest priority first
            fetcher: Object with fetch(feed_url) -> FeedPayload
            publisher: Object with publish(source_url) -> hosted URL or None
            matcher: Relevance gate
            placeholder_image: Image used when none can be published
            cap: Maximum number of digest items
            resolver: Image resolver (a default one is created if omitted)
            execution_id: Execution ID for logging context
        """
        if cap < 1:
            raise ValueError(f"cap must be at least 1, got {cap}")

        self.feed_urls = list(feed_urls)
        self.fetcher = fetcher
        self.publisher = publisher
        self.matcher = matcher
        self.placeholder_image = placeholder_image
        self.cap = cap
        self.resolver = resolver or ImageResolver(execution_id=execution_id)
        self.logger = create_execution_logger("pipeline", execution_id)
        self.deduplicator = TitleDeduplicator(execution_id=execution_id)
        self.items: list[DigestItem] = []
        self.metrics = self._empty_metrics()

    @staticmethod
    def _empty_metrics() -> dict[str, Any]:
        return {
            "feeds_processed": 0,
            "feeds_failed": 0,
            "items_seen": 0,
            "items_invalid": 0,
            "items_duplicate": 0,
            "items_irrelevant": 0,
            "items_accepted": 0,
            "images_published": 0,
            "images_placeholder": 0,
            "errors": [],
        }

    @property
    def is_full(self) -> bool:
        return len(self.items) >= self.cap

    def run(self) -> list[DigestItem]:
        """Process sources in order until they are exhausted or the cap is hit.

        Returns:
            Accepted items in acceptance order (not yet ranked)
        """
        self.items = []
        self.metrics = self._empty_metrics()
        self.deduplicator.reset()

        self.logger.log_execution_start(feed_count=len(self.feed_urls), cap=self.cap)

        for feed_url in self.feed_urls:
            if self.is_full:
                self.logger.info(
                    "Cap reached, skipping remaining feeds",
                    feed_url=feed_url,
                    cap=self.cap,
                )
                break

            try:
                payload = self.fetcher.fetch(feed_url)
            except Exception as e:
                error_msg = f"Failed to fetch feed {feed_url}: {e}"
                self.logger.error(error_msg, feed_url=feed_url, error=str(e))
                self.metrics["feeds_failed"] += 1
                self.metrics["errors"].append(error_msg)
                continue

            self.metrics["feeds_processed"] += 1
            self._process_payload(payload)

        self.logger.log_execution_end(
            success=True,
            items_count=len(self.items),
            metrics=self.metrics,
        )
        return list(self.items)

    def _process_payload(self, payload: FeedPayload) -> None:
        for raw_item in payload.items:
            if self.is_full:
                break

            self.metrics["items_seen"] += 1
            item = normalize_item(raw_item)
            if item is None:
                self.metrics["items_invalid"] += 1
                self.logger.debug(
                    "Skipping item without title or link", feed_url=payload.feed_url
                )
                continue

            try:
                self._process_item(item, payload.source_name)
            except Exception as e:
                error_msg = f"Failed to process item '{item.title}': {e}"
                self.logger.error(error_msg, item_title=item.title, error=str(e))
                self.metrics["errors"].append(error_msg)

    def _process_item(self, item: RawFeedItem, source_name: str) -> None:
        if self.deduplicator.is_duplicate(item.title):
            self.metrics["items_duplicate"] += 1
            self.logger.log_item_processing(item.title, "skipped_duplicate")
            return

        if not self.matcher.matches_item(item):
            self.metrics["items_irrelevant"] += 1
            self.logger.debug("Item not relevant", item_title=item.title)
            return

        digest_item = DigestItem(
            title=normalize_title(item.title),
            link=item.link,
            image=self._resolve_image(item),
            pub_date=item.pub_date,
            pub_date_string=format_pub_date(item.pub_date),
            source=source_name,
        )

        # Only titles of items that made it into the digest count as seen
        self.deduplicator.mark_seen(item.title)
        self.items.append(digest_item)
        self.metrics["items_accepted"] += 1
        self.logger.log_item_processing(item.title, "accepted")

    def _resolve_image(self, item: RawFeedItem) -> str:
        try:
            candidate = self.resolver.resolve(item)
            hosted = self.publisher.publish(candidate) if candidate else None
        except Exception as e:
            self.logger.warning(
                f"Image step failed for '{item.title}': {e}",
                item_title=item.title,
                error=str(e),
            )
            candidate, hosted = None, None
            self.metrics["errors"].append(
                f"Failed to resolve image for '{item.title}': {e}"
            )

        if hosted:
            self.metrics["images_published"] += 1
            return hosted

        if candidate:
            self.logger.log_item_processing(
                item.title, "image_publish_failed", success=False
            )
        self.metrics["images_placeholder"] += 1
        return self.placeholder_image
