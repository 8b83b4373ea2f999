"""Entry point for building the daily news digest."""

import os
import sys
from datetime import UTC, datetime
from typing import Any

from .config import Config
from .keywords import KeywordMatcher
from .logging_config import create_execution_logger, setup_structured_logging
from .pipeline import DigestPipeline
from .publisher import AssetPublisher
from .rss import FeedFetcher
from .writer import finalize


def build_digest() -> dict[str, Any]:
    """
    Build the digest and write it to the configured output file.

    Per-feed and per-item failures are absorbed by the pipeline. Only
    configuration errors and a failed write make the run fail.

    Returns:
        Result dictionary with success flag, item count and metrics
    """
    execution_id = f"build_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    main_logger = create_execution_logger("main", execution_id)
    main_logger.log_execution_start()

    metrics: dict[str, Any] = {"errors": []}

    try:
        config = Config()
        feed_urls = config.get_feed_urls()
        digest_config = config.get_digest_config()
        main_logger.info(
            f"Processing {len(feed_urls)} feeds",
            feed_count=len(feed_urls),
            keyword_count=len(digest_config.keywords),
            cap=digest_config.cap,
        )

        pipeline = DigestPipeline(
            feed_urls=feed_urls,
            fetcher=FeedFetcher(config.get_rss2json_config(), execution_id=execution_id),
            publisher=AssetPublisher(
                config.get_cloudinary_config(), execution_id=execution_id
            ),
            matcher=KeywordMatcher(digest_config.keywords),
            placeholder_image=digest_config.placeholder_image,
            cap=digest_config.cap,
            execution_id=execution_id,
        )
        items = pipeline.run()
        metrics = pipeline.metrics

        ranked = finalize(items, digest_config.output_file, execution_id=execution_id)

        main_logger.log_metrics(metrics)
        main_logger.info(
            f"News built and saved: {len(ranked)} items",
            items_count=len(ranked),
            output_file=digest_config.output_file,
        )
        main_logger.log_execution_end(success=True, items_count=len(ranked))

        return {
            "success": True,
            "execution_id": execution_id,
            "items_count": len(ranked),
            "output_file": digest_config.output_file,
            "metrics": metrics,
        }

    except Exception as e:
        error_msg = f"Critical error building digest: {e}"
        main_logger.error(error_msg, error=str(e))
        metrics.setdefault("errors", []).append(error_msg)
        main_logger.log_execution_end(success=False, metrics=metrics, error=error_msg)

        return {
            "success": False,
            "execution_id": execution_id,
            "error": error_msg,
            "metrics": metrics,
        }


def main() -> None:
    """Console entry point; exits non-zero when the digest was not written."""
    setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))
    result = build_digest()
    if not result["success"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
