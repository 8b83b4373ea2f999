"""Configuration management for the Daily Pulse digest builder."""

import json
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class RssToJsonConfig:
    """Configuration for the rss2json feed conversion API."""

    api_key: str = ""
    endpoint: str = "https://api.rss2json.com/v1/api.json"
    timeout: float = 30.0


@dataclass
class CloudinaryConfig:
    """Configuration for Cloudinary image uploads."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    folder: str = "daily-pulse"
    width: int = 800
    height: int = 400
    timeout: float = 30.0

    @property
    def enabled(self) -> bool:
        """True when all credentials are present."""
        return bool(self.cloud_name and self.api_key and self.api_secret)


@dataclass
class DigestConfig:
    """Configuration for digest assembly and output."""

    keywords: tuple[str, ...]
    cap: int = 10
    placeholder_image: str = (
        "https://source.unsplash.com/random/800x400/?elderly,portrait"
    )
    output_file: str = "news-today.json"


class Config:
    """Main configuration manager."""

    # Optional feeds/keywords override file
    FEEDS_FILE = "feeds.json"

    DEFAULT_FEEDS = [
        "https://www.theguardian.com/society/older-people/rss",
        "https://feeds.bbci.co.uk/news/health/ageing/rss.xml",
        "https://timesofindia.indiatimes.com/rssfeeds/2886704.cms",
        "https://indianexpress.com/section/india/rss",
        "https://www.deccanherald.com/rss/lifestyle/feedpage/rss/0,2-9,0.xml",
        "https://socialjustice.gov.in/cms/feed",
        "https://www.helpageindia.org/media-centre/news-and-updates/feed/",
        "https://www.apa.org/monitor/rss.xml",
        "https://www.sciencedaily.com/rss/mind_brain/aging_news.xml",
        "https://www.who.int/feeds/atom/en/index.html",
    ]

    DEFAULT_KEYWORDS = [
        "elderly",
        "senior",
        "old age",
        "pension",
        "neglect",
        "abuse",
        "fraud",
        "loneliness",
        "abandoned",
        "isolated",
        "caregiver",
        "geriatric",
        "elder rights",
        "dementia",
        "Alzheimer",
        "care training",
        "volunteer",
        "elder welfare",
    ]

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.rss2json_key = os.getenv("RSS2JSON_KEY", "")
        self.rss2json_endpoint = os.getenv(
            "RSS2JSON_ENDPOINT", "https://api.rss2json.com/v1/api.json"
        )
        self.cloudinary_cloud_name = os.getenv("CLOUDINARY_CLOUD_NAME", "")
        self.cloudinary_api_key = os.getenv(
            "CLOUDINARY_API_KEY", os.getenv("API_KEY", "")
        )
        self.cloudinary_api_secret = os.getenv(
            "CLOUDINARY_API_SECRET", os.getenv("API_SECRET", "")
        )
        self.cloudinary_folder = os.getenv("CLOUDINARY_FOLDER", "daily-pulse")
        self.output_file = os.getenv("OUTPUT_FILE", "news-today.json")
        self.placeholder_image = os.getenv(
            "PLACEHOLDER_IMAGE",
            "https://source.unsplash.com/random/800x400/?elderly,portrait",
        )
        self.cap = self._parse_int("DIGEST_CAP", 10)
        self.http_timeout = self._parse_float("HTTP_TIMEOUT", 30.0)

        if self.cap < 1:
            raise ValueError(f"DIGEST_CAP must be at least 1, got {self.cap}")
        if self.http_timeout <= 0:
            raise ValueError(
                f"HTTP_TIMEOUT must be positive, got {self.http_timeout}"
            )

    @staticmethod
    def _parse_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}")

    @staticmethod
    def _parse_float(name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {raw!r}")

    def _load_feeds_file(self) -> dict | None:
        """Load feeds.json if present, None otherwise."""
        feeds_file = Path(self.FEEDS_FILE)
        if not feeds_file.exists():
            return None

        try:
            with open(feeds_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in feeds file: {e}")

        if not isinstance(data, dict):
            raise ValueError("Feeds file must contain a JSON object")
        return data

    def get_feed_urls(self) -> list[str]:
        """Get feed URLs in priority order.

        Reads enabled feeds from feeds.json when the file exists, falling
        back to DEFAULT_FEEDS otherwise.
        """
        data = self._load_feeds_file()
        if data is None or "feeds" not in data:
            return list(self.DEFAULT_FEEDS)

        enabled_urls = [
            feed["url"]
            for feed in data.get("feeds", [])
            if isinstance(feed, dict) and feed.get("enabled", True) and "url" in feed
        ]

        if not enabled_urls:
            raise ValueError("No enabled feeds found in feeds.json")

        return enabled_urls

    def get_keywords(self) -> tuple[str, ...]:
        """Get the topic keyword set, in configured order."""
        data = self._load_feeds_file()
        if data is None or "keywords" not in data:
            return tuple(self.DEFAULT_KEYWORDS)

        keywords = [
            keyword
            for keyword in data["keywords"]
            if isinstance(keyword, str) and keyword.strip()
        ]
        if not keywords:
            raise ValueError("No keywords found in feeds.json")
        return tuple(keywords)

    def get_rss2json_config(self) -> RssToJsonConfig:
        """Get feed conversion API configuration."""
        return RssToJsonConfig(
            api_key=self.rss2json_key,
            endpoint=self.rss2json_endpoint,
            timeout=self.http_timeout,
        )

    def get_cloudinary_config(self) -> CloudinaryConfig:
        """Get Cloudinary configuration."""
        return CloudinaryConfig(
            cloud_name=self.cloudinary_cloud_name,
            api_key=self.cloudinary_api_key,
            api_secret=self.cloudinary_api_secret,
            folder=self.cloudinary_folder,
            timeout=self.http_timeout,
        )

    def get_digest_config(self) -> DigestConfig:
        """Get digest assembly configuration."""
        return DigestConfig(
            keywords=self.get_keywords(),
            cap=self.cap,
            placeholder_image=self.placeholder_image,
            output_file=self.output_file,
        )
