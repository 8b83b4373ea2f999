"""Unit tests for the digest build entry point."""

import json
import os
from unittest.mock import Mock, patch

import pytest

from daily_pulse.build import build_digest, main
from daily_pulse.models import FeedPayload


def fake_fetch(feed_url):
    if "bad" in feed_url:
        raise ValueError("Feed API returned status 'error'")
    return FeedPayload(
        feed_url=feed_url,
        source_name=f"Source {feed_url[-6:]}",
        items=[
            {
                "title": f"Elderly care update {feed_url}",
                "link": f"{feed_url}/story",
                "pubDate": "2024-01-0%d 00:00:00" % (len(feed_url) % 9 + 1),
                "thumbnail": "https://img.example.com/a.jpg",
            }
        ],
    )


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "feeds.json").write_text(
        json.dumps(
            {
                "feeds": [
                    {"url": "https://bad.example/rss"},
                    {"url": "https://one.example/rss"},
                    {"url": "https://second.example/rss"},
                ],
                "keywords": ["elderly"],
            }
        ),
        encoding="utf-8",
    )
    return tmp_path


class TestBuildDigestUnit:
    """Unit tests for build_digest and main."""

    def test_successful_build_writes_artifact(self, workdir):
        """A run with one failing feed still writes every accepted item."""
        env = {"OUTPUT_FILE": str(workdir / "news-today.json")}
        with (
            patch.dict(os.environ, env, clear=True),
            patch("daily_pulse.build.FeedFetcher") as mock_fetcher_class,
            patch("daily_pulse.build.AssetPublisher") as mock_publisher_class,
        ):
            mock_fetcher_class.return_value = Mock(fetch=Mock(side_effect=fake_fetch))
            mock_publisher_class.return_value = Mock(
                publish=Mock(return_value="https://res.cloudinary.com/demo/a.jpg")
            )

            result = build_digest()

        assert result["success"] is True
        assert result["items_count"] == 2
        assert result["metrics"]["feeds_failed"] == 1

        data = json.loads((workdir / "news-today.json").read_text(encoding="utf-8"))
        assert len(data) == 2
        assert {d["image"] for d in data} == {"https://res.cloudinary.com/demo/a.jpg"}
        assert set(data[0]) == {
            "title",
            "link",
            "image",
            "pubDate",
            "pubDateString",
            "source",
        }

    def test_write_failure_is_fatal(self, workdir):
        """An artifact that cannot be written fails the whole run."""
        blocker = workdir / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        env = {"OUTPUT_FILE": str(blocker / "news-today.json")}

        with (
            patch.dict(os.environ, env, clear=True),
            patch("daily_pulse.build.FeedFetcher") as mock_fetcher_class,
            patch("daily_pulse.build.AssetPublisher"),
        ):
            mock_fetcher_class.return_value = Mock(fetch=Mock(side_effect=fake_fetch))

            result = build_digest()

        assert result["success"] is False
        assert "Critical error" in result["error"]

    def test_configuration_error_is_fatal(self, workdir):
        """Invalid configuration is reported as a failed run."""
        with patch.dict(os.environ, {"DIGEST_CAP": "many"}, clear=True):
            result = build_digest()

        assert result["success"] is False

    def test_main_exits_non_zero_on_failure(self):
        """The console entry point exits with status 1 when the build fails."""
        with (
            patch("daily_pulse.build.setup_structured_logging"),
            patch(
                "daily_pulse.build.build_digest",
                return_value={"success": False, "error": "disk full"},
            ),
        ):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1

    def test_main_returns_normally_on_success(self):
        """A successful build returns without calling sys.exit."""
        with (
            patch("daily_pulse.build.setup_structured_logging"),
            patch(
                "daily_pulse.build.build_digest",
                return_value={"success": True, "items_count": 3},
            ),
        ):
            main()
