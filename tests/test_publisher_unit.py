"""Unit tests for the Cloudinary asset publisher."""

from unittest.mock import patch

from cloudinary.exceptions import Error as CloudinaryError

from daily_pulse.config import CloudinaryConfig
from daily_pulse.publisher import AssetPublisher


def make_config(**overrides):
    values = {
        "cloud_name": "demo",
        "api_key": "key",
        "api_secret": "secret",
    }
    values.update(overrides)
    return CloudinaryConfig(**values)


class TestAssetPublisherUnit:
    """Unit tests for AssetPublisher."""

    def test_publish_returns_secure_url(self):
        """A successful upload returns the secure URL."""
        publisher = AssetPublisher(make_config())

        with patch("cloudinary.uploader.upload") as mock_upload:
            mock_upload.return_value = {
                "secure_url": "https://res.cloudinary.com/demo/image/upload/a.jpg",
                "url": "http://res.cloudinary.com/demo/image/upload/a.jpg",
            }
            result = publisher.publish("https://example.com/pics/a.jpg")

        assert result == "https://res.cloudinary.com/demo/image/upload/a.jpg"
        mock_upload.assert_called_once()

    def test_upload_uses_fixed_transform_profile(self):
        """Uploads use the fixed folder, size, crop and quality settings."""
        publisher = AssetPublisher(make_config(folder="daily-pulse", timeout=12))

        with patch("cloudinary.uploader.upload") as mock_upload:
            mock_upload.return_value = {"secure_url": "https://res.cloudinary.com/x"}
            publisher.publish("https://example.com/pics/a.jpg")

        args, kwargs = mock_upload.call_args
        assert args == ("https://example.com/pics/a.jpg",)
        assert kwargs["folder"] == "daily-pulse"
        assert kwargs["width"] == 800
        assert kwargs["height"] == 400
        assert kwargs["crop"] == "fill"
        assert kwargs["gravity"] == "auto"
        assert kwargs["quality"] == "auto:good"
        assert kwargs["fetch_format"] == "auto"
        assert kwargs["timeout"] == 12
        assert kwargs["cloud_name"] == "demo"

    def test_cloudinary_error_returns_none(self):
        """A Cloudinary error returns None after a single attempt."""
        publisher = AssetPublisher(make_config())

        with patch("cloudinary.uploader.upload") as mock_upload:
            mock_upload.side_effect = CloudinaryError("Resource not found")
            result = publisher.publish("https://example.com/missing.jpg")

        assert result is None
        assert mock_upload.call_count == 1  # no retry

    def test_unexpected_error_returns_none(self):
        """Network-level errors are absorbed as well."""
        publisher = AssetPublisher(make_config())

        with patch("cloudinary.uploader.upload") as mock_upload:
            mock_upload.side_effect = TimeoutError("read timed out")
            result = publisher.publish("https://example.com/slow.jpg")

        assert result is None
        assert mock_upload.call_count == 1

    def test_missing_secure_url_returns_none(self):
        """A result without secure_url counts as a failure."""
        publisher = AssetPublisher(make_config())

        with patch("cloudinary.uploader.upload") as mock_upload:
            mock_upload.return_value = {"public_id": "abc"}
            assert publisher.publish("https://example.com/a.jpg") is None

    def test_disabled_without_credentials(self):
        """Without credentials nothing is uploaded."""
        publisher = AssetPublisher(make_config(api_secret=""))

        with patch("cloudinary.uploader.upload") as mock_upload:
            result = publisher.publish("https://example.com/a.jpg")

        assert result is None
        mock_upload.assert_not_called()
