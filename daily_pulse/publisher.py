"""Cloudinary asset publisher for digest images."""

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from .config import CloudinaryConfig
from .logging_config import create_execution_logger


class AssetPublisher:
    """Uploads source images to Cloudinary and returns their hosted URL."""

    def __init__(self, config: CloudinaryConfig, execution_id: str | None = None):
        """Initialize the publisher with Cloudinary configuration."""
        self.config = config
        self.logger = create_execution_logger("asset_publisher", execution_id)

        if config.enabled:
            self.logger.info(
                "AssetPublisher initialized",
                cloud_name=config.cloud_name,
                folder=config.folder,
            )
        else:
            self.logger.warning(
                "Cloudinary credentials missing, images will use the placeholder"
            )

    def upload_options(self) -> dict:
        """Build the fixed transform profile for one upload."""
        return {
            "cloud_name": self.config.cloud_name,
            "api_key": self.config.api_key,
            "api_secret": self.config.api_secret,
            "folder": self.config.folder,
            "width": self.config.width,
            "height": self.config.height,
            "crop": "fill",
            "gravity": "auto",
            "quality": "auto:good",
            "fetch_format": "auto",
            "timeout": self.config.timeout,
        }

    def publish(self, source_url: str) -> str | None:
        """
        Upload an image by URL, one attempt only.

        Args:
            source_url: Absolute URL of the source image

        Returns:
            Hosted secure URL, or None if the upload failed for any reason
        """
        if not self.config.enabled:
            return None

        try:
            result = cloudinary.uploader.upload(source_url, **self.upload_options())
        except CloudinaryError as e:
            self.logger.warning(
                f"Cloudinary rejected upload: {e}", source_url=source_url
            )
            return None
        except Exception as e:
            self.logger.warning(
                f"Unexpected error uploading image: {e}",
                source_url=source_url,
                error=str(e),
            )
            return None

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            self.logger.warning(
                "Upload result has no secure_url", source_url=source_url
            )
            return None

        self.logger.debug(
            "Image published", source_url=source_url, secure_url=secure_url
        )
        return secure_url
