"""Image resolution for feed items."""

from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from .logging_config import create_execution_logger
from .models import RawFeedItem


def first_image_src(fragment: str, base_url: str) -> str | None:
    """Return the absolute source URL of the first <img> in an HTML fragment.

    Args:
        fragment: HTML fragment, possibly malformed
        base_url: URL relative sources are resolved against

    Returns:
        Absolute http(s) URL, or None if the fragment has no usable image
    """
    if not fragment or "<" not in fragment:
        return None

    try:
        soup = BeautifulSoup(fragment, "html.parser")
        img = soup.find("img")
    except Exception:
        return None

    if img is None:
        return None

    src = img.get("src")
    if not isinstance(src, str) or not src.strip():
        return None

    try:
        resolved = urljoin(base_url or "", src.strip())
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None

    return resolved


class ImageResolver:
    """Finds a representative image for a feed item."""

    def __init__(self, execution_id: str | None = None):
        self.logger = create_execution_logger("image_resolver", execution_id)

    def resolve(self, item: RawFeedItem) -> str | None:
        """Resolve an image URL, trying each strategy in order.

        Order: thumbnail, enclosure link, first image in the description
        HTML, first image in the content HTML.

        Returns:
            Image URL, or None when no strategy yields one
        """
        thumbnail = item.thumbnail.strip()
        if thumbnail:
            return thumbnail

        enclosure = item.enclosure_link.strip()
        if enclosure:
            return enclosure

        for field_name in ("description", "content"):
            src = first_image_src(getattr(item, field_name), item.link)
            if src:
                self.logger.debug(
                    f"Found image in {field_name}", item_title=item.title
                )
                return src

        self.logger.debug("No image found", item_title=item.title)
        return None
