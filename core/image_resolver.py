"""
Image Resolver Module
Picks a representative image for each fact-check claim:
scraped page image -> static publisher logo -> generic placeholder
"""

import logging
from typing import Dict, Mapping

import httpx

from core.errors import PageFetchError
from core.image_proxy import proxy_image_url
from core.scraper import PAGE_TIMEOUT_SECONDS, extract_image, fetch_html, is_http_url

logger = logging.getLogger(__name__)

NO_SOURCE_URL = "#"


class PublisherImages:
    """
    Case-insensitive publisher name -> static image URL table.

    A ``default`` entry is required so every lookup yields an image.
    """

    DEFAULT_KEY = "default"

    def __init__(self, images: Mapping[str, str]):
        table: Dict[str, str] = {key.strip().lower(): value for key, value in images.items() if value}
        if not table.get(self.DEFAULT_KEY):
            raise ValueError("Publisher image table needs a non-empty 'default' entry")
        self._images = table

    @property
    def default(self) -> str:
        return self._images[self.DEFAULT_KEY]

    def lookup(self, publisher: str) -> str:
        return self._images.get((publisher or "").strip().lower(), self.default)


class ImageResolver:
    def __init__(
        self,
        client: httpx.AsyncClient,
        publisher_images: PublisherImages,
        proxy_base_url: str = "",
        timeout: float = PAGE_TIMEOUT_SECONDS,
    ):
        self._client = client
        self.publisher_images = publisher_images
        self._proxy_base_url = proxy_base_url
        self._timeout = timeout

    async def resolve(self, source_url: str, publisher: str) -> str:
        """
        Resolve the image URL for a claim. Never raises and never returns an empty string.

        Args:
            source_url: URL of the fact-check review, or "#" when there is none
            publisher: Review publisher name, used for the static fallback

        Returns:
            Proxy reference to the scraped image, or a static image URL
        """
        if not source_url or source_url == NO_SOURCE_URL or not is_http_url(source_url):
            return self.publisher_images.lookup(publisher)

        try:
            html = await fetch_html(self._client, source_url, timeout=self._timeout)
            image = extract_image(html, source_url)
            if not image:
                raise PageFetchError(f"No image metadata found at {source_url}")
            return proxy_image_url(image, self._proxy_base_url)
        except Exception as e:
            fallback = self.publisher_images.lookup(publisher)
            logger.warning(f"Failed to fetch image for {source_url}: {str(e)}; using {publisher} image {fallback}")
            return fallback
