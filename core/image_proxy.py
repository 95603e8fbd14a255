"""
Image Proxy Module
Re-serves remote images from this service's own origin so clients never load
third-party images directly (mixed content, hotlink and CORS issues)
"""

import base64
import ipaddress
import logging
from typing import Optional, Tuple
from urllib.parse import quote, urlparse

import httpx

from core.errors import ImageFetchError
from core.scraper import BROWSER_USER_AGENT, is_http_url
from core.stores import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

PROXY_PATH = "/proxy-image"
IMAGE_TIMEOUT_SECONDS = 15.0
DEFAULT_CONTENT_TYPE = "image/png"
MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_REDIRECTS = 5
# SVG can carry script and is never re-served from this origin
BLOCKED_CONTENT_TYPES = ("image/svg+xml",)

# 1x1 transparent PNG served when a remote image cannot be fetched
PLACEHOLDER_IMAGE = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
PLACEHOLDER_CONTENT_TYPE = "image/png"


def is_public_host(url: str) -> bool:
    """False for localhost and literal loopback, private or link-local addresses."""
    host = (urlparse(url).hostname or "").lower()
    if not host or host == "localhost" or host.endswith(".localhost"):
        return False
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return True
    return address.is_global


def is_image_content_type(content_type: str) -> bool:
    media_type = content_type.split(";")[0].strip().lower()
    return media_type.startswith("image/") and media_type not in BLOCKED_CONTENT_TYPES


def proxy_image_url(image_url: str, base_url: str = "") -> str:
    """Rewrite a remote image URL into a reference to the proxy endpoint."""
    return f"{base_url}{PROXY_PATH}?url={quote(image_url, safe='')}"


class ImageProxy:
    """
    Fetches remote images and caches the raw bytes per exact URL.

    Args:
        client: Shared httpx client
        cache: Store for ``(bytes, content_type)`` pairs; defaults to a 256-entry LRU
        max_bytes: Larger bodies are rejected instead of cached
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: Optional[KeyValueStore] = None,
        max_bytes: int = MAX_IMAGE_BYTES,
    ):
        self._client = client
        self._max_bytes = max_bytes
        self._cache = cache if cache is not None else MemoryStore(max_entries=256)

    async def fetch_and_cache(self, url: str) -> Tuple[bytes, str]:
        """
        Return the image bytes and content type for ``url``

        Raises:
            ImageFetchError: If the URL is not a public http(s) address, the fetch
                fails, or the response is not a raster image within the size limit
        """
        cached = self._cache.get(url)
        if cached is not None:
            logger.debug(f"Image cache hit: {url}")
            return cached

        if not is_http_url(url):
            raise ImageFetchError(f"Unsupported image URL: {url}")
        if not is_public_host(url):
            logger.warning(f"Refusing to proxy non-public address: {url}")
            raise ImageFetchError(f"Unsupported image URL: {url}")

        try:
            response = await self._open(url)
            try:
                response.raise_for_status()
                content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
                if not is_image_content_type(content_type):
                    raise ImageFetchError(f"Not an image ({content_type}): {url}")

                content = bytearray()
                async for chunk in response.aiter_bytes():
                    content.extend(chunk)
                    if len(content) > self._max_bytes:
                        raise ImageFetchError(f"Image larger than {self._max_bytes} bytes: {url}")
            finally:
                await response.aclose()
        except httpx.HTTPError as e:
            logger.error(f"Failed to proxy image {url}: {str(e)}")
            raise ImageFetchError() from e
        except ImageFetchError as e:
            logger.warning(f"Rejected proxied image: {e.message}")
            raise

        entry = (bytes(content), content_type)
        self._cache.set(url, entry)
        return entry

    async def _open(self, url: str) -> httpx.Response:
        # Redirects are followed by hand so every hop is vetted before it is requested
        request = self._client.build_request(
            "GET", url, headers={"User-Agent": BROWSER_USER_AGENT}, timeout=IMAGE_TIMEOUT_SECONDS
        )
        for _ in range(MAX_REDIRECTS + 1):
            response = await self._client.send(request, stream=True, follow_redirects=False)
            if not response.is_redirect:
                return response
            await response.aclose()
            request = response.next_request
            if request is None or not is_public_host(str(request.url)):
                raise ImageFetchError(f"Redirected to non-public address: {url}")
        raise ImageFetchError(f"Too many redirects: {url}")

    async def fetch_or_placeholder(self, url: str) -> Tuple[bytes, str]:
        """Like ``fetch_and_cache`` but serves the bundled placeholder on failure."""
        try:
            return await self.fetch_and_cache(url)
        except ImageFetchError:
            logger.info(f"Serving placeholder image for {url}")
            return PLACEHOLDER_IMAGE, PLACEHOLDER_CONTENT_TYPE
