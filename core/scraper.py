"""
Metadata Scraper Module
Fetches third-party pages with a desktop browser profile and pulls out the
representative image or the readable text using BeautifulSoup
"""

import json
import logging
from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from core.errors import PageFetchError

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

PAGE_TIMEOUT_SECONDS = 15.0

# Checked in order; first match wins
IMAGE_META_KEYS = [
    "og:image",
    "og:image:secure_url",
    "og:image:url",
    "twitter:image",
    "twitter:image:src",
]

TEXT_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6", "p"]


def is_http_url(value: Optional[str]) -> bool:
    if not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def fetch_html(client: httpx.AsyncClient, url: str, timeout: float = PAGE_TIMEOUT_SECONDS) -> str:
    """
    Fetch a page as text

    Raises:
        PageFetchError: On transport errors, timeouts or any non-200 response
    """
    try:
        response = await client.get(url, headers=BROWSER_HEADERS, timeout=timeout, follow_redirects=True)
    except httpx.HTTPError as e:
        raise PageFetchError(f"Request for {url} failed: {e}") from e

    if response.status_code != 200:
        raise PageFetchError(f"Request for {url} returned HTTP {response.status_code}")

    return response.text


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    meta = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    if meta and meta.get("content"):
        return meta["content"].strip()
    return None


def _jsonld_images(soup: BeautifulSoup) -> Iterable[str]:
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string or script.get_text(strip=True)
        if not raw:
            continue
        try:
            data = json.loads(raw)
        except ValueError:
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if not isinstance(item, dict):
                continue
            image = item.get("image")
            if isinstance(image, list) and image:
                image = image[0]
            if isinstance(image, dict):
                image = image.get("url")
            if isinstance(image, str) and image.strip():
                yield image.strip()


def extract_image(html: str, base_url: str) -> Optional[str]:
    """
    Find the page's representative image

    Follows the usual metadata conventions: Open Graph, Twitter card,
    ``itemprop="image"``, ``<link rel="image_src">`` and JSON-LD ``image``.

    Returns:
        Absolute image URL, or None if the page declares none
    """
    soup = BeautifulSoup(html, "html.parser")

    candidates = [_meta_content(soup, key) for key in IMAGE_META_KEYS]

    itemprop = soup.find(attrs={"itemprop": "image"})
    if itemprop:
        candidates.append(itemprop.get("content") or itemprop.get("src") or itemprop.get("href"))

    link = soup.find("link", rel="image_src")
    if link:
        candidates.append(link.get("href"))

    candidates.extend(_jsonld_images(soup))

    for candidate in candidates:
        if not candidate:
            continue
        absolute = urljoin(base_url, candidate.strip())
        if is_http_url(absolute):
            return absolute
    return None


def extract_text(html: str) -> str:
    """Join the visible heading and paragraph text of a page."""
    soup = BeautifulSoup(html, "html.parser")
    parts = [el.get_text(" ", strip=True) for el in soup.find_all(TEXT_TAGS)]
    return " ".join(part for part in parts if part)
