"""
Tests for claim image resolution and its fallback chain
"""

import httpx
import pytest

from core.image_resolver import ImageResolver, PublisherImages
from helpers import PLACEHOLDER, USA_TODAY_LOGO, make_http_client

REVIEW_URL = "https://www.usatoday.com/story/news/factcheck/vaccines-autism/"


def _page(image: str) -> str:
    return f'<html><head><meta property="og:image" content="{image}"></head></html>'


def test_publisher_lookup_is_case_insensitive(publisher_images):
    assert publisher_images.lookup("usa today") == USA_TODAY_LOGO
    assert publisher_images.lookup("  USA TODAY ") == USA_TODAY_LOGO
    assert publisher_images.lookup("AAP").endswith("/images/aap-logo.png")


def test_unknown_publisher_gets_default(publisher_images):
    assert publisher_images.lookup("Some Blog") == PLACEHOLDER
    assert publisher_images.lookup("") == PLACEHOLDER
    assert publisher_images.default == PLACEHOLDER


def test_table_requires_default():
    with pytest.raises(ValueError):
        PublisherImages({"usa today": USA_TODAY_LOGO})
    with pytest.raises(ValueError):
        PublisherImages({"default": ""})


@pytest.mark.asyncio
async def test_placeholder_source_url_skips_scraping(publisher_images):
    """No page is fetched when there is no review URL"""
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, text=_page("https://cdn.example.com/x.jpg"))

    async with make_http_client(handler) as client:
        resolver = ImageResolver(client, publisher_images)
        assert await resolver.resolve("#", "USA Today") == USA_TODAY_LOGO
        assert await resolver.resolve("", "Unknown") == PLACEHOLDER

    assert seen == []


@pytest.mark.asyncio
async def test_scraped_image_is_proxied(publisher_images):
    async with make_http_client(lambda request: httpx.Response(200, text=_page("https://cdn.usatoday.com/lead.jpg"))) as client:
        resolver = ImageResolver(client, publisher_images)
        image = await resolver.resolve(REVIEW_URL, "USA Today")

    assert image == "/proxy-image?url=https%3A%2F%2Fcdn.usatoday.com%2Flead.jpg"


@pytest.mark.asyncio
async def test_proxy_base_url_prefix(publisher_images):
    async with make_http_client(lambda request: httpx.Response(200, text=_page("https://cdn.example.com/a.png"))) as client:
        resolver = ImageResolver(client, publisher_images, proxy_base_url="https://api.factlens.test")
        image = await resolver.resolve(REVIEW_URL, "USA Today")

    assert image.startswith("https://api.factlens.test/proxy-image?url=")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(404, text="not found"),
        lambda request: httpx.Response(200, text="<html><body>no metadata</body></html>"),
    ],
)
async def test_scrape_failure_falls_back_to_publisher_logo(publisher_images, handler):
    async with make_http_client(handler) as client:
        resolver = ImageResolver(client, publisher_images)
        assert await resolver.resolve(REVIEW_URL, "USA Today") == USA_TODAY_LOGO


@pytest.mark.asyncio
async def test_timeout_falls_back_to_default_for_unknown_publisher(publisher_images):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with make_http_client(handler) as client:
        resolver = ImageResolver(client, publisher_images)
        assert await resolver.resolve(REVIEW_URL, "Obscure Checker") == PLACEHOLDER
