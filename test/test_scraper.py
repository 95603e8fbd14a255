"""
Tests for page metadata scraping
"""

import httpx
import pytest

from core.errors import PageFetchError
from core.scraper import BROWSER_USER_AGENT, extract_image, extract_text, fetch_html, is_http_url
from helpers import make_http_client

PAGE_URL = "https://www.usatoday.com/story/news/factcheck/vaccines-autism/"


def test_extract_open_graph_image():
    html = """
    <html><head>
      <meta name="twitter:image" content="https://cdn.example.com/twitter.jpg">
      <meta property="og:image" content="https://cdn.example.com/og.jpg">
    </head><body></body></html>
    """
    assert extract_image(html, PAGE_URL) == "https://cdn.example.com/og.jpg"


def test_extract_twitter_image_when_no_open_graph():
    html = '<head><meta name="twitter:image" content="https://cdn.example.com/tw.png"></head>'
    assert extract_image(html, PAGE_URL) == "https://cdn.example.com/tw.png"


def test_relative_image_is_resolved_against_page():
    html = '<head><meta property="og:image" content="/media/lead.jpg"></head>'
    assert extract_image(html, PAGE_URL) == "https://www.usatoday.com/media/lead.jpg"


def test_itemprop_and_link_fallbacks():
    itemprop = '<body><img itemprop="image" src="https://cdn.example.com/item.jpg"></body>'
    link = '<head><link rel="image_src" href="https://cdn.example.com/link.jpg"></head>'

    assert extract_image(itemprop, PAGE_URL) == "https://cdn.example.com/item.jpg"
    assert extract_image(link, PAGE_URL) == "https://cdn.example.com/link.jpg"


def test_jsonld_image():
    html = """
    <script type="application/ld+json">
      {"@type": "NewsArticle", "image": {"@type": "ImageObject", "url": "https://cdn.example.com/ld.jpg"}}
    </script>
    <script type="application/ld+json">not json</script>
    """
    assert extract_image(html, PAGE_URL) == "https://cdn.example.com/ld.jpg"


def test_no_image_returns_none():
    assert extract_image("<html><body><p>Nothing here</p></body></html>", PAGE_URL) is None


def test_extract_text_joins_headings_and_paragraphs():
    html = """
    <html><body>
      <nav>Menu</nav>
      <h1>Fact check</h1>
      <p>Vaccines do not cause autism.</p>
      <p>   </p>
    </body></html>
    """
    assert extract_text(html) == "Fact check Vaccines do not cause autism."


def test_is_http_url():
    assert is_http_url("https://example.com/a")
    assert is_http_url("http://example.com")
    assert not is_http_url("#")
    assert not is_http_url("")
    assert not is_http_url(None)
    assert not is_http_url("file:///etc/passwd")
    assert not is_http_url("javascript:alert(1)")


@pytest.mark.asyncio
async def test_fetch_html_sends_browser_user_agent():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, text="<html></html>")

    async with make_http_client(handler) as client:
        html = await fetch_html(client, PAGE_URL)

    assert html == "<html></html>"
    assert seen[0].headers["user-agent"] == BROWSER_USER_AGENT


@pytest.mark.asyncio
async def test_fetch_html_rejects_non_200():
    async with make_http_client(lambda request: httpx.Response(204)) as client:
        with pytest.raises(PageFetchError):
            await fetch_html(client, PAGE_URL)


@pytest.mark.asyncio
async def test_fetch_html_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with make_http_client(handler) as client:
        with pytest.raises(PageFetchError):
            await fetch_html(client, PAGE_URL)
