"""
Test doubles shared across the FactLens test modules
"""

from typing import Callable, List, Optional

import httpx

from core.errors import UpstreamError
from core.schemas import NormalizedArticle, NormalizedClaim, SourceResult

PUBLISHER_IMAGES = {
    "USA Today": "http://localhost:5173/images/usa-today-logo.png",
    "aap": "http://localhost:5173/images/aap-logo.png",
    "full fact": "http://localhost:5173/images/full-fact-logo.png",
    "default": "http://localhost:5173/images/placeholder.png",
}

USA_TODAY_LOGO = PUBLISHER_IMAGES["USA Today"]
PLACEHOLDER = PUBLISHER_IMAGES["default"]


class FakeSource:
    """Claim source returning a canned result (or raising) and counting calls."""

    def __init__(self, name: str, result: Optional[SourceResult] = None, error: Optional[Exception] = None):
        self.name = name
        self.result = result if result is not None else SourceResult.ok(name, [])
        self.error = error
        self.calls: List[str] = []

    async def fetch_claims(self, query: str) -> SourceResult:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.result


class FakeNews:
    name = "GNews"

    def __init__(self, articles: Optional[List[NormalizedArticle]] = None, error: Optional[UpstreamError] = None):
        self.articles = articles or []
        self.error = error
        self.calls: List[str] = []

    async def fetch_articles(self, query: str) -> List[NormalizedArticle]:
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        return self.articles


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_http_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """httpx client whose every request is answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_claim(**overrides) -> NormalizedClaim:
    fields = {
        "claim_text": "Vaccines cause autism",
        "claimant": "Social media users",
        "date": "2024-03-01T00:00:00Z",
        "publisher": "USA Today",
        "rating": "False",
        "source_url": "https://www.usatoday.com/story/news/factcheck/vaccines-autism/",
    }
    fields.update(overrides)
    return NormalizedClaim(**fields)


def make_article(**overrides) -> NormalizedArticle:
    fields = {
        "title": "Study finds no link between vaccines and autism",
        "description": "A large study...",
        "url": "https://news.example.com/study",
        "image_url": None,
        "published_at": "2024-03-02T10:00:00Z",
        "source": "Example News",
    }
    fields.update(overrides)
    return NormalizedArticle(**fields)
