"""
Source Adapters Module
One adapter per upstream provider (Google Fact Check Tools, ClaimBuster, GNews),
each normalizing its provider's payload into NormalizedClaim / NormalizedArticle
Uses httpx for async HTTP requests
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx

from core.errors import UpstreamError, UpstreamRateLimited, UpstreamUnauthorized
from core.image_proxy import proxy_image_url
from core.schemas import NormalizedArticle, NormalizedClaim, SourceResult

logger = logging.getLogger(__name__)

# API Configuration
FACT_CHECK_API_URL = "https://factchecktools.googleapis.com/v1alpha1/claims:search"
CLAIMBUSTER_API_URL = "https://idir.uta.edu/claimbuster/api/v2/score/text/"
GNEWS_API_URL = "https://gnews.io/api/v4/search"

UPSTREAM_TIMEOUT_SECONDS = 10.0
UNKNOWN = "Unknown"


class ClaimSource(Protocol):
    name: str

    async def fetch_claims(self, query: str) -> SourceResult:
        ...


def raise_for_distinguished_status(provider: str, error: httpx.HTTPStatusError) -> None:
    """Re-raise the statuses that mean the integration itself is broken."""
    status = error.response.status_code
    if status == 429:
        raise UpstreamRateLimited(provider, status) from error
    if status == 403:
        raise UpstreamUnauthorized(provider, status) from error


def _text(value: Any, default: str = UNKNOWN) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


class GoogleFactCheckAdapter:
    """
    Primary source: Google Fact Check Tools claim search

    Args:
        client: Shared httpx client
        api_key: Google API key
        page_size: Maximum claims requested per query
    """

    name = "Google"

    def __init__(self, client: httpx.AsyncClient, api_key: str, page_size: int = 10, language_code: str = "en"):
        self._client = client
        self._api_key = api_key
        self._page_size = page_size
        self._language_code = language_code

    async def fetch_claims(self, query: str) -> SourceResult:
        """
        Search ClaimReview markup for ``query``

        Raises:
            UpstreamRateLimited: Google answered HTTP 429
            UpstreamUnauthorized: Google answered HTTP 403
        """
        params = {
            "query": query,
            "key": self._api_key,
            "languageCode": self._language_code,
            "pageSize": self._page_size,
        }

        try:
            response = await self._client.get(FACT_CHECK_API_URL, params=params, timeout=UPSTREAM_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
            claims = [self._normalize(item) for item in (data.get("claims") or [])[: self._page_size]]
        except httpx.HTTPStatusError as e:
            raise_for_distinguished_status(self.name, e)
            logger.error(f"Google Fact Check API error: HTTP {e.response.status_code}")
            return SourceResult.failed(self.name, f"HTTP {e.response.status_code}")
        except (httpx.HTTPError, ValueError, LookupError, AttributeError, TypeError) as e:
            logger.error(f"Google Fact Check API error: {str(e)}")
            return SourceResult.failed(self.name, str(e) or e.__class__.__name__)

        logger.info(f"Google Fact Check returned {len(claims)} claims")
        return SourceResult.ok(self.name, claims)

    @staticmethod
    def _normalize(item: Dict[str, Any]) -> NormalizedClaim:
        reviews = item.get("claimReview") or [{}]
        review = reviews[0] or {}
        publisher = review.get("publisher") or {}

        return NormalizedClaim(
            claim_text=_text(item.get("text")),
            claimant=_text(item.get("claimant")),
            date=_text(item.get("claimDate")),
            publisher=_text(publisher.get("name")),
            rating=_text(review.get("textualRating")),
            source_url=_text(review.get("url"), default="#"),
        )


class ClaimBusterAdapter:
    """
    Fallback source: ClaimBuster check-worthiness scoring

    Only sentences scoring above ``threshold`` become claims. They carry no
    review page, so they get the placeholder image directly.
    """

    name = "ClaimBuster"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        placeholder_image: str,
        threshold: float = 0.5,
    ):
        self._client = client
        self._api_key = api_key
        self._placeholder_image = placeholder_image
        self.threshold = threshold

    async def score_text(self, text: str) -> List[Tuple[str, float]]:
        """
        Score every sentence of ``text``

        Returns:
            List of (sentence, score) pairs in document order

        Raises:
            UpstreamRateLimited / UpstreamUnauthorized: On HTTP 429 / 403
            UpstreamError: On any other failure
        """
        try:
            response = await self._client.post(
                CLAIMBUSTER_API_URL,
                json={"input_text": text},
                headers={"x-api-key": self._api_key},
                timeout=UPSTREAM_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            data = response.json()
            return [
                (_text(result.get("text"), default=""), float(result.get("score", 0.0)))
                for result in data.get("results") or []
            ]
        except httpx.HTTPStatusError as e:
            raise_for_distinguished_status(self.name, e)
            raise UpstreamError(self.name, e.response.status_code, "ClaimBuster API call failed") from e
        except (httpx.HTTPError, ValueError, LookupError, AttributeError, TypeError) as e:
            raise UpstreamError(self.name, None, "ClaimBuster API call failed") from e

    async def fetch_claims(self, query: str) -> SourceResult:
        try:
            scored = await self.score_text(query)
        except (UpstreamRateLimited, UpstreamUnauthorized):
            raise
        except UpstreamError as e:
            logger.error(f"ClaimBuster API error: {str(e.__cause__ or e)}")
            return SourceResult.failed(self.name, str(e.__cause__ or e))

        claims = [
            NormalizedClaim(
                claim_text=sentence,
                claimant="N/A",
                date=UNKNOWN,
                publisher=self.name,
                rating=f"Check-worthiness score: {score:.2f}",
                source_url="#",
                image_url=self._placeholder_image,
            )
            for sentence, score in scored
            if sentence and score > self.threshold
        ]
        logger.info(f"ClaimBuster returned {len(claims)} check-worthy claims out of {len(scored)} sentences")
        return SourceResult.ok(self.name, claims)


class GNewsAdapter:
    """News sidebar source: GNews article search."""

    name = "GNews"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        max_articles: int = 5,
        proxy_base_url: str = "",
        lang: str = "en",
        country: str = "us",
    ):
        self._client = client
        self._api_key = api_key
        self._max_articles = max_articles
        self._proxy_base_url = proxy_base_url
        self._lang = lang
        self._country = country

    async def fetch_articles(self, query: str) -> List[NormalizedArticle]:
        """
        Search recent news for ``query``

        Raises:
            UpstreamRateLimited / UpstreamUnauthorized: On HTTP 429 / 403
            UpstreamError: On any other failure
        """
        params = {
            "q": query,
            "lang": self._lang,
            "country": self._country,
            "max": self._max_articles,
            "apikey": self._api_key,
        }
        try:
            response = await self._client.get(GNEWS_API_URL, params=params, timeout=UPSTREAM_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
            articles = [self._normalize(item) for item in data.get("articles") or []]
        except httpx.HTTPStatusError as e:
            raise_for_distinguished_status(self.name, e)
            raise UpstreamError(self.name, e.response.status_code, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError, LookupError, AttributeError, TypeError) as e:
            raise UpstreamError(self.name, None, str(e) or e.__class__.__name__) from e

        return [article for article in articles if article is not None]

    def _normalize(self, item: Dict[str, Any]) -> Optional[NormalizedArticle]:
        url = item.get("url")
        if not url:
            return None
        image = item.get("image")
        source = item.get("source") or {}
        return NormalizedArticle(
            title=_text(item.get("title"), default=""),
            description=item.get("description"),
            url=url,
            image_url=proxy_image_url(image, self._proxy_base_url) if image else None,
            published_at=item.get("publishedAt"),
            source=_text(source.get("name")),
        )
