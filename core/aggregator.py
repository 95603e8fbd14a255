"""
Fact-Check Aggregation Module
Runs the source adapters in priority order and assembles the combined response

Flow:
    normalize query -> rate check -> primary fetch -> [fallback fetch]
    -> [news fetch] -> respond
"""

import asyncio
import logging
import re
from typing import List, Optional

from core.errors import (
    ClientInputError,
    LocalRateLimitExceeded,
    NoResultsFound,
    UpstreamError,
)
from core.image_resolver import ImageResolver
from core.rate_limiter import RateLimiter
from core.schemas import (
    FactCheckResponse,
    NormalizedArticle,
    NormalizedClaim,
    SourceResult,
)
from core.source_adapters import ClaimSource, GNewsAdapter

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_query(raw_query: Optional[str]) -> str:
    """Trim and collapse whitespace; blank input is a client error."""
    if raw_query is None:
        raise ClientInputError()
    query = _WHITESPACE.sub(" ", raw_query).strip()
    if not query:
        raise ClientInputError()
    return query


class FactCheckService:
    """
    Multi-source claim verification

    The primary source always wins when it returns at least one claim; the
    fallback source is consulted only when the primary yields nothing, and the
    two are never merged.

    Args:
        primary: Fact-check source queried first
        fallback: Source queried only when the primary has no claims
        resolver: Attaches an image to each primary claim
        rate_limiter: Per-client request gate
        news: Optional news source used when the caller opts in
    """

    def __init__(
        self,
        primary: ClaimSource,
        fallback: ClaimSource,
        resolver: ImageResolver,
        rate_limiter: RateLimiter,
        news: Optional[GNewsAdapter] = None,
    ):
        self.primary = primary
        self.fallback = fallback
        self.resolver = resolver
        self.rate_limiter = rate_limiter
        self.news = news

    async def run(self, client_id: str, raw_query: Optional[str], include_news: bool = False) -> FactCheckResponse:
        """
        Raises:
            ClientInputError: Query missing or blank (no upstream call is made)
            LocalRateLimitExceeded: ``client_id`` is over its request budget
            UpstreamRateLimited / UpstreamUnauthorized: Raised by the primary source
            NoResultsFound: No claims and no articles
        """
        query = normalize_query(raw_query)

        decision = self.rate_limiter.check_and_consume(client_id)
        if not decision.allowed:
            raise LocalRateLimitExceeded(decision.retry_after_seconds)

        logger.info(f"Fact-check query: {query}")

        claims = await self._fetch_primary(query)
        if not claims:
            claims = await self._fetch_fallback(query)

        articles: List[NormalizedArticle] = []
        if include_news:
            articles = await self._fetch_news(query)

        if not claims and not articles:
            raise NoResultsFound()

        logger.info(f"Returning {len(claims)} claims and {len(articles)} articles for query: {query}")
        return FactCheckResponse(fact_check_results=claims, news_results=articles)

    async def _fetch_primary(self, query: str) -> List[NormalizedClaim]:
        # Distinguished upstream errors propagate to the caller from here
        result = await self.primary.fetch_claims(query)
        self._log_result(result)
        if not result.has_claims:
            return []
        return await self._attach_images(list(result.claims))

    async def _fetch_fallback(self, query: str) -> List[NormalizedClaim]:
        try:
            result = await self.fallback.fetch_claims(query)
        except UpstreamError as e:
            logger.error(f"Fallback source {self.fallback.name} failed: {e.message}")
            return []
        self._log_result(result)
        return [self._ensure_image(claim) for claim in result.claims]

    async def _fetch_news(self, query: str) -> List[NormalizedArticle]:
        if self.news is None:
            return []
        try:
            return await self.news.fetch_articles(query)
        except UpstreamError as e:
            logger.error(f"News API error: {e.message}")
            return []

    async def _attach_images(self, claims: List[NormalizedClaim]) -> List[NormalizedClaim]:
        images = await asyncio.gather(
            *(self.resolver.resolve(claim.source_url, claim.publisher) for claim in claims),
            return_exceptions=True,
        )
        resolved = []
        for claim, image in zip(claims, images):
            if isinstance(image, BaseException) or not image:
                logger.error(f"Image resolution failed for {claim.source_url}: {image!r}")
                image = self.resolver.publisher_images.lookup(claim.publisher)
            resolved.append(claim.model_copy(update={"image_url": image}))
        return resolved

    def _ensure_image(self, claim: NormalizedClaim) -> NormalizedClaim:
        if claim.image_url:
            return claim
        return claim.model_copy(update={"image_url": self.resolver.publisher_images.default})

    @staticmethod
    def _log_result(result: SourceResult) -> None:
        if result.error:
            logger.warning(f"{result.provider} failed ({result.error}); treating as no results")
        else:
            logger.info(f"{result.provider}: {result.status.value}, {len(result.claims)} claims")
