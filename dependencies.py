"""Service wiring shared by the routers; built once per app in the lifespan hook."""

from dataclasses import dataclass

import httpx
from fastapi import Request

from core.aggregator import FactCheckService
from core.config import Settings
from core.image_proxy import ImageProxy
from core.image_resolver import ImageResolver, PublisherImages
from core.rate_limiter import RateLimiter
from core.source_adapters import ClaimBusterAdapter, GNewsAdapter, GoogleFactCheckAdapter
from core.stores import MemoryStore


@dataclass
class Services:
    http_client: httpx.AsyncClient
    fact_check: FactCheckService
    image_proxy: ImageProxy
    claimbuster: ClaimBusterAdapter


def build_services(settings: Settings, client: httpx.AsyncClient) -> Services:
    publisher_images = PublisherImages(settings.PUBLISHER_IMAGES)
    claimbuster = ClaimBusterAdapter(
        client,
        api_key=settings.CLAIMBUSTER_API_KEY,
        placeholder_image=publisher_images.default,
    )
    fact_check = FactCheckService(
        primary=GoogleFactCheckAdapter(client, api_key=settings.GOOGLE_FACT_CHECK_API_KEY),
        fallback=claimbuster,
        resolver=ImageResolver(client, publisher_images, proxy_base_url=settings.PROXY_BASE_URL),
        rate_limiter=RateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        ),
        news=GNewsAdapter(client, api_key=settings.GNEWS_API_KEY, proxy_base_url=settings.PROXY_BASE_URL),
    )
    image_proxy = ImageProxy(
        client,
        cache=MemoryStore(
            max_entries=settings.IMAGE_CACHE_MAX_ENTRIES,
            ttl_seconds=settings.IMAGE_CACHE_TTL_SECONDS,
        ),
    )
    return Services(http_client=client, fact_check=fact_check, image_proxy=image_proxy, claimbuster=claimbuster)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_fact_check_service(request: Request) -> FactCheckService:
    return get_services(request).fact_check


def get_image_proxy(request: Request) -> ImageProxy:
    return get_services(request).image_proxy


def client_id(request: Request) -> str:
    """Rate-limit key: the caller's IP address."""
    return request.client.host if request.client else "unknown"
