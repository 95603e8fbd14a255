import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from core.aggregator import FactCheckService
from core.image_proxy import ImageProxy
from core.schemas import FactCheckRequest, FactCheckResponse, MessageResponse
from core.scraper import is_http_url
from dependencies import client_id, get_fact_check_service, get_image_proxy

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": MessageResponse, "description": "Missing or blank query"},
    403: {"model": MessageResponse, "description": "Upstream credentials rejected"},
    404: {"model": MessageResponse, "description": "No results from any source"},
    429: {"model": MessageResponse, "description": "Local or upstream rate limit exceeded"},
}


@router.post("/api/fact-check", response_model=FactCheckResponse, responses=ERROR_RESPONSES)
async def fact_check(
    body: FactCheckRequest,
    request: Request,
    service: FactCheckService = Depends(get_fact_check_service),
):
    """
    Check a claim against Google Fact Check, falling back to ClaimBuster
    check-worthy claims, optionally with a GNews sidebar
    """
    return await service.run(client_id(request), body.query, include_news=body.include_news)


@router.get("/proxy-image")
async def proxy_image(
    url: str = Query(default=""),
    proxy: ImageProxy = Depends(get_image_proxy),
):
    """Serve a remote image from this origin; falls back to a placeholder image."""
    if not is_http_url(url):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image URL is required")

    content, content_type = await proxy.fetch_or_placeholder(url)
    return Response(content=content, media_type=content_type, headers={"X-Content-Type-Options": "nosniff"})
