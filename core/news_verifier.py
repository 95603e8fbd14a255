"""
News Verifier Module
Scores free text, or the text of a linked article, for check-worthiness
using ClaimBuster
"""

import logging
from typing import Dict, List

import httpx

from core.errors import PageFetchError
from core.scraper import extract_text, fetch_html, is_http_url
from core.source_adapters import ClaimBusterAdapter

logger = logging.getLogger(__name__)

# ClaimBuster rejects very long payloads; articles are truncated to this size
MAX_TEXT_LENGTH = 5000


class InputFetchError(ValueError):
    pass


async def resolve_input_text(client: httpx.AsyncClient, user_input: str) -> str:
    """
    Return the text to score: the input itself, or the readable text of the page it links to

    Raises:
        InputFetchError: If a URL was given but no text could be extracted from it
    """
    user_input = user_input.strip()
    if not is_http_url(user_input):
        return user_input

    try:
        html = await fetch_html(client, user_input)
    except PageFetchError as e:
        logger.error(f"Failed to fetch {user_input}: {str(e)}")
        raise InputFetchError("Failed to fetch or parse URL") from e

    text = extract_text(html)
    if not text:
        raise InputFetchError("Failed to fetch or parse URL")
    return text[:MAX_TEXT_LENGTH]


async def verify_news(client: httpx.AsyncClient, scorer: ClaimBusterAdapter, user_input: str) -> Dict:
    """
    Score the check-worthiness of a claim or article

    Args:
        client: httpx AsyncClient instance
        scorer: ClaimBuster adapter
        user_input: Free text or an http(s) URL

    Returns:
        Dict with the overall score (highest sentence score), the scored text
        and the per-sentence breakdown

    Example:
        >>> result = await verify_news(client, scorer, "The moon is made of cheese.")
        >>> result['score']
        0.42
    """
    text = await resolve_input_text(client, user_input)
    scored = await scorer.score_text(text)

    sentences: List[Dict] = [{"text": sentence, "score": round(score, 4)} for sentence, score in scored]
    overall = max((score for _, score in scored), default=0.0)

    logger.info(f"Verified input ({len(text)} chars): {len(sentences)} sentences, top score {overall:.2f}")
    return {"score": round(overall, 4), "text": text, "sentences": sentences}
