"""
Error taxonomy for the fact-check service.

Every error carries the HTTP status and the client-facing message; the
exception handler in ``main.py`` renders them as ``{"message": ...}``.
"""

from typing import Optional


class FactLensError(Exception):
    status_code = 500
    message = "An unexpected error occurred. Please try again later."

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class ClientInputError(FactLensError):
    status_code = 400
    message = "Please provide a query to fact-check"


class NoResultsFound(FactLensError):
    status_code = 404
    message = "No fact-checks, check-worthy claims or news articles found for this query"


class LocalRateLimitExceeded(FactLensError):
    status_code = 429

    def __init__(self, retry_after_seconds: int):
        self.retry_after_seconds = retry_after_seconds
        minutes = max(1, -(-retry_after_seconds // 60))
        super().__init__(
            f"Too many requests. Please try again in {retry_after_seconds} seconds "
            f"(about {minutes} minute{'s' if minutes != 1 else ''})."
        )


class UpstreamError(FactLensError):
    """Failure reported by a third-party provider."""

    status_code = 502
    message = "An upstream provider failed"

    def __init__(self, provider: str, http_status: Optional[int] = None, message: Optional[str] = None):
        self.provider = provider
        self.http_status = http_status
        super().__init__(message)


class UpstreamRateLimited(UpstreamError):
    status_code = 429

    def __init__(self, provider: str, http_status: Optional[int] = 429):
        super().__init__(
            provider,
            http_status,
            f"{provider} API rate limit exceeded. Please try again later.",
        )


class UpstreamUnauthorized(UpstreamError):
    status_code = 403

    def __init__(self, provider: str, http_status: Optional[int] = 403):
        super().__init__(
            provider,
            http_status,
            f"Invalid {provider} API key. Please contact the administrator.",
        )


class ImageFetchError(FactLensError):
    status_code = 500
    message = "Failed to fetch image"


class PageFetchError(Exception):
    """Raised by the scraper when a page cannot be fetched or parsed."""
