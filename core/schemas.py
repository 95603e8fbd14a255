from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NormalizedClaim(BaseModel):
    """A fact-check claim in the shape every source adapter produces."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    claim_text: str
    claimant: str = "Unknown"
    date: str = "Unknown"
    publisher: str = "Unknown"
    rating: str = "Unknown"
    source_url: str = "#"
    image_url: str = ""


class NormalizedArticle(BaseModel):
    """A news article from the news search provider."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    title: str
    description: Optional[str] = None
    url: str
    image_url: Optional[str] = None
    published_at: Optional[str] = None
    source: str = "Unknown"


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class SourceResult(BaseModel):
    """
    Outcome of one adapter call.

    ``FAILED`` and ``EMPTY`` both carry no claims, but are kept apart so a
    silent provider failure is never mistaken for "no claims exist".
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    status: FetchStatus
    claims: Tuple[NormalizedClaim, ...] = ()
    error: Optional[str] = None

    @classmethod
    def ok(cls, provider: str, claims: List[NormalizedClaim]) -> "SourceResult":
        if not claims:
            return cls(provider=provider, status=FetchStatus.EMPTY)
        return cls(provider=provider, status=FetchStatus.OK, claims=tuple(claims))

    @classmethod
    def failed(cls, provider: str, error: str) -> "SourceResult":
        return cls(provider=provider, status=FetchStatus.FAILED, error=error)

    @property
    def has_claims(self) -> bool:
        return self.status == FetchStatus.OK


class FactCheckRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    include_news: bool = Field(default=False, alias="includeNews")


class FactCheckResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fact_check_results: List[NormalizedClaim] = Field(default_factory=list, alias="factCheckResults")
    news_results: List[NormalizedArticle] = Field(default_factory=list, alias="newsResults")


class MessageResponse(BaseModel):
    message: str
