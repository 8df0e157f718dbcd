"""Domain models for evidence sources and aggregated search results."""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class SourceType(str, Enum):
    """Kind of provider a source came from."""

    NEWS = "news"
    WEB = "web"
    FACT_CHECK = "fact_check"


class Credibility(str, Enum):
    """Coarse trust tier of a source."""

    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Numeric rank used for sorting (higher is more trusted)."""
        return _CREDIBILITY_RANK[self]


_CREDIBILITY_RANK = {
    Credibility.VERY_HIGH: 4,
    Credibility.HIGH: 3,
    Credibility.MEDIUM: 2,
    Credibility.LOW: 1,
}


class Source(BaseModel):
    """A single piece of evidence returned by a search provider."""

    title: str = Field(default="", description="Title of the article or page")
    url: Optional[str] = Field(None, description="Canonical URL of the source")
    snippet: str = Field(default="", description="Relevant excerpt")
    published_at: Optional[datetime] = Field(None, description="Publication time, if known")
    source_name: str = Field(default="unknown", description="Publisher or domain name")
    type: SourceType = Field(..., description="Provider family the source came from")
    credibility: Optional[Credibility] = Field(
        None,
        description="Credibility tier; assigned by the aggregator when the provider gives none",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "title": "Eiffel Tower height",
                "url": "https://www.britannica.com/topic/Eiffel-Tower-Paris-France",
                "snippet": "The tower is 330 metres tall...",
                "published_at": "2024-03-01T00:00:00Z",
                "source_name": "britannica.com",
                "type": "web",
                "credibility": "medium",
            }
        }

    @field_validator("published_at")
    @classmethod
    def _ensure_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def dedup_key(self) -> Optional[Tuple[str, str]]:
        """Key used to collapse duplicates: url, or title when url is absent.

        Keys are tagged with their kind so a title never matches a url.
        Sources with neither have no key and are never collapsed.
        """
        if self.url:
            return ("url", self.url)
        if self.title:
            return ("title", self.title)
        return None


class SearchError(BaseModel):
    """A provider failure recorded during aggregation."""

    provider: str
    message: str


class SearchOptions(BaseModel):
    """Options controlling which provider families are queried."""

    include_news: bool = True
    include_web: bool = True
    include_fact_check: bool = True
    max_results: int = Field(default=10, ge=1)

    def fingerprint(self) -> str:
        """Stable, key-order independent serialization for cache keys."""
        return json.dumps(self.model_dump(), sort_keys=True, separators=(",", ":"))

    def includes(self, source_type: SourceType) -> bool:
        """Check whether a provider family is enabled by these options."""
        return {
            SourceType.NEWS: self.include_news,
            SourceType.WEB: self.include_web,
            SourceType.FACT_CHECK: self.include_fact_check,
        }[source_type]


class AggregatedSources(BaseModel):
    """Ranked, de-duplicated result of one aggregation."""

    sources: List[Source] = Field(default_factory=list)
    total_found: int = 0
    errors: List[SearchError] = Field(default_factory=list)
    providers_used: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
