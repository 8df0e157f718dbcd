"""Runtime configuration for the verification service."""

import logging
import os
from typing import Dict, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _env_int(key: str, default: int) -> int:
    """Read an integer environment variable.

    Raises:
        ValueError: If the variable is set but not an integer
    """
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer value for {key}: '{value}'")


class VerificationSettings(BaseModel):
    """Explicit configuration injected when the pipeline is built.

    The OpenAI key is mandatory; every search credential is optional and
    simply disables its connector when absent.
    """

    openai_api_key: Optional[str] = Field(None, description="OpenAI API key (mandatory)")
    openai_model: str = Field(default="gpt-4o-mini", description="Chat model used for analysis")
    serper_api_key: Optional[str] = Field(None, description="Serper news/web search key")
    bing_search_api_key: Optional[str] = Field(None, description="Bing Web Search key")
    news_api_key: Optional[str] = Field(None, description="NewsAPI.org key")
    redis_url: Optional[str] = Field(None, description="Redis URL; in-memory cache when unset")
    cache_ttl_seconds: int = Field(default=3600, description="Lifetime of cached search results")
    cache_maxsize: int = Field(default=1000, description="Maximum entries in the in-memory cache")
    search_timeout_ms: int = Field(default=5000, description="Timeout for each search provider call")
    ai_timeout_seconds: float = Field(default=60.0, description="Timeout for each AI provider call")
    max_results: int = Field(default=10, description="Maximum sources kept per aggregation")
    news_backfill_min_results: int = Field(
        default=3,
        description="NewsAPI backfill runs when primary news search yields fewer results",
    )

    @classmethod
    def from_env(cls) -> "VerificationSettings":
        """Create configuration from environment variables."""
        settings = cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            serper_api_key=os.getenv("SERPER_API_KEY") or None,
            bing_search_api_key=os.getenv("BING_SEARCH_API_KEY") or None,
            news_api_key=os.getenv("NEWS_API_KEY") or None,
            redis_url=os.getenv("REDIS_URL") or None,
            cache_ttl_seconds=_env_int("CACHE_TTL_SECONDS", 3600),
            cache_maxsize=_env_int("CACHE_MAXSIZE", 1000),
            search_timeout_ms=_env_int("SEARCH_TIMEOUT_MS", 5000),
            ai_timeout_seconds=float(_env_int("AI_TIMEOUT_SECONDS", 60)),
            max_results=_env_int("MAX_RESULTS", 10),
            news_backfill_min_results=_env_int("NEWS_BACKFILL_MIN_RESULTS", 3),
        )

        if not settings.openai_api_key:
            logger.warning("⚠️ OPENAI_API_KEY not found in environment variables")
        else:
            logger.info(f"✅ OpenAI API key loaded: {len(settings.openai_api_key)} chars")
        for provider, enabled in settings.provider_status().items():
            if provider != "openai" and not enabled:
                logger.info(f"🚫 {provider} disabled (no credential configured)")

        return settings

    @property
    def ai_configured(self) -> bool:
        """Whether the mandatory AI credential is present."""
        return bool(self.openai_api_key)

    def provider_status(self) -> Dict[str, bool]:
        """Enablement of each external provider, keyed by provider id."""
        return {
            "openai": bool(self.openai_api_key),
            "serper": bool(self.serper_api_key),
            "bing": bool(self.bing_search_api_key),
            "newsapi": bool(self.news_api_key),
        }
