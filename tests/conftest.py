"""Test configuration and common fixtures."""

import asyncio
import json
from typing import Any, List, Optional, Sequence

import pytest

from verisite.domain.models.content import ImageContent
from verisite.domain.models.source import SearchError, Source, SourceType
from verisite.domain.ports.ai_provider import AIProvider
from verisite.domain.ports.source_connector import ConnectorResult, SourceConnector
from verisite.infrastructure.cache.memory_cache import MemoryCacheStore
from verisite.infrastructure.config import VerificationSettings


class FakeAIProvider(AIProvider):
    """AI provider returning canned replies in order."""

    def __init__(
        self,
        replies: Optional[Sequence[str]] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        name: str = "ChatGPT",
    ):
        """Initialize fake provider."""
        self._replies = list(replies or [])
        self._error = error
        self._delay = delay
        self._name = name
        self.calls: List[tuple] = []

    async def initialize(self) -> None:
        """Initialize the provider."""
        pass

    async def shutdown(self) -> None:
        """Shutdown the provider."""
        pass

    async def generate(self, prompt: str, image: Optional[ImageContent] = None) -> str:
        """Return the next canned reply."""
        self.calls.append((prompt, image))
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._replies.pop(0) if self._replies else ""

    @property
    def provider_name(self) -> str:
        """Get provider name."""
        return self._name


class FakeConnector(SourceConnector):
    """Connector returning fixed sources or a fixed failure."""

    def __init__(
        self,
        name: str,
        sources: Optional[Sequence[Source]] = None,
        error: Optional[str] = None,
        raises: Optional[Exception] = None,
        delay: float = 0.0,
        source_type: SourceType = SourceType.WEB,
        display_name: Optional[str] = None,
        backfill_for: Optional[str] = None,
        min_primary_results: int = 3,
    ):
        """Initialize fake connector."""
        self.name = name
        self.display_name = display_name or name
        self.source_type = source_type
        self.backfill_for = backfill_for
        self.min_primary_results = min_primary_results
        self._sources = list(sources or [])
        self._error = error
        self._raises = raises
        self._delay = delay
        self.calls: List[str] = []

    async def fetch(
        self,
        query: str,
        limit: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> ConnectorResult:
        """Return the configured outcome."""
        self.calls.append(query)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._raises is not None:
            raise self._raises
        if self._error is not None:
            return ConnectorResult(provider=self.name, error=SearchError(provider=self.name, message=self._error))
        return ConnectorResult(provider=self.name, sources=self._sources)


def make_source(
    title: str,
    url: Optional[str] = None,
    source_type: SourceType = SourceType.WEB,
    **fields: Any,
) -> Source:
    """Build a source with sensible defaults."""
    return Source(title=title, url=url, type=source_type, **fields)


def analysis_reply(**overrides: Any) -> str:
    """Build a claim-extraction reply wrapped in prose, as models tend to."""
    payload = {
        "verdict": "true",
        "confidence": 85,
        "extracted_claims": [
            {
                "claim": "The Eiffel Tower is 330 meters tall",
                "category": "statistics",
                "time_sensitive": False,
                "verifiable": True,
            }
        ],
        "explanation": "The height matches widely published figures.",
        "red_flags": [],
        "recommendations": "Check an encyclopedia.",
        "context_analysis": "Plain factual statement.",
        "search_suggestions": ["Eiffel Tower height"],
    }
    payload.update(overrides)
    return "Here is my analysis:\n```json\n" + json.dumps(payload) + "\n```"


@pytest.fixture
def settings() -> VerificationSettings:
    """Settings with only the mandatory credential configured."""
    return VerificationSettings(openai_api_key="test_key")


@pytest.fixture
def memory_cache() -> MemoryCacheStore:
    """Provide an in-memory cache store."""
    return MemoryCacheStore(maxsize=100)
