"""Shared HTTP plumbing for search provider connectors."""

import asyncio
import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from ...domain.errors import ProviderError
from ...domain.models.source import Source
from ...domain.ports.source_connector import ConnectorResult, SourceConnector

logger = logging.getLogger(__name__)


class HttpSearchConnector(SourceConnector):
    """Base class for connectors talking to a JSON search API over HTTP.

    Subclasses implement ``_search`` (the provider request) and ``_parse``
    (payload normalization). ``fetch`` bounds the call with a timeout and
    converts every failure into an error record.
    """

    def __init__(
        self,
        api_key: str,
        timeout_ms: int = 5000,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the connector.

        Args:
            api_key: Provider credential
            timeout_ms: Default timeout for each call
            client: Optional shared HTTP client
        """
        self._api_key = api_key
        self._timeout_ms = timeout_ms
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_ms / 1000)
        return self._client

    async def fetch(
        self,
        query: str,
        limit: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> ConnectorResult:
        """Search the provider and return normalized sources; never raises."""
        limit = limit or self.default_limit
        timeout_ms = timeout_ms or self._timeout_ms
        timeout = timeout_ms / 1000

        try:
            payload = await asyncio.wait_for(
                self._search(self._get_client(), query, limit, timeout),
                timeout=timeout,
            )
            sources = self._parse(payload)[:limit]
        except asyncio.TimeoutError:
            error = ProviderError(self.name, f"Timed out after {timeout_ms} ms")
        except httpx.HTTPStatusError as e:
            error = ProviderError(self.name, f"HTTP {e.response.status_code} from provider")
        except Exception as e:
            error = ProviderError(self.name, str(e) or type(e).__name__)
        else:
            return ConnectorResult(provider=self.name, sources=sources)

        logger.error(f"❌ {self.display_name} ({self.name}) error: {error.message}")
        return ConnectorResult(provider=self.name, error=error.to_record())

    @abstractmethod
    async def _search(
        self,
        client: httpx.AsyncClient,
        query: str,
        limit: int,
        timeout: float,
    ) -> Dict[str, Any]:
        """Perform the provider request and return the decoded JSON payload."""
        pass

    @abstractmethod
    def _parse(self, payload: Dict[str, Any]) -> List[Source]:
        """Normalize the provider payload into sources."""
        pass

    async def shutdown(self) -> None:
        """Close the HTTP client if this connector created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
