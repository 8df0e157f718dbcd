"""Port interface for search provider connectors."""

from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.source import SearchError, Source, SourceType


class ConnectorResult(BaseModel):
    """Outcome of one connector call: sources, or an error record."""

    provider: str
    sources: List[Source] = Field(default_factory=list)
    error: Optional[SearchError] = None

    @property
    def ok(self) -> bool:
        """Whether the provider answered without error."""
        return self.error is None


class SourceConnector(ABC):
    """Abstract interface for search providers.

    Concrete connectors normalize provider-specific payloads into
    ``Source`` objects. ``fetch`` must never raise: provider failures and
    timeouts are reported through ``ConnectorResult.error``.
    """

    #: Unique identifier, used in error records
    name: str = ""
    #: Human-readable provider name reported in ``apis_used``
    display_name: str = ""
    #: Provider family; decides which search option enables the connector
    source_type: SourceType = SourceType.WEB
    #: Name of the primary connector this one backfills, if any
    backfill_for: Optional[str] = None
    #: Backfill runs only when the primary yielded fewer sources than this
    min_primary_results: int = 3
    #: Default number of results requested from the provider
    default_limit: int = 5

    @property
    def is_backfill(self) -> bool:
        """Whether the connector only runs to top up a primary connector."""
        return self.backfill_for is not None

    @abstractmethod
    async def fetch(
        self,
        query: str,
        limit: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> ConnectorResult:
        """Search the provider and return normalized sources.

        Args:
            query: Search query
            limit: Maximum number of results to request
            timeout_ms: Upper bound for the whole call in milliseconds

        Returns:
            Connector result; ``error`` is set when the provider failed
        """
        pass

    async def shutdown(self) -> None:
        """Release network resources held by the connector."""
        return None
