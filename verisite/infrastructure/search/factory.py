"""Factory for creating search provider connectors."""

import logging
from typing import Callable, Dict, List, Optional

import httpx

from ...domain.ports.source_connector import SourceConnector
from ..config import VerificationSettings
from .bing_adapter import BingFactCheckConnector
from .newsapi_adapter import NewsAPIConnector
from .serper_adapter import SerperNewsConnector, SerperWebConnector

logger = logging.getLogger(__name__)

ConnectorBuilder = Callable[[VerificationSettings, Optional[httpx.AsyncClient]], Optional[SourceConnector]]


def _build_serper_news(settings: VerificationSettings, client: Optional[httpx.AsyncClient]):
    if not settings.serper_api_key:
        return None
    return SerperNewsConnector(settings.serper_api_key, settings.search_timeout_ms, client)


def _build_serper_web(settings: VerificationSettings, client: Optional[httpx.AsyncClient]):
    if not settings.serper_api_key:
        return None
    return SerperWebConnector(settings.serper_api_key, settings.search_timeout_ms, client)


def _build_bing(settings: VerificationSettings, client: Optional[httpx.AsyncClient]):
    if not settings.bing_search_api_key:
        return None
    return BingFactCheckConnector(settings.bing_search_api_key, settings.search_timeout_ms, client)


def _build_newsapi(settings: VerificationSettings, client: Optional[httpx.AsyncClient]):
    if not settings.news_api_key:
        return None
    return NewsAPIConnector(
        settings.news_api_key,
        settings.search_timeout_ms,
        client,
        min_primary_results=settings.news_backfill_min_results,
    )


class ConnectorFactory:
    """Factory for creating search connectors.

    Maintains a registry of connector builders. A builder returns None when
    its credential is not configured, which disables that connector.
    """

    def __init__(self):
        """Initialize the factory."""
        self._builders: Dict[str, ConnectorBuilder] = {}
        self._active: List[SourceConnector] = []

        # Register default connectors
        self.register_connector("serper_news", _build_serper_news)
        self.register_connector("serper_web", _build_serper_web)
        self.register_connector("bing_search", _build_bing)
        self.register_connector("newsapi", _build_newsapi)

    def register_connector(self, name: str, builder: ConnectorBuilder) -> None:
        """Register a connector builder.

        Args:
            name: Unique connector identifier
            builder: Callable creating the connector from settings

        Raises:
            ValueError: If the name is already registered
        """
        if name in self._builders:
            raise ValueError(f"Connector {name} already registered")
        self._builders[name] = builder

    def create_connectors(
        self,
        settings: VerificationSettings,
        client: Optional[httpx.AsyncClient] = None,
    ) -> List[SourceConnector]:
        """Create every connector whose credential is configured.

        Args:
            settings: Service configuration
            client: Optional HTTP client shared by all connectors

        Returns:
            Enabled connectors, in registration order
        """
        connectors = []
        for name, builder in self._builders.items():
            connector = builder(settings, client)
            if connector is None:
                logger.info(f"🚫 Connector {name} disabled")
                continue
            connectors.append(connector)
        logger.info(f"✅ {len(connectors)} search connectors enabled")
        self._active.extend(connectors)
        return connectors

    @property
    def registered_connectors(self) -> List[str]:
        """Names of every registered connector."""
        return list(self._builders)

    async def shutdown_all(self) -> None:
        """Shutdown every connector created by this factory."""
        for connector in self._active:
            await connector.shutdown()
        self._active.clear()
