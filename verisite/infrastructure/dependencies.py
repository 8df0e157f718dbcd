"""Dependency injection configuration for hexagonal architecture."""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ..domain.models.source import SearchOptions
from ..domain.ports.ai_provider import AIProvider
from ..domain.ports.cache_store import CacheStore
from ..domain.ports.source_connector import SourceConnector
from ..domain.services.content_analyzer import ContentAnalyzer
from ..domain.services.cross_reference_service import CrossReferenceService
from ..domain.services.source_aggregator import SourceAggregator
from ..domain.services.verification_pipeline import VerificationPipeline
from .ai.factory import AIProviderFactory
from .cache.factory import create_cache_store
from .config import VerificationSettings
from .search.factory import ConnectorFactory

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Building is asynchronous because the AI provider needs an async
    initialization step; ``initialize`` is idempotent.
    """

    def __init__(
        self,
        settings: Optional[VerificationSettings] = None,
        ai_factory: Optional[AIProviderFactory] = None,
        connector_factory: Optional[ConnectorFactory] = None,
        cache: Optional[CacheStore] = None,
    ):
        """Initialize service container.

        Args:
            settings: Service configuration, read from the environment when omitted
            ai_factory: Factory for the AI provider
            connector_factory: Factory for search connectors
            cache: Cache store, chosen from settings when omitted
        """
        if settings is None:
            load_dotenv()
            logger.info("📁 Environment variables loaded from .env file via python-dotenv")
            settings = VerificationSettings.from_env()
        self.settings = settings
        self._ai_factory = ai_factory or AIProviderFactory()
        self._connector_factory = connector_factory or ConnectorFactory()
        self._cache = cache
        self._services: Dict[str, Any] = {}

    @property
    def is_initialized(self) -> bool:
        """Whether services have been built."""
        return bool(self._services)

    async def initialize(self) -> None:
        """Setup all services and their dependencies."""
        if self._services:
            return
        logger.info("🔧 Setting up service container...")

        logger.info("🤖 Setting up AI provider...")
        ai_provider: AIProvider = await self._ai_factory.create_provider("chatgpt", self.settings)
        logger.info(f"✅ AI provider ready: {ai_provider.provider_name}")

        connectors = self._connector_factory.create_connectors(self.settings)
        cache = self._cache or create_cache_store(self.settings)

        aggregator = SourceAggregator(
            connectors,
            cache=cache,
            cache_ttl_seconds=self.settings.cache_ttl_seconds,
            timeout_ms=self.settings.search_timeout_ms,
        )
        analyzer = ContentAnalyzer(ai_provider, timeout=self.settings.ai_timeout_seconds)
        cross_reference = CrossReferenceService(ai_provider, timeout=self.settings.ai_timeout_seconds)
        pipeline = VerificationPipeline(
            analyzer,
            aggregator,
            cross_reference,
            ai_provider_name=ai_provider.provider_name,
            ai_configured=self.settings.ai_configured,
            search_options=SearchOptions(max_results=self.settings.max_results),
        )

        self._services = {
            'ai_provider': ai_provider,
            'connectors': connectors,
            'cache': cache,
            'aggregator': aggregator,
            'analyzer': analyzer,
            'cross_reference': cross_reference,
            'pipeline': pipeline,
        }
        logger.info("✅ Service container setup completed")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_pipeline(self) -> VerificationPipeline:
        """Get the verification pipeline."""
        return self.get('pipeline')

    def get_cache(self) -> CacheStore:
        """Get the cache store."""
        return self.get('cache')

    def get_connectors(self) -> List[SourceConnector]:
        """Get the enabled search connectors."""
        return self.get('connectors')

    @property
    def ai_providers(self) -> Dict[str, bool]:
        """Registered AI providers and whether each one is running."""
        return self._ai_factory.available_providers

    async def shutdown(self) -> None:
        """Release provider clients and the cache."""
        if not self._services:
            return
        logger.info("🛑 Shutting down service container...")
        await self._connector_factory.shutdown_all()
        await self._ai_factory.shutdown()
        await self._services['cache'].close()
        self._services = {}


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance.

    Returns:
        Service container instance
    """
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
async def get_container() -> ServiceContainer:
    """FastAPI dependency for the initialized service container."""
    container = get_service_container()
    await container.initialize()
    return container


async def get_verification_pipeline() -> VerificationPipeline:
    """FastAPI dependency for the verification pipeline."""
    container = await get_container()
    return container.get_pipeline()
