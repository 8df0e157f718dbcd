"""Factory for creating and managing AI providers."""

from typing import Callable, Dict

from ...domain.ports.ai_provider import AIProvider
from ..config import VerificationSettings
from .chatgpt_adapter import ChatGPTAdapter, ChatGPTConfig


def _build_chatgpt(settings: VerificationSettings) -> AIProvider:
    config = ChatGPTConfig(
        api_key=settings.openai_api_key or "",
        model=settings.openai_model,
        timeout=settings.ai_timeout_seconds,
    )
    return ChatGPTAdapter(config=config)


class AIProviderFactory:
    """Factory for creating and managing AI providers."""

    def __init__(self):
        """Initialize the factory."""
        self._builders: Dict[str, Callable[[VerificationSettings], AIProvider]] = {}
        self._instances: Dict[str, AIProvider] = {}
        
        # Register default providers
        self.register_provider("chatgpt", _build_chatgpt)

    def register_provider(
        self,
        name: str,
        builder: Callable[[VerificationSettings], AIProvider],
    ) -> None:
        """Register a new AI provider.
        
        Args:
            name: Provider name
            builder: Callable creating the provider from settings
        """
        self._builders[name] = builder

    async def create_provider(
        self,
        name: str,
        settings: VerificationSettings,
    ) -> AIProvider:
        """Create and initialize a provider instance.
        
        Args:
            name: Provider name
            settings: Service configuration
            
        Returns:
            Initialized provider instance
            
        Raises:
            ValueError: If provider not found
        """
        if name not in self._builders:
            raise ValueError(f"Provider '{name}' not found")
        
        if name not in self._instances:
            provider = self._builders[name](settings)
            await provider.initialize()
            self._instances[name] = provider
            
        return self._instances[name]

    @property
    def available_providers(self) -> Dict[str, bool]:
        """Get dictionary of registered providers and their availability."""
        return {
            name: name in self._instances
            for name in self._builders
        }

    async def shutdown(self) -> None:
        """Shutdown all provider instances."""
        for provider in self._instances.values():
            await provider.shutdown()
        self._instances.clear()
