"""Tests for the AI provider factory."""

import pytest

from conftest import FakeAIProvider
from verisite.infrastructure.ai.chatgpt_adapter import ChatGPTAdapter
from verisite.infrastructure.ai.factory import AIProviderFactory
from verisite.infrastructure.config import VerificationSettings


@pytest.mark.asyncio
async def test_create_chatgpt_provider():
    """Test the default provider is built from settings."""
    factory = AIProviderFactory()
    settings = VerificationSettings(openai_api_key="test_key", openai_model="gpt-4o", ai_timeout_seconds=12)
    provider = await factory.create_provider("chatgpt", settings)

    assert isinstance(provider, ChatGPTAdapter)
    assert provider._config.model == "gpt-4o"
    assert provider._config.timeout == 12
    assert provider.is_available
    assert factory.available_providers == {"chatgpt": True}
    await factory.shutdown()
    assert factory.available_providers == {"chatgpt": False}


@pytest.mark.asyncio
async def test_instances_are_reused(settings):
    """Test repeated creation returns the same instance."""
    factory = AIProviderFactory()
    factory.register_provider("fake", lambda s: FakeAIProvider())
    first = await factory.create_provider("fake", settings)
    assert await factory.create_provider("fake", settings) is first


@pytest.mark.asyncio
async def test_unknown_provider(settings):
    """Test unknown providers are rejected."""
    with pytest.raises(ValueError):
        await AIProviderFactory().create_provider("unknown", settings)
