"""ChatGPT implementation of the AI provider interface."""

from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from ...domain.models.content import ImageContent
from ...domain.ports.ai_provider import AIProvider


class ChatGPTConfig(BaseModel):
    """Configuration for ChatGPT adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Model to use (must accept image input)")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=2000, description="Maximum tokens per response")
    timeout: float = Field(default=60.0, description="API timeout in seconds")
    max_retries: int = Field(default=1, description="Client-side retries on transient errors")


class ChatGPTAdapter(AIProvider):
    """ChatGPT implementation of the AI provider interface."""

    def __init__(
        self,
        config: Optional[ChatGPTConfig] = None,
    ):
        """Initialize the adapter."""
        self._config = config or ChatGPTConfig(api_key="")
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Create the OpenAI client."""
        try:
            if self._client is None:
                self._client = AsyncOpenAI(
                    api_key=self._config.api_key,
                    timeout=self._config.timeout,
                    max_retries=self._config.max_retries,
                )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._client = None
            raise ConnectionError(f"Failed to initialize ChatGPT provider: {e}")

    @staticmethod
    def build_messages(prompt: str, image: Optional[ImageContent] = None) -> List[Dict[str, Any]]:
        """Build chat messages, attaching the image as an inline data URL."""
        if image is None:
            return [{"role": "user", "content": prompt}]
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image.data_url}},
                ],
            }
        ]

    async def generate(
        self,
        prompt: str,
        image: Optional[ImageContent] = None,
    ) -> str:
        """Send the prompt to the chat model and return the raw reply text."""
        if not self._client:
            raise RuntimeError("Provider not initialized")

        response = await self._client.chat.completions.create(
            model=self._config.model,
            messages=self.build_messages(prompt, image),
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return "ChatGPT"

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None
