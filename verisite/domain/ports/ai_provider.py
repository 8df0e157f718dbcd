"""Protocol for AI providers."""

from typing import Optional, Protocol

from ..models.content import ImageContent


class AIProvider(Protocol):
    """Protocol defining the interface for AI providers.

    Both the claim-extraction and the cross-reference capabilities are
    served through ``generate``: the provider receives a fixed
    structured-output instruction and returns free-form text that is
    expected, but not guaranteed, to embed a JSON object.
    """
    
    async def initialize(self) -> None:
        """Initialize the AI provider."""
        ...
        
    async def shutdown(self) -> None:
        """Clean up resources."""
        ...
        
    async def generate(
        self,
        prompt: str,
        image: Optional[ImageContent] = None,
    ) -> str:
        """Send a prompt (and optionally an image) and return the raw text reply."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the display name of the provider."""
        ...
