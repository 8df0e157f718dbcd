"""Domain models for content submitted for verification."""

from pydantic import BaseModel, Field


class ImageContent(BaseModel):
    """A pre-normalized image: format plus base64-encoded bytes.

    Decoding and resizing happen before the pipeline; this model only
    carries the result.
    """

    format: str = Field(default="jpeg", description="Image format, e.g. 'jpeg' or 'png'")
    data: str = Field(..., min_length=1, description="Base64-encoded image bytes")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def mime_type(self) -> str:
        """MIME type derived from the format."""
        fmt = self.format.lower().lstrip(".")
        if fmt == "jpg":
            fmt = "jpeg"
        return f"image/{fmt}"

    @property
    def data_url(self) -> str:
        """Inline ``data:`` URL for multimodal model requests."""
        return f"data:{self.mime_type};base64,{self.data}"

