"""Domain model for factual claims."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .common import coerce_enum


class ClaimCategory(str, Enum):
    """Broad category of a factual claim."""

    HISTORICAL = "historical"
    SCIENTIFIC = "scientific"
    CURRENT_EVENTS = "current_events"
    STATISTICS = "statistics"
    OTHER = "other"


class Claim(BaseModel):
    """An individually verifiable factual statement extracted from content."""
    
    text: str = Field(
        ...,
        validation_alias=AliasChoices("text", "claim"),
        description="The actual claim text to be verified",
    )
    category: ClaimCategory = Field(default=ClaimCategory.OTHER, description="Claim category")
    time_sensitive: bool = Field(default=False, description="Whether the claim depends on recent events")
    verifiable: bool = Field(default=True, description="Whether the claim can be checked against sources")
    
    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "text": "The Eiffel Tower is 330 meters tall.",
                "category": "statistics",
                "time_sensitive": False,
                "verifiable": True,
            }
        }

    @model_validator(mode="before")
    @classmethod
    def _from_plain_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"text": value}
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> ClaimCategory:
        return coerce_enum(ClaimCategory, value, ClaimCategory.OTHER)
