"""Domain models for the initial content analysis."""

from enum import Enum
from typing import Any, List

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .claim import Claim
from .common import coerce_confidence, coerce_enum, validate_items

FALLBACK_RECOMMENDATIONS = "Manual verification recommended"
FALLBACK_CONTEXT_ANALYSIS = "Analysis could not be properly parsed"


class AnalysisVerdict(str, Enum):
    """Verdict of the initial analysis."""

    TRUE = "true"
    LIKELY_FAKE = "likely_fake"
    MISLEADING = "misleading"
    UNVERIFIABLE = "unverifiable"


class Severity(str, Enum):
    """Severity of a red flag."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RedFlag(BaseModel):
    """A suspicious element spotted in the content."""

    description: str = Field(..., validation_alias=AliasChoices("description", "flag"))
    severity: Severity = Severity.MEDIUM

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def _from_plain_text(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"description": value}
        return value

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> Severity:
        return coerce_enum(Severity, value, Severity.MEDIUM)


class AnalysisResult(BaseModel):
    """Result of claim extraction. Always fully populated."""

    verdict: AnalysisVerdict = AnalysisVerdict.UNVERIFIABLE
    confidence: int = 50
    claims: List[Claim] = Field(
        default_factory=list,
        validation_alias=AliasChoices("claims", "extracted_claims"),
    )
    red_flags: List[RedFlag] = Field(default_factory=list)
    explanation: str = ""
    recommendations: str = ""
    context_analysis: str = ""
    search_suggestions: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        frozen = True
        populate_by_name = True

    @field_validator("verdict", mode="before")
    @classmethod
    def _coerce_verdict(cls, value: Any) -> AnalysisVerdict:
        return coerce_enum(AnalysisVerdict, value, AnalysisVerdict.UNVERIFIABLE)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> int:
        return coerce_confidence(value, default=50)

    @field_validator("claims", mode="before")
    @classmethod
    def _valid_claims(cls, value: Any) -> List[Claim]:
        return validate_items(value, Claim.model_validate, "claim")

    @field_validator("red_flags", mode="before")
    @classmethod
    def _valid_red_flags(cls, value: Any) -> List[RedFlag]:
        return validate_items(value, RedFlag.model_validate, "red flag")

    @field_validator("explanation", "recommendations", "context_analysis", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("search_suggestions", mode="before")
    @classmethod
    def _split_suggestions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @classmethod
    def fallback(cls, raw_text: str) -> "AnalysisResult":
        """Deterministic result used when the capability output is unusable."""
        return cls(
            verdict=AnalysisVerdict.UNVERIFIABLE,
            confidence=50,
            claims=[],
            red_flags=[],
            explanation=raw_text,
            recommendations=FALLBACK_RECOMMENDATIONS,
            context_analysis=FALLBACK_CONTEXT_ANALYSIS,
            search_suggestions=[],
        )
