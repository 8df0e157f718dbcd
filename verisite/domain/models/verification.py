"""Domain models for cross-reference verification results."""

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .common import coerce_confidence, coerce_enum
from .source import Source


class VerificationStatus(str, Enum):
    """Possible outcomes for a single claim."""

    VERIFIED_TRUE = "verified_true"  # Sources confirm the claim
    VERIFIED_FALSE = "verified_false"  # Sources refute the claim
    PARTIALLY_TRUE = "partially_true"  # Some aspects hold, others do not
    CONTRADICTED = "contradicted"  # Credible sources disagree with each other
    NO_EVIDENCE = "no_evidence"  # Nothing relevant among the sources


class ConsensusLevel(str, Enum):
    """How strongly the sources agree."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
    NONE = "none"


class AssessmentVerdict(str, Enum):
    """Overall verdict of the cross-reference stage."""

    MOSTLY_TRUE = "mostly_true"
    MOSTLY_FALSE = "mostly_false"
    MIXED = "mixed"
    INSUFFICIENT_EVIDENCE = "insufficient_evidence"
    # Degraded markers, never produced by the reasoning capability itself
    INSUFFICIENT_DATA = "insufficient_data"
    ANALYSIS_ERROR = "analysis_error"


DEGRADED_VERDICTS = frozenset({AssessmentVerdict.INSUFFICIENT_DATA, AssessmentVerdict.ANALYSIS_ERROR})


class VerificationResult(BaseModel):
    """Verification outcome for one claim."""

    claim: str = Field(
        ...,
        validation_alias=AliasChoices("claim", "text", "claim_text"),
        description="The claim that was verified",
    )
    status: VerificationStatus = Field(..., description="Verification status")
    confidence: int = Field(default=0, description="Confidence in the result (0-100)")
    supporting_sources: List[Source] = Field(default_factory=list)
    contradicting_sources: List[Source] = Field(default_factory=list)
    explanation: str = Field(default="", description="Explanation of the verification result")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "claim": "The Eiffel Tower is 330 meters tall.",
                "status": "verified_true",
                "confidence": 92,
                "supporting_sources": [],
                "contradicting_sources": [],
                "explanation": "Encyclopedic and news sources agree on a height of 330 m including antennas.",
            }
        }

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> VerificationStatus:
        return coerce_enum(VerificationStatus, value, VerificationStatus.NO_EVIDENCE)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> int:
        return coerce_confidence(value)

    @field_validator("explanation", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class OverallAssessment(BaseModel):
    """Summary verdict across all claims."""

    verdict: AssessmentVerdict
    confidence: Optional[int] = None
    summary: Optional[str] = None

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @field_validator("verdict", mode="before")
    @classmethod
    def _coerce_verdict(cls, value: Any) -> AssessmentVerdict:
        return coerce_enum(AssessmentVerdict, value, AssessmentVerdict.INSUFFICIENT_EVIDENCE)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> Optional[int]:
        return coerce_confidence(value, default=None)

    @property
    def is_degraded(self) -> bool:
        """True when the assessment only marks a stage shortfall."""
        return self.verdict in DEGRADED_VERDICTS


class SourceQuality(BaseModel):
    """Quality summary of the evidence set."""

    total_sources: int = 0
    high_credibility_sources: int = 0
    recent_sources: int = 0
    consensus_level: ConsensusLevel = ConsensusLevel.NONE

    @field_validator("consensus_level", mode="before")
    @classmethod
    def _coerce_consensus(cls, value: Any) -> ConsensusLevel:
        return coerce_enum(ConsensusLevel, value, ConsensusLevel.NONE)


class CrossReferenceResult(BaseModel):
    """Output of the cross-reference stage."""

    verification_results: List[VerificationResult] = Field(default_factory=list)
    overall_assessment: OverallAssessment
    source_quality: Optional[SourceQuality] = None

    @classmethod
    def insufficient_data(cls, source_quality: Optional[SourceQuality] = None) -> "CrossReferenceResult":
        """Result used when there are no claims or no sources to compare."""
        return cls(
            verification_results=[],
            overall_assessment=OverallAssessment(verdict=AssessmentVerdict.INSUFFICIENT_DATA),
            source_quality=source_quality,
        )

    @classmethod
    def analysis_error(
        cls,
        summary: str,
        source_quality: Optional[SourceQuality] = None,
    ) -> "CrossReferenceResult":
        """Result used when the reasoning capability failed or was unparseable."""
        return cls(
            verification_results=[],
            overall_assessment=OverallAssessment(
                verdict=AssessmentVerdict.ANALYSIS_ERROR,
                confidence=0,
                summary=summary,
            ),
            source_quality=source_quality,
        )
