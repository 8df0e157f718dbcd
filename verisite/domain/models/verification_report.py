"""Domain model for the final verification report."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .analysis import AnalysisResult
from .source import AggregatedSources, SearchError
from .verification import CrossReferenceResult


@dataclass
class VerificationReport:
    """Merged result of one pipeline invocation."""
    
    analysis: AnalysisResult
    search: AggregatedSources
    cross_reference: CrossReferenceResult
    processing_time_ms: int
    apis_used: List[str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    @property
    def verdict(self) -> str:
        """Overall verdict, falling back to the analysis when cross-referencing degraded."""
        assessment = self.cross_reference.overall_assessment
        if assessment is not None and not assessment.is_degraded:
            return assessment.verdict.value
        return self.analysis.verdict.value
    
    @property
    def confidence(self) -> int:
        """Overall confidence, with the same fallback rule as ``verdict``."""
        assessment = self.cross_reference.overall_assessment
        if assessment is not None and not assessment.is_degraded and assessment.confidence is not None:
            return assessment.confidence
        return self.analysis.confidence
    
    @property
    def search_errors(self) -> List[SearchError]:
        """Provider errors accumulated during aggregation."""
        return self.search.errors
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to the response contract for API callers."""
        source_quality = self.cross_reference.source_quality
        return {
            'success': True,
            'verdict': self.verdict,
            'confidence': self.confidence,
            'explanation': self.analysis.explanation,
            'initial_analysis': {
                'verdict': self.analysis.verdict.value,
                'confidence': self.analysis.confidence,
                'extracted_claims': [claim.model_dump(mode="json") for claim in self.analysis.claims],
                'red_flags': [flag.model_dump(mode="json") for flag in self.analysis.red_flags],
                'context_analysis': self.analysis.context_analysis,
            },
            'source_verification': {
                'total_sources': self.search.total_found,
                'sources_analyzed': len(self.search.sources),
                'verification_results': [
                    result.model_dump(mode="json")
                    for result in self.cross_reference.verification_results
                ],
                'source_quality': source_quality.model_dump(mode="json") if source_quality else None,
            },
            'sources': [source.model_dump(mode="json") for source in self.search.sources],
            'recommendations': self.analysis.recommendations,
            'metadata': {
                'processing_time_ms': self.processing_time_ms,
                'timestamp': self.timestamp.isoformat(),
                'apis_used': list(self.apis_used),
                'search_errors': [error.model_dump() for error in self.search_errors],
            },
        }


def failure_envelope(error: str, message: str, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
    """Build the single error envelope returned when a pipeline invocation fails."""
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        'success': False,
        'error': error,
        'message': message,
        'timestamp': timestamp.isoformat(),
    }
