"""Pipeline coordinating analysis, source aggregation and cross-referencing."""

import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..errors import ConfigurationError
from ..models.analysis import AnalysisResult
from ..models.content import ImageContent
from ..models.source import SearchOptions
from ..models.verification_report import VerificationReport, failure_envelope
from .content_analyzer import ContentAnalyzer
from .cross_reference_service import CrossReferenceService
from .source_aggregator import SourceAggregator

logger = logging.getLogger(__name__)

IMAGE_FALLBACK_QUERY = "fact check verification"
TEXT_QUERY_FALLBACK_LENGTH = 100


class PipelineStage(str, Enum):
    """Stages of one verification run."""

    RECEIVED = "received"
    ANALYZING = "analyzing"
    SEARCHING = "searching"
    CROSS_REFERENCING = "cross_referencing"
    ASSEMBLING = "assembling"
    DONE = "done"
    FAILED = "failed"


def build_search_query(analysis: AnalysisResult, fallback: str) -> str:
    """Pick the aggregation query: suggestions, else claim texts, else ``fallback``."""
    suggestions = " ".join(s.strip() for s in analysis.search_suggestions if s and s.strip())
    if suggestions:
        return suggestions
    claims = " ".join(claim.text for claim in analysis.claims if claim.text)
    if claims:
        return claims
    return fallback


class VerificationPipeline:
    """Runs Analyzer → Aggregator → Cross-Reference → report assembly.

    Each stage applies its own partial-failure policy, so a run only fails
    on a missing mandatory credential (checked before anything else) or on
    an unexpected exception.
    """

    def __init__(
        self,
        analyzer: ContentAnalyzer,
        aggregator: SourceAggregator,
        cross_reference: CrossReferenceService,
        ai_provider_name: str,
        ai_configured: bool = True,
        search_options: Optional[SearchOptions] = None,
    ):
        """Initialize the pipeline.

        Args:
            analyzer: Claim extraction stage
            aggregator: Source aggregation stage
            cross_reference: Cross-reference stage
            ai_provider_name: Display name of the mandatory AI provider
            ai_configured: Whether the mandatory AI credential is present
            search_options: Options used for every aggregation
        """
        self._analyzer = analyzer
        self._aggregator = aggregator
        self._cross_reference = cross_reference
        self._ai_provider_name = ai_provider_name
        self._ai_configured = ai_configured
        self._search_options = search_options or SearchOptions()
        logger.info("🔧 VerificationPipeline initialized")

    async def verify(self, content: Union[str, ImageContent]) -> VerificationReport:
        """Verify text or an image and return the merged report.

        Args:
            content: Text, or a pre-normalized image

        Returns:
            Verification report

        Raises:
            ConfigurationError: If the mandatory AI credential is missing
            AnalysisError: If the claim-extraction provider is unreachable
        """
        started = time.perf_counter()
        is_image = isinstance(content, ImageContent)
        stage = PipelineStage.RECEIVED

        try:
            if not self._ai_configured:
                raise ConfigurationError(f"{self._ai_provider_name} API key not configured")

            stage = PipelineStage.ANALYZING
            analysis = await self._analyzer.analyze(content, is_image=is_image)

            stage = PipelineStage.SEARCHING
            fallback_query = IMAGE_FALLBACK_QUERY if is_image else content[:TEXT_QUERY_FALLBACK_LENGTH]
            query = build_search_query(analysis, fallback_query)
            logger.info(f"🔍 Searching for verification sources: {query[:100]}")
            search = await self._aggregator.aggregate(query, self._search_options)

            stage = PipelineStage.CROSS_REFERENCING
            cross_reference = await self._cross_reference.cross_reference(analysis.claims, search.sources)

            stage = PipelineStage.ASSEMBLING
            report = VerificationReport(
                analysis=analysis,
                search=search,
                cross_reference=cross_reference,
                processing_time_ms=int((time.perf_counter() - started) * 1000),
                apis_used=self._apis_used(search.providers_used),
            )
        except Exception:
            logger.error(f"❌ Verification {PipelineStage.FAILED.value} during stage '{stage.value}'")
            raise

        stage = PipelineStage.DONE
        logger.info(f"✅ Verification {stage.value} in {report.processing_time_ms}ms: {report.verdict}")
        return report

    async def verify_text(self, text: str) -> Dict[str, Any]:
        """Verify text and return the caller-facing response."""
        logger.info("📝 Processing text verification...")
        return await self._respond(text, "Failed to verify text")

    async def verify_image(self, image: ImageContent) -> Dict[str, Any]:
        """Verify a pre-normalized image and return the caller-facing response."""
        logger.info("🖼️ Processing image verification...")
        return await self._respond(image, "Failed to verify image")

    async def _respond(self, content: Union[str, ImageContent], failure: str) -> Dict[str, Any]:
        try:
            report = await self.verify(content)
        except ConfigurationError as e:
            logger.error(f"❌ Configuration error: {e}")
            return failure_envelope(failure, str(e))
        except Exception as e:
            logger.error(f"❌ {failure}: {type(e).__name__}: {e}", exc_info=True)
            return failure_envelope(failure, str(e))
        return report.to_dict()

    def _apis_used(self, providers_used: List[str]) -> List[str]:
        apis = [self._ai_provider_name]
        for name in providers_used:
            if name not in apis:
                apis.append(name)
        return apis
