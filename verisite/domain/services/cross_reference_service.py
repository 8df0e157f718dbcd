"""Service for cross-referencing extracted claims against gathered sources."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..models.claim import Claim
from ..models.common import coerce_enum, validate_items
from ..models.source import Credibility, Source, SourceType
from ..models.verification import (
    AssessmentVerdict,
    ConsensusLevel,
    CrossReferenceResult,
    OverallAssessment,
    SourceQuality,
    VerificationResult,
    VerificationStatus,
)
from ..ports.ai_provider import AIProvider
from .credibility import credibility_for_url, extract_domain
from .json_decoder import decode_json_object

logger = logging.getLogger(__name__)

MAX_SOURCES_FOR_REVIEW = 8
RECENT_SOURCE_DAYS = 30
DEFAULT_TIMEOUT_SECONDS = 60.0

CROSS_REFERENCE_PROMPT = """
As a fact-checking expert, cross-reference these claims with the provided sources:

CLAIMS TO VERIFY:
{claims}

AVAILABLE SOURCES:
{sources}

For each claim, analyze the sources and provide verification results in this JSON format:
{{
  "verification_results": [
    {{
      "claim": "exact claim text",
      "status": "verified_true|verified_false|partially_true|contradicted|no_evidence",
      "confidence": 0-100,
      "supporting_sources": [
        {{
          "title": "source title",
          "url": "source url",
          "relevance": "high|medium|low",
          "credibility": "very_high|high|medium|low"
        }}
      ],
      "contradicting_sources": [],
      "explanation": "detailed explanation of verification"
    }}
  ],
  "overall_assessment": {{
    "verdict": "mostly_true|mostly_false|mixed|insufficient_evidence",
    "confidence": 0-100,
    "summary": "brief summary of findings"
  }},
  "source_quality_assessment": {{
    "total_sources": number,
    "high_credibility_sources": number,
    "recent_sources": number,
    "consensus_level": "strong|moderate|weak|none"
  }}
}}

Focus on:
1. Matching claims to relevant sources
2. Assessing source credibility and relevance
3. Identifying consensus or contradictions
4. Providing evidence-based conclusions
"""

_AGREEING = {VerificationStatus.VERIFIED_TRUE, VerificationStatus.VERIFIED_FALSE}


def summarize_source_quality(
    sources: Sequence[Source],
    results: Sequence[VerificationResult],
    now: Optional[datetime] = None,
) -> SourceQuality:
    """Compute a source quality summary without the reasoning capability."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=RECENT_SOURCE_DAYS)
    return SourceQuality(
        total_sources=len(sources),
        high_credibility_sources=sum(
            1 for s in sources if s.credibility in (Credibility.VERY_HIGH, Credibility.HIGH)
        ),
        recent_sources=sum(1 for s in sources if s.published_at and s.published_at >= cutoff),
        consensus_level=consensus_from_results(results),
    )


def consensus_from_results(results: Sequence[VerificationResult]) -> ConsensusLevel:
    """Estimate how strongly the evidence agrees, from per-claim statuses."""
    if not results:
        return ConsensusLevel.NONE
    settled = sum(1 for r in results if r.status in _AGREEING)
    contradicted = any(r.status == VerificationStatus.CONTRADICTED for r in results)
    ratio = settled / len(results)
    if ratio >= 0.75 and not contradicted:
        return ConsensusLevel.STRONG
    if ratio >= 0.5:
        return ConsensusLevel.MODERATE
    if settled or any(r.status == VerificationStatus.PARTIALLY_TRUE for r in results):
        return ConsensusLevel.WEAK
    return ConsensusLevel.NONE


def derive_assessment(results: Sequence[VerificationResult]) -> OverallAssessment:
    """Derive an overall verdict when the capability did not provide one."""
    with_evidence = [r for r in results if r.status != VerificationStatus.NO_EVIDENCE]
    if not with_evidence:
        return OverallAssessment(verdict=AssessmentVerdict.INSUFFICIENT_EVIDENCE, confidence=0)

    true_count = sum(1 for r in with_evidence if r.status == VerificationStatus.VERIFIED_TRUE)
    false_count = sum(
        1 for r in with_evidence
        if r.status in (VerificationStatus.VERIFIED_FALSE, VerificationStatus.CONTRADICTED)
    )
    confidence = round(sum(r.confidence for r in with_evidence) / len(with_evidence))

    if true_count * 3 >= len(with_evidence) * 2:
        verdict = AssessmentVerdict.MOSTLY_TRUE
    elif false_count * 3 >= len(with_evidence) * 2:
        verdict = AssessmentVerdict.MOSTLY_FALSE
    else:
        verdict = AssessmentVerdict.MIXED
    return OverallAssessment(verdict=verdict, confidence=confidence)


class CrossReferenceService:
    """Matches claims against aggregated sources via an AI provider.

    Never fails the pipeline: missing input short-circuits to
    ``insufficient_data`` and any provider or parse failure degrades to
    ``analysis_error``.
    """

    def __init__(
        self,
        ai_provider: AIProvider,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_sources: int = MAX_SOURCES_FOR_REVIEW,
    ):
        """Initialize the service.

        Args:
            ai_provider: Provider serving the reasoning capability
            timeout: Upper bound for the provider call in seconds
            max_sources: Number of top-ranked sources shown to the provider
        """
        self._ai = ai_provider
        self._timeout = timeout
        self._max_sources = max_sources

    @staticmethod
    def build_prompt(claims: Sequence[Claim], sources: Sequence[Source]) -> str:
        """Build the structured-output instruction for the provider."""
        claims_text = "\n".join(f"- {claim.text} (Category: {claim.category.value})" for claim in claims)
        sources_text = "\n".join(
            f"Source: {source.title}\n"
            f"URL: {source.url or 'n/a'}\n"
            f"Type: {source.type.value}\n"
            f"Credibility: {source.credibility.value if source.credibility else 'unknown'}\n"
            f"Content: {source.snippet}\n---"
            for source in sources
        )
        return CROSS_REFERENCE_PROMPT.format(claims=claims_text, sources=sources_text)

    async def cross_reference(
        self,
        claims: Sequence[Claim],
        sources: Sequence[Source],
    ) -> CrossReferenceResult:
        """Verify each claim against the sources.

        Args:
            claims: Claims extracted by the analyzer
            sources: Ranked sources from the aggregator

        Returns:
            Per-claim results, overall assessment and source quality
        """
        if not claims or not sources:
            logger.info("ℹ️ Nothing to cross-reference (no claims or no sources)")
            return CrossReferenceResult.insufficient_data(summarize_source_quality(sources, []))

        reviewed = list(sources[:self._max_sources])
        prompt = self.build_prompt(claims, reviewed)

        logger.info(f"🔗 Cross-referencing {len(claims)} claims with {len(reviewed)} sources...")
        try:
            raw_text = await asyncio.wait_for(self._ai.generate(prompt), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.error(f"❌ Cross-reference analysis timed out after {self._timeout:g}s")
            return CrossReferenceResult.analysis_error(
                "Cross-reference analysis timed out",
                summarize_source_quality(reviewed, []),
            )
        except Exception as e:
            logger.error(f"❌ Cross-reference analysis error: {e}")
            return CrossReferenceResult.analysis_error(
                "Error during cross-reference analysis",
                summarize_source_quality(reviewed, []),
            )

        return self.parse(raw_text, reviewed)

    def parse(self, raw_text: str, sources: Sequence[Source]) -> CrossReferenceResult:
        """Turn raw provider output into a cross-reference result, with fallback."""
        decoded = decode_json_object(raw_text)
        if not decoded.ok:
            logger.error(f"❌ Cross-reference parsing error: {decoded.error.reason}")
            return CrossReferenceResult.analysis_error(
                "Failed to parse cross-reference analysis",
                summarize_source_quality(sources, []),
            )

        payload = decoded.value
        results = validate_items(
            [item for item in payload.get("verification_results") or [] if isinstance(item, dict)],
            lambda item: self._build_result(item, sources),
            "verification result",
        )
        try:
            assessment = self._build_assessment(payload.get("overall_assessment"), results)
        except ValidationError as e:
            logger.warning(f"⚠️ Overall assessment invalid, deriving from results: {e.error_count()} errors")
            assessment = derive_assessment(results)

        quality_payload = payload.get("source_quality_assessment") or payload.get("source_quality")
        try:
            quality = (
                SourceQuality.model_validate(quality_payload)
                if isinstance(quality_payload, dict)
                else summarize_source_quality(sources, results)
            )
        except ValidationError as e:
            logger.warning(f"⚠️ Source quality invalid, computing locally: {e.error_count()} errors")
            quality = summarize_source_quality(sources, results)

        logger.info(f"✅ Cross-reference complete: {assessment.verdict.value} ({len(results)} claims)")
        return CrossReferenceResult(
            verification_results=results,
            overall_assessment=assessment,
            source_quality=quality,
        )

    def _build_result(self, item: Dict[str, Any], sources: Sequence[Source]) -> VerificationResult:
        data = dict(item)
        data["supporting_sources"] = self._resolve_sources(item.get("supporting_sources"), sources)
        data["contradicting_sources"] = self._resolve_sources(item.get("contradicting_sources"), sources)
        return VerificationResult.model_validate(data)

    @staticmethod
    def _build_assessment(raw: Any, results: List[VerificationResult]) -> OverallAssessment:
        if isinstance(raw, dict) and raw.get("verdict"):
            return OverallAssessment.model_validate(raw)
        if isinstance(raw, str) and raw.strip():
            return OverallAssessment(verdict=raw)
        return derive_assessment(results)

    @staticmethod
    def _resolve_sources(refs: Any, sources: Sequence[Source]) -> List[Source]:
        """Map source references from the reply back to aggregated sources.

        References are matched by url, then by title. Unknown references are
        kept as sources built from the fields the reply provided.
        """
        if not isinstance(refs, list):
            return []

        by_url = {s.url: s for s in sources if s.url}
        by_title = {s.title: s for s in sources if s.title}
        resolved: List[Source] = []
        for ref in refs:
            if isinstance(ref, str):
                match = by_url.get(ref) or by_title.get(ref)
                if match is None:
                    continue
            elif isinstance(ref, dict):
                url = ref.get("url") or None
                title = ref.get("title") or ""
                match = by_url.get(url) or by_title.get(title)
                if match is None:
                    if not url and not title:
                        continue
                    match = Source(
                        title=title,
                        url=url,
                        source_name=extract_domain(url),
                        type=SourceType.WEB,
                        credibility=coerce_enum(Credibility, ref.get("credibility"), credibility_for_url(url)),
                    )
            else:
                continue
            if match not in resolved:
                resolved.append(match)
        return resolved
