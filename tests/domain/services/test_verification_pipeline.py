"""End-to-end tests for the verification pipeline."""

import json

import pytest

from conftest import FakeAIProvider, FakeConnector, analysis_reply, make_source
from verisite.domain.errors import AnalysisError, ConfigurationError
from verisite.domain.models.analysis import AnalysisResult
from verisite.domain.models.claim import Claim
from verisite.domain.models.content import ImageContent
from verisite.domain.models.source import SourceType
from verisite.domain.services.content_analyzer import ContentAnalyzer
from verisite.domain.services.cross_reference_service import CrossReferenceService
from verisite.domain.services.source_aggregator import SourceAggregator
from verisite.domain.services.verification_pipeline import (
    IMAGE_FALLBACK_QUERY,
    VerificationPipeline,
    build_search_query,
)
from verisite.infrastructure.cache.memory_cache import MemoryCacheStore

EIFFEL_TEXT = "The Eiffel Tower is 330 meters tall and was completed in 1889."

CROSS_REFERENCE_REPLY = json.dumps({
    "verification_results": [
        {
            "claim": "The Eiffel Tower is 330 meters tall",
            "status": "verified_true",
            "confidence": 92,
            "supporting_sources": [{"title": "Eiffel Tower | Britannica", "url": "https://www.britannica.com/topic/Eiffel-Tower"}],
            "contradicting_sources": [],
            "explanation": "Matches the published height including antennas.",
        }
    ],
    "overall_assessment": {"verdict": "mostly_true", "confidence": 91, "summary": "The claim holds."},
})


def _eiffel_connectors():
    fact_check = FakeConnector(
        "bing_search",
        [make_source("Fact check: Eiffel Tower height", "https://www.reuters.com/fact-check/eiffel", SourceType.FACT_CHECK)],
        source_type=SourceType.FACT_CHECK,
        display_name="Bing Search",
    )
    web = FakeConnector(
        "serper_web",
        [
            make_source("Eiffel Tower trivia", "https://travelblog.example/eiffel"),
            make_source("Eiffel Tower | Britannica", "https://www.britannica.com/topic/Eiffel-Tower"),
        ],
        display_name="Serper API",
    )
    return [fact_check, web]


def _pipeline(provider, connectors, ai_configured=True, cache=None):
    return VerificationPipeline(
        ContentAnalyzer(provider),
        SourceAggregator(connectors, cache=cache),
        CrossReferenceService(provider),
        ai_provider_name=provider.provider_name,
        ai_configured=ai_configured,
    )


def test_build_search_query_priority():
    """Test suggestions win over claims, and claims over the fallback."""
    with_suggestions = AnalysisResult(search_suggestions=["eiffel", " height "], claims=[Claim(text="x")])
    assert build_search_query(with_suggestions, "fallback") == "eiffel height"
    with_claims = AnalysisResult(claims=[Claim(text="a"), Claim(text="b")])
    assert build_search_query(with_claims, "fallback") == "a b"
    assert build_search_query(AnalysisResult(), "fallback") == "fallback"


@pytest.mark.asyncio
async def test_eiffel_tower_end_to_end():
    """Test the full pipeline merges analysis, sources and cross-reference."""
    provider = FakeAIProvider([analysis_reply(), CROSS_REFERENCE_REPLY])
    connectors = _eiffel_connectors()
    result = await _pipeline(provider, connectors).verify_text(EIFFEL_TEXT)

    assert result["success"] is True
    assert result["verdict"] == "mostly_true"
    assert result["confidence"] == 91
    assert result["initial_analysis"]["verdict"] == "true"
    assert [s["credibility"] for s in result["sources"]] == ["very_high", "medium", "low"]
    assert result["source_verification"]["total_sources"] == 3
    assert result["source_verification"]["verification_results"][0]["status"] == "verified_true"
    assert result["source_verification"]["source_quality"]["total_sources"] == 3
    assert result["metadata"]["apis_used"] == ["ChatGPT", "Bing Search", "Serper API"]
    assert result["metadata"]["search_errors"] == []
    assert result["metadata"]["processing_time_ms"] >= 0
    assert all(c.calls == ["Eiffel Tower height"] for c in connectors)


@pytest.mark.asyncio
async def test_no_optional_connectors():
    """Test only the mandatory provider is reported when no search is configured."""
    provider = FakeAIProvider([analysis_reply()])
    result = await _pipeline(provider, []).verify_text(EIFFEL_TEXT)

    assert result["success"] is True
    assert result["metadata"]["apis_used"] == ["ChatGPT"]
    assert result["sources"] == []
    # Cross-referencing short-circuits, so the analyzer's verdict stands
    assert result["verdict"] == "true"
    assert result["confidence"] == 85
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_failed_connector_listed_in_errors_not_apis():
    """Test failed providers show up as search errors only."""
    provider = FakeAIProvider([analysis_reply(), CROSS_REFERENCE_REPLY])
    connectors = _eiffel_connectors() + [FakeConnector("newsapi", error="HTTP 429 from provider", display_name="NewsAPI")]
    result = await _pipeline(provider, connectors).verify_text(EIFFEL_TEXT)

    assert "NewsAPI" not in result["metadata"]["apis_used"]
    assert result["metadata"]["search_errors"] == [{"provider": "newsapi", "message": "HTTP 429 from provider"}]


@pytest.mark.asyncio
async def test_degraded_cross_reference_keeps_analyzer_verdict():
    """Test an unparseable cross-reference reply does not override the analysis."""
    provider = FakeAIProvider([analysis_reply(verdict="misleading", confidence=40), "no json here"])
    result = await _pipeline(provider, _eiffel_connectors()).verify_text(EIFFEL_TEXT)

    assert result["success"] is True
    assert result["verdict"] == "misleading"
    assert result["confidence"] == 40
    assert result["source_verification"]["verification_results"] == []


@pytest.mark.asyncio
async def test_fallback_query_uses_text_prefix():
    """Test the text prefix is searched when the analysis has nothing usable."""
    provider = FakeAIProvider(["unparseable"])
    connector = FakeConnector("web")
    long_text = "x" * 150
    await _pipeline(provider, [connector]).verify_text(long_text)
    assert connector.calls == ["x" * 100]


@pytest.mark.asyncio
async def test_image_verification_uses_image_fallback_query():
    """Test images are forwarded and searched with the generic query."""
    provider = FakeAIProvider(["unparseable"])
    connector = FakeConnector("web")
    image = ImageContent(format="jpeg", data="aGVsbG8=")
    result = await _pipeline(provider, [connector]).verify_image(image)

    assert result["success"] is True
    assert provider.calls[0][1] == image
    assert connector.calls == [IMAGE_FALLBACK_QUERY]


@pytest.mark.asyncio
async def test_missing_credential_is_fatal_before_any_call():
    """Test the pre-flight check fails without touching providers."""
    provider = FakeAIProvider([analysis_reply()])
    connector = FakeConnector("web")
    pipeline = _pipeline(provider, [connector], ai_configured=False)

    with pytest.raises(ConfigurationError):
        await pipeline.verify(EIFFEL_TEXT)

    result = await pipeline.verify_text(EIFFEL_TEXT)
    assert result["success"] is False
    assert result["error"] == "Failed to verify text"
    assert result["message"] == "ChatGPT API key not configured"
    assert "timestamp" in result
    assert provider.calls == []
    assert connector.calls == []


@pytest.mark.asyncio
async def test_analysis_error_produces_failure_envelope():
    """Test an unreachable claim-extraction provider fails the run."""
    provider = FakeAIProvider(error=ConnectionError("network down"))
    pipeline = _pipeline(provider, [FakeConnector("web")])

    with pytest.raises(AnalysisError):
        await pipeline.verify(EIFFEL_TEXT)

    result = await pipeline.verify_text(EIFFEL_TEXT)
    assert result["success"] is False
    assert "network down" in result["message"]


@pytest.mark.asyncio
async def test_repeated_verification_uses_cached_sources():
    """Test a second identical run reuses cached search results."""
    provider = FakeAIProvider([analysis_reply(), CROSS_REFERENCE_REPLY, analysis_reply(), CROSS_REFERENCE_REPLY])
    connectors = _eiffel_connectors()
    pipeline = _pipeline(provider, connectors, cache=MemoryCacheStore())

    first = await pipeline.verify_text(EIFFEL_TEXT)
    second = await pipeline.verify_text(EIFFEL_TEXT)

    assert all(len(c.calls) == 1 for c in connectors)
    assert second["sources"] == first["sources"]
    assert second["metadata"]["apis_used"] == first["metadata"]["apis_used"]
