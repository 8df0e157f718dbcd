"""Tests for the content analyzer."""

import asyncio

import pytest

from conftest import FakeAIProvider, analysis_reply
from verisite.domain.errors import AnalysisError
from verisite.domain.models.analysis import (
    FALLBACK_CONTEXT_ANALYSIS,
    FALLBACK_RECOMMENDATIONS,
    AnalysisVerdict,
    Severity,
)
from verisite.domain.models.claim import ClaimCategory
from verisite.domain.models.content import ImageContent
from verisite.domain.services.content_analyzer import ContentAnalyzer


@pytest.mark.asyncio
async def test_analyze_text_parses_reply():
    """Test a well-formed reply is turned into an analysis result."""
    provider = FakeAIProvider([analysis_reply()])
    result = await ContentAnalyzer(provider).analyze("The Eiffel Tower is 330 meters tall")

    assert result.verdict == AnalysisVerdict.TRUE
    assert result.confidence == 85
    assert [c.text for c in result.claims] == ["The Eiffel Tower is 330 meters tall"]
    assert result.claims[0].category == ClaimCategory.STATISTICS
    assert result.search_suggestions == ["Eiffel Tower height"]
    prompt, image = provider.calls[0]
    assert "The Eiffel Tower is 330 meters tall" in prompt
    assert image is None


@pytest.mark.asyncio
async def test_malformed_reply_falls_back():
    """Test unparseable output yields the deterministic fallback."""
    provider = FakeAIProvider(["I think this is probably true."])
    result = await ContentAnalyzer(provider).analyze("some text")

    assert result.verdict == AnalysisVerdict.UNVERIFIABLE
    assert result.confidence == 50
    assert result.claims == []
    assert result.red_flags == []
    assert result.explanation == "I think this is probably true."
    assert result.recommendations == FALLBACK_RECOMMENDATIONS
    assert result.context_analysis == FALLBACK_CONTEXT_ANALYSIS
    assert result.search_suggestions == []


@pytest.mark.asyncio
async def test_invalid_payload_falls_back():
    """Test a JSON object with an unusable field shape also falls back."""
    provider = FakeAIProvider(['{"verdict": "true", "explanation": {"nested": 1}}'])
    result = await ContentAnalyzer(provider).analyze("some text")
    assert result.verdict == AnalysisVerdict.UNVERIFIABLE
    assert result.confidence == 50


def test_lenient_validation():
    """Test recognisable but irregular payloads are normalized."""
    result = ContentAnalyzer.parse(analysis_reply(
        verdict="Likely Fake",
        confidence=140,
        extracted_claims=[{"text": "Aliens built it", "category": "mythology"}],
        red_flags=[{"flag": "No sources cited", "severity": "extreme"}],
        search_suggestions="aliens, eiffel tower",
        recommendations=None,
    ))
    assert result.verdict == AnalysisVerdict.LIKELY_FAKE
    assert result.confidence == 100
    assert result.claims[0].category == ClaimCategory.OTHER
    assert result.claims[0].verifiable is True
    assert result.red_flags[0].description == "No sources cited"
    assert result.red_flags[0].severity == Severity.MEDIUM
    assert result.search_suggestions == ["aliens", "eiffel tower"]
    assert result.recommendations == ""


def test_missing_confidence_keeps_verdict():
    """Test a null or non-numeric confidence defaults instead of discarding the reply."""
    for confidence in (None, "very high"):
        result = ContentAnalyzer.parse(analysis_reply(verdict="likely_fake", confidence=confidence))
        assert result.verdict == AnalysisVerdict.LIKELY_FAKE
        assert result.confidence == 50
        assert [c.text for c in result.claims] == ["The Eiffel Tower is 330 meters tall"]


def test_plain_string_claims_and_flags():
    """Test claims and red flags given as bare strings are accepted."""
    result = ContentAnalyzer.parse(analysis_reply(
        verdict="misleading",
        extracted_claims=["The moon is cheese"],
        red_flags=["Extraordinary claim"],
    ))
    assert result.verdict == AnalysisVerdict.MISLEADING
    assert [c.text for c in result.claims] == ["The moon is cheese"]
    assert result.claims[0].category == ClaimCategory.OTHER
    assert result.red_flags[0].description == "Extraordinary claim"
    assert result.red_flags[0].severity == Severity.MEDIUM


def test_invalid_claims_are_dropped_individually():
    """Test malformed claim and red flag entries are skipped, keeping the rest."""
    result = ContentAnalyzer.parse(analysis_reply(
        extracted_claims=[
            {"claim": "Water boils at 100 C at sea level", "category": "scientific"},
            {"category": "other"},
            {"claim": None},
            42,
        ],
        red_flags=[{"severity": "high"}, {"flag": "Emotional language", "severity": "low"}],
    ))
    assert result.verdict == AnalysisVerdict.TRUE
    assert [c.text for c in result.claims] == ["Water boils at 100 C at sea level"]
    assert [f.description for f in result.red_flags] == ["Emotional language"]
    assert result.red_flags[0].severity == Severity.LOW


@pytest.mark.asyncio
async def test_provider_error_raises_analysis_error():
    """Test an unreachable provider is stage-fatal."""
    provider = FakeAIProvider(error=ConnectionError("network down"))
    with pytest.raises(AnalysisError):
        await ContentAnalyzer(provider).analyze("some text")


@pytest.mark.asyncio
async def test_timeout_raises_analysis_error():
    """Test a slow provider is bounded by the timeout."""
    provider = FakeAIProvider([analysis_reply()], delay=1.0)
    with pytest.raises(AnalysisError, match="timed out"):
        await ContentAnalyzer(provider, timeout=0.05).analyze("some text")


@pytest.mark.asyncio
async def test_image_is_sent_to_provider():
    """Test image analysis forwards the image and omits text from the prompt."""
    provider = FakeAIProvider([analysis_reply()])
    image = ImageContent(format="png", data="aGVsbG8=")
    await ContentAnalyzer(provider).analyze(image, is_image=True)

    prompt, sent_image = provider.calls[0]
    assert sent_image == image
    assert "Analyze this image" in prompt
    assert "Text to analyze" not in prompt


@pytest.mark.asyncio
async def test_image_flag_requires_image_content():
    """Test mismatched input is rejected before calling the provider."""
    provider = FakeAIProvider()
    with pytest.raises(TypeError):
        await ContentAnalyzer(provider).analyze("not an image", is_image=True)
    assert provider.calls == []
