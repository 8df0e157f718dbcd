"""Claim extraction on top of an AI provider."""

import asyncio
import logging
from typing import Optional, Union

from pydantic import ValidationError

from ..errors import AnalysisError
from ..models.analysis import AnalysisResult
from ..models.content import ImageContent
from ..ports.ai_provider import AIProvider
from .json_decoder import decode_json_object

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0

ANALYSIS_PROMPT = """
You are an expert fact-checker and misinformation detector. {subject} and provide a comprehensive fact-check.
{content_block}
Please provide your analysis in this exact JSON format:
{{
  "verdict": "true" | "likely_fake" | "misleading" | "unverifiable",
  "confidence": 0-100,
  "extracted_claims": [
    {{
      "claim": "specific factual statement",
      "category": "historical|scientific|current_events|statistics|other",
      "time_sensitive": true/false,
      "verifiable": true/false
    }}
  ],
  "explanation": "Detailed explanation of your analysis and reasoning",
  "red_flags": [
    {{
      "flag": "description of suspicious element",
      "severity": "low|medium|high"
    }}
  ],
  "recommendations": "What users should do next to verify this information",
  "context_analysis": "Analysis of how the content is presented and any contextual issues",
  "search_suggestions": ["keyword1", "keyword2", "keyword3"]
}}

Focus on:
1. Extracting all verifiable factual claims
2. Identifying potential misinformation patterns
3. Analyzing the credibility of presentation
4. Providing specific claims that can be fact-checked
5. Suggesting search terms for verification

Be thorough but concise. Base your analysis on factual evidence and logical reasoning.
"""


class ContentAnalyzer:
    """Extracts claims from text or images.

    The provider's reply is free-form text. Whatever it contains, callers
    always get a complete ``AnalysisResult``: output without a usable JSON
    payload is replaced by ``AnalysisResult.fallback``. Only an unreachable
    provider is an error.
    """

    def __init__(self, ai_provider: AIProvider, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        """Initialize the analyzer.

        Args:
            ai_provider: Provider serving the claim-extraction capability
            timeout: Upper bound for the provider call in seconds
        """
        self._ai = ai_provider
        self._timeout = timeout

    @staticmethod
    def build_prompt(content: Optional[str], is_image: bool) -> str:
        """Build the structured-output instruction for the provider."""
        if is_image:
            return ANALYSIS_PROMPT.format(subject="Analyze this image carefully", content_block="")
        return ANALYSIS_PROMPT.format(
            subject="Analyze this text carefully",
            content_block=f'\nText to analyze: "{content}"\n',
        )

    async def analyze(
        self,
        content: Union[str, ImageContent],
        is_image: bool = False,
    ) -> AnalysisResult:
        """Extract claims and an initial verdict from the content.

        Args:
            content: Text, or a pre-normalized image when ``is_image`` is set
            is_image: Whether ``content`` is an image

        Returns:
            Fully populated analysis result

        Raises:
            AnalysisError: If the provider is unreachable, errors or times out
        """
        if is_image and not isinstance(content, ImageContent):
            raise TypeError("Image analysis requires ImageContent")

        image = content if is_image else None
        prompt = self.build_prompt(None if is_image else content, is_image)

        logger.info(f"🧠 Analyzing {'image' if is_image else 'text'} with {self._ai.provider_name}...")
        try:
            raw_text = await asyncio.wait_for(self._ai.generate(prompt, image=image), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise AnalysisError(f"Claim extraction timed out after {self._timeout:g}s") from e
        except Exception as e:
            raise AnalysisError(f"Claim extraction failed: {e}") from e

        return self.parse(raw_text)

    @staticmethod
    def parse(raw_text: str) -> AnalysisResult:
        """Turn raw provider output into an analysis result, with fallback."""
        decoded = decode_json_object(raw_text)
        if not decoded.ok:
            logger.warning(f"⚠️ Analysis output could not be parsed ({decoded.error.reason}), using fallback")
            return AnalysisResult.fallback(raw_text or "")

        try:
            result = AnalysisResult.model_validate(decoded.value)
        except ValidationError as e:
            logger.warning(f"⚠️ Analysis payload failed validation, using fallback: {e.error_count()} errors")
            return AnalysisResult.fallback(raw_text)

        logger.info(f"📝 Extracted {len(result.claims)} claims, initial verdict: {result.verdict.value}")
        return result
