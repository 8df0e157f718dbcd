"""Static domain to credibility tier lookup."""

from typing import Optional
from urllib.parse import urlparse

from ..models.source import Credibility

VERY_HIGH_CREDIBILITY_DOMAINS = (
    "reuters.com",
    "apnews.com",
    "bbc.com",
    "bbc.co.uk",
    "npr.org",
    "cnn.com",
    "snopes.com",
    "factcheck.org",
    "politifact.com",
)

HIGH_CREDIBILITY_DOMAINS = (
    "nytimes.com",
    "washingtonpost.com",
    "wsj.com",
    "theguardian.com",
    "guardian.com",
    "economist.com",
    "nature.com",
    "science.org",
)

MEDIUM_CREDIBILITY_DOMAINS = (
    "wikipedia.org",
    "britannica.com",
)


def extract_domain(url: Optional[str]) -> str:
    """Return the hostname of ``url``, or ``"unknown"`` when it has none."""
    if not url:
        return "unknown"
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return "unknown"
    return hostname or "unknown"


def _matches(domain: str, candidates: tuple) -> bool:
    return any(domain == candidate or domain.endswith("." + candidate) for candidate in candidates)


def credibility_for_url(url: Optional[str]) -> Credibility:
    """Look up the credibility tier for a URL's domain.

    Unrecognized domains default to ``low``.
    """
    domain = extract_domain(url).lower()
    if _matches(domain, VERY_HIGH_CREDIBILITY_DOMAINS):
        return Credibility.VERY_HIGH
    if _matches(domain, HIGH_CREDIBILITY_DOMAINS):
        return Credibility.HIGH
    if _matches(domain, MEDIUM_CREDIBILITY_DOMAINS):
        return Credibility.MEDIUM
    return Credibility.LOW
