"""Bing search connector scoped to fact-checking sites."""

from typing import Any, Dict, List

import httpx

from ...domain.models.source import Credibility, Source, SourceType
from ...domain.services.credibility import extract_domain
from .base import HttpSearchConnector
from .dates import parse_published_at

BING_SEARCH_URL = "https://api.bing.microsoft.com/v7.0/search"

FACT_CHECK_SITES = (
    "snopes.com",
    "factcheck.org",
    "politifact.com",
    "reuters.com/fact-check",
    "apnews.com/hub/ap-fact-check",
)


def scope_to_fact_check_sites(query: str) -> str:
    """Restrict a query to well-known fact-checking sites."""
    sites = " OR ".join(f"site:{site}" for site in FACT_CHECK_SITES)
    return f"{query} {sites}"


class BingFactCheckConnector(HttpSearchConnector):
    """Fact-check search through the Bing Web Search API."""

    name = "bing_search"
    display_name = "Bing Search"
    source_type = SourceType.FACT_CHECK
    default_limit = 3

    async def _search(
        self,
        client: httpx.AsyncClient,
        query: str,
        limit: int,
        timeout: float,
    ) -> Dict[str, Any]:
        response = await client.get(
            BING_SEARCH_URL,
            params={
                "q": scope_to_fact_check_sites(query),
                "count": limit,
                "textDecorations": "false",
                "textFormat": "Raw",
            },
            headers={"Ocp-Apim-Subscription-Key": self._api_key},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()

    def _parse(self, payload: Dict[str, Any]) -> List[Source]:
        pages = (payload.get("webPages") or {}).get("value") or []
        return [
            Source(
                title=page.get("name") or "",
                url=page.get("url"),
                snippet=page.get("snippet") or "",
                published_at=parse_published_at(page.get("dateLastCrawled")),
                source_name=extract_domain(page.get("url")),
                type=SourceType.FACT_CHECK,
                credibility=Credibility.VERY_HIGH,
            )
            for page in pages
        ]
