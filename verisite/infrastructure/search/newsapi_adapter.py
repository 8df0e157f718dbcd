"""NewsAPI.org connector, used to backfill primary news search."""

from typing import Any, Dict, List, Optional

import httpx

from ...domain.models.source import Credibility, Source, SourceType
from ...domain.services.credibility import extract_domain
from .base import HttpSearchConnector
from .dates import parse_published_at

NEWSAPI_URL = "https://newsapi.org/v2/everything"


class NewsAPIConnector(HttpSearchConnector):
    """Secondary news search.

    Only runs when the primary news connector returned fewer than
    ``min_primary_results`` sources.
    """

    name = "newsapi"
    display_name = "NewsAPI"
    source_type = SourceType.NEWS
    backfill_for = "serper_news"

    def __init__(
        self,
        api_key: str,
        timeout_ms: int = 5000,
        client: Optional[httpx.AsyncClient] = None,
        min_primary_results: int = 3,
    ):
        super().__init__(api_key, timeout_ms=timeout_ms, client=client)
        self.min_primary_results = min_primary_results

    async def _search(
        self,
        client: httpx.AsyncClient,
        query: str,
        limit: int,
        timeout: float,
    ) -> Dict[str, Any]:
        response = await client.get(
            NEWSAPI_URL,
            params={
                "q": query,
                "sortBy": "publishedAt",
                "pageSize": limit,
                "language": "en",
            },
            headers={"X-Api-Key": self._api_key},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()

    def _parse(self, payload: Dict[str, Any]) -> List[Source]:
        return [
            Source(
                title=article.get("title") or "",
                url=article.get("url"),
                snippet=article.get("description") or "",
                published_at=parse_published_at(article.get("publishedAt")),
                source_name=(article.get("source") or {}).get("name") or extract_domain(article.get("url")),
                type=SourceType.NEWS,
                credibility=Credibility.HIGH,
            )
            for article in payload.get("articles") or []
        ]
