"""Serper (Google) news and web search connectors."""

from typing import Any, Dict, List

import httpx

from ...domain.models.source import Credibility, Source, SourceType
from ...domain.services.credibility import extract_domain
from .base import HttpSearchConnector
from .dates import parse_published_at

SERPER_BASE_URL = "https://google.serper.dev"


class _SerperConnector(HttpSearchConnector):
    """Common request shape for Serper endpoints."""

    display_name = "Serper API"
    endpoint = ""

    async def _search(
        self,
        client: httpx.AsyncClient,
        query: str,
        limit: int,
        timeout: float,
    ) -> Dict[str, Any]:
        response = await client.post(
            f"{SERPER_BASE_URL}{self.endpoint}",
            json={"q": query, "num": limit, "hl": "en", "gl": "us"},
            headers={"X-API-KEY": self._api_key},
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()


class SerperNewsConnector(_SerperConnector):
    """Primary news search through Serper's Google News endpoint."""

    name = "serper_news"
    source_type = SourceType.NEWS
    endpoint = "/news"

    def _parse(self, payload: Dict[str, Any]) -> List[Source]:
        return [
            Source(
                title=item.get("title") or "",
                url=item.get("link"),
                snippet=item.get("snippet") or "",
                published_at=parse_published_at(item.get("date")),
                source_name=item.get("source") or extract_domain(item.get("link")),
                type=SourceType.NEWS,
                credibility=Credibility.HIGH,
            )
            for item in payload.get("news") or []
        ]


class SerperWebConnector(_SerperConnector):
    """Primary web search through Serper's Google Search endpoint.

    Web results carry no provider credibility; the aggregator assigns it
    from the domain table.
    """

    name = "serper_web"
    source_type = SourceType.WEB
    endpoint = "/search"

    def _parse(self, payload: Dict[str, Any]) -> List[Source]:
        return [
            Source(
                title=item.get("title") or "",
                url=item.get("link"),
                snippet=item.get("snippet") or "",
                published_at=parse_published_at(item.get("date")),
                source_name=item.get("source") or extract_domain(item.get("link")),
                type=SourceType.WEB,
            )
            for item in payload.get("organic") or []
        ]
