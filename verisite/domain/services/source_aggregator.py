"""Service for aggregating evidence from multiple search providers."""

import asyncio
import hashlib
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from ..errors import ProviderError
from ..models.source import AggregatedSources, SearchOptions, Source
from ..ports.cache_store import CacheStore
from ..ports.source_connector import ConnectorResult, SourceConnector
from .credibility import credibility_for_url

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 3600
DEFAULT_TIMEOUT_MS = 5000


def canonicalize_query(query: str) -> str:
    """Normalize whitespace and case so equivalent queries share a cache entry."""
    return " ".join(query.split()).lower()


def build_cache_key(query: str, options: SearchOptions) -> str:
    """Build a deterministic cache key for a query and its options.

    Options are serialized with sorted keys, so the key does not depend on
    the order in which they were given.
    """
    material = f"{canonicalize_query(query)}|{options.fingerprint()}"
    digest = hashlib.sha256(material.encode("utf-8")).hexdigest()
    return f"search:{digest}"


def deduplicate(sources: Iterable[Source]) -> List[Source]:
    """Drop sources whose url (or title when url is absent) was already seen.

    The first occurrence wins. Sources with neither url nor title are always kept.
    """
    seen = set()
    unique = []
    for source in sources:
        key = source.dedup_key
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        unique.append(source)
    return unique


def assign_credibility(sources: Iterable[Source]) -> List[Source]:
    """Fill in credibility from the domain table where the provider gave none."""
    return [
        source if source.credibility is not None
        else source.model_copy(update={"credibility": credibility_for_url(source.url)})
        for source in sources
    ]


def _rank_key(source: Source):
    rank = source.credibility.rank if source.credibility else 0
    published = source.published_at.timestamp() if source.published_at else float("-inf")
    return (-rank, -published)


def rank_sources(sources: Iterable[Source]) -> List[Source]:
    """Sort by credibility tier, then by recency; undated sources sort as oldest."""
    return sorted(sources, key=_rank_key)


class SourceAggregator:
    """Fans out to search connectors and merges their results.

    All enabled connectors are queried concurrently and awaited until
    every one of them has settled. Failures are collected as error records;
    aggregation itself never fails because a provider did.
    """

    def __init__(
        self,
        connectors: Sequence[SourceConnector],
        cache: Optional[CacheStore] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        """Initialize the aggregator.

        Args:
            connectors: Enabled search connectors
            cache: Optional TTL cache for aggregated results
            cache_ttl_seconds: Lifetime of cached results
            timeout_ms: Upper bound for each connector call
        """
        self._connectors = list(connectors)
        self._cache = cache
        self._cache_ttl = cache_ttl_seconds
        self._timeout_ms = timeout_ms

    async def aggregate(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> AggregatedSources:
        """Search all enabled providers for ``query``.

        Args:
            query: Search query
            options: Provider families to include and result bound

        Returns:
            Ranked, de-duplicated sources with per-provider errors
        """
        options = options or SearchOptions()
        cache_key = build_cache_key(query, options)

        cached = await self._read_cache(cache_key)
        if cached is not None:
            logger.info("🎯 Using cached search results")
            return cached

        primaries = [
            connector for connector in self._connectors
            if not connector.is_backfill and options.includes(connector.source_type)
        ]
        results = await self._fan_out(primaries, query)

        primary_yield = {result.provider: len(result.sources) for result in results}
        backfills = [
            connector for connector in self._connectors
            if connector.is_backfill
            and options.includes(connector.source_type)
            and primary_yield.get(connector.backfill_for, 0) < connector.min_primary_results
        ]
        if backfills:
            logger.info(f"📰 Backfilling with {[c.name for c in backfills]}")
            results.extend(await self._fan_out(backfills, query))

        all_sources = [source for result in results for source in result.sources]
        ranked = rank_sources(assign_credibility(deduplicate(all_sources)))

        aggregated = AggregatedSources(
            sources=ranked[:options.max_results],
            total_found=len(all_sources),
            errors=[result.error for result in results if result.error is not None],
            providers_used=self._providers_used(results),
        )
        logger.info(
            f"✅ Aggregated {len(aggregated.sources)} sources "
            f"({aggregated.total_found} found, {len(aggregated.errors)} provider errors)"
        )

        await self._write_cache(cache_key, aggregated)
        return aggregated

    async def _fan_out(
        self,
        connectors: Sequence[SourceConnector],
        query: str,
    ) -> List[ConnectorResult]:
        if not connectors:
            return []
        return list(await asyncio.gather(*(self._call(connector, query) for connector in connectors)))

    async def _call(self, connector: SourceConnector, query: str) -> ConnectorResult:
        """Invoke one connector, turning any escape or timeout into an error record."""
        logger.info(f"🔍 Searching {connector.name}...")
        try:
            result = await asyncio.wait_for(
                connector.fetch(query, connector.default_limit, self._timeout_ms),
                timeout=self._timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            error = ProviderError(connector.name, f"Timed out after {self._timeout_ms} ms")
            logger.error(f"❌ {error}")
            return ConnectorResult(provider=connector.name, error=error.to_record())
        except Exception as e:
            error = ProviderError(connector.name, str(e) or type(e).__name__)
            logger.error(f"❌ {error}")
            return ConnectorResult(provider=connector.name, error=error.to_record())

        if result.ok:
            logger.info(f"✅ Found {len(result.sources)} {connector.name} sources")
        else:
            logger.error(f"❌ {connector.name} error: {result.error.message}")
        return result

    def _providers_used(self, results: Sequence[ConnectorResult]) -> List[str]:
        display_names = {connector.name: connector.display_name for connector in self._connectors}
        used: List[str] = []
        for result in results:
            name = display_names.get(result.provider, result.provider)
            if result.ok and name not in used:
                used.append(name)
        return used

    async def _read_cache(self, key: str) -> Optional[AggregatedSources]:
        if self._cache is None:
            return None
        try:
            payload: Any = await self._cache.get(key)
        except Exception as e:
            logger.warning(f"⚠️ Cache read failed: {e}")
            return None
        if payload is None:
            return None
        try:
            return AggregatedSources.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"⚠️ Ignoring malformed cache entry: {e}")
            return None

    async def _write_cache(self, key: str, aggregated: AggregatedSources) -> None:
        if self._cache is None:
            return
        payload: Dict[str, Any] = aggregated.model_dump(mode="json")
        try:
            stored = await self._cache.set(key, payload, self._cache_ttl)
        except Exception as e:
            logger.warning(f"⚠️ Cache write failed: {e}")
            return
        if not stored:
            logger.warning("⚠️ Search results were not cached")
