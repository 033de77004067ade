"""Stream lookup use case.

One AdapterQuery -> every enabled adapter in parallel (bounded, with a
per-adapter deadline) -> concatenated descriptor lists.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import structlog

from streamhound.domain.entities.streams import AdapterQuery, StreamDescriptor
from streamhound.domain.ports.adapter_registry import AdapterRegistryPort

log = structlog.get_logger(__name__)


class _StreamsConfig(Protocol):
    """Configuration values consumed by StreamLookupUseCase."""

    adapter_timeout_seconds: float
    max_concurrent_adapters: int


class StreamLookupUseCase:
    """Resolve stream descriptors for one item across all adapters.

    Each adapter's list keeps its own ranking; lists are concatenated in
    adapter-name order without cross-adapter dedup.
    """

    def __init__(
        self,
        *,
        adapters: AdapterRegistryPort,
        config: _StreamsConfig,
    ) -> None:
        self._adapters = adapters
        self._max_concurrent = config.max_concurrent_adapters
        self._adapter_timeout = config.adapter_timeout_seconds

    async def execute(self, query: AdapterQuery) -> list[StreamDescriptor]:
        names = self._adapters.list_names()
        if not names:
            log.warning("stream_lookup_no_adapters")
            return []

        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def _run_one(name: str) -> list[StreamDescriptor]:
            async with semaphore:
                try:
                    return await asyncio.wait_for(
                        self._call_adapter(name, query),
                        timeout=self._adapter_timeout,
                    )
                except TimeoutError:
                    log.warning(
                        "stream_lookup_adapter_timeout",
                        adapter=name,
                        timeout=self._adapter_timeout,
                    )
                    return []

        per_adapter = await asyncio.gather(*(_run_one(name) for name in names))

        streams: list[StreamDescriptor] = []
        for result in per_adapter:
            streams.extend(result)

        log.info(
            "stream_lookup_completed",
            catalog_id=query.catalog_id,
            media_type=query.media_type,
            season=query.season,
            episode=query.episode,
            adapters=len(names),
            streams=len(streams),
        )
        return streams

    async def _call_adapter(
        self, name: str, query: AdapterQuery
    ) -> list[StreamDescriptor]:
        try:
            adapter = self._adapters.get(name)
        except Exception:
            log.warning("stream_lookup_adapter_not_found", adapter=name, exc_info=True)
            return []

        try:
            return await adapter.get_streams(
                query.catalog_id,
                query.media_type,
                season=query.season,
                episode=query.episode,
            )
        except Exception:
            log.error("stream_lookup_adapter_failed", adapter=name, exc_info=True)
            return []
