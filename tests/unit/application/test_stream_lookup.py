"""Tests for StreamLookupUseCase."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from streamhound.application.use_cases.stream_lookup import StreamLookupUseCase
from streamhound.domain.adapters import AdapterNotFoundError
from streamhound.domain.entities.streams import AdapterQuery
from streamhound.infrastructure.config.schema import StreamsConfig


def _make_adapter(name: str, streams: list | None = None) -> MagicMock:
    adapter = MagicMock()
    adapter.name = name
    adapter.get_streams = AsyncMock(return_value=streams or [])
    return adapter


def _make_registry(*adapters: MagicMock) -> MagicMock:
    by_name = {a.name: a for a in adapters}
    registry = MagicMock()
    registry.list_names.return_value = sorted(by_name)

    def _get(name: str) -> MagicMock:
        if name not in by_name:
            raise AdapterNotFoundError(name)
        return by_name[name]

    registry.get.side_effect = _get
    return registry


def _make_uc(registry: MagicMock, **config: object) -> StreamLookupUseCase:
    return StreamLookupUseCase(adapters=registry, config=StreamsConfig(**config))


class TestExecute:
    @pytest.mark.asyncio
    async def test_concatenates_in_adapter_name_order(
        self, movie_query: AdapterQuery, make_descriptor
    ) -> None:
        a1 = make_descriptor("https://a.test/1", "720p", provider="alpha")
        b1 = make_descriptor("https://b.test/1", "4K", provider="beta")
        b2 = make_descriptor("https://b.test/2", "480p", provider="beta")
        registry = _make_registry(
            _make_adapter("beta", [b1, b2]), _make_adapter("alpha", [a1])
        )

        result = await _make_uc(registry).execute(movie_query)

        assert result == [a1, b1, b2]

    @pytest.mark.asyncio
    async def test_no_cross_adapter_dedup(
        self, movie_query: AdapterQuery, make_descriptor
    ) -> None:
        shared = "https://cdn.test/same.mp4"
        registry = _make_registry(
            _make_adapter("alpha", [make_descriptor(shared, provider="alpha")]),
            _make_adapter("beta", [make_descriptor(shared, provider="beta")]),
        )

        result = await _make_uc(registry).execute(movie_query)

        assert [s.provider for s in result] == ["alpha", "beta"]

    @pytest.mark.asyncio
    async def test_passes_query_to_adapters(self, episode_query: AdapterQuery) -> None:
        adapter = _make_adapter("alpha")
        await _make_uc(_make_registry(adapter)).execute(episode_query)
        adapter.get_streams.assert_awaited_once_with(
            "3916", "tv", season=1, episode=5
        )

    @pytest.mark.asyncio
    async def test_no_adapters(self, movie_query: AdapterQuery) -> None:
        assert await _make_uc(_make_registry()).execute(movie_query) == []

    @pytest.mark.asyncio
    async def test_failing_adapter_contributes_nothing(
        self, movie_query: AdapterQuery, make_descriptor
    ) -> None:
        ok = make_descriptor("https://ok.test/1")
        broken = _make_adapter("broken")
        broken.get_streams.side_effect = RuntimeError("boom")
        registry = _make_registry(broken, _make_adapter("ok", [ok]))

        assert await _make_uc(registry).execute(movie_query) == [ok]

    @pytest.mark.asyncio
    async def test_missing_adapter_contributes_nothing(
        self, movie_query: AdapterQuery, make_descriptor
    ) -> None:
        ok = make_descriptor("https://ok.test/1")
        registry = _make_registry(_make_adapter("ok", [ok]))
        registry.list_names.return_value = ["ghost", "ok"]

        assert await _make_uc(registry).execute(movie_query) == [ok]

    @pytest.mark.asyncio
    async def test_slow_adapter_times_out(
        self, movie_query: AdapterQuery, make_descriptor
    ) -> None:
        fast = make_descriptor("https://fast.test/1")
        slow = _make_adapter("slow")

        async def _hang(*args: object, **kwargs: object) -> list:
            await asyncio.sleep(10)
            return [make_descriptor("https://slow.test/1")]

        slow.get_streams = _hang
        registry = _make_registry(_make_adapter("fast", [fast]), slow)

        result = await _make_uc(registry, adapter_timeout_seconds=0.05).execute(
            movie_query
        )

        assert result == [fast]

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, movie_query: AdapterQuery) -> None:
        in_flight = 0
        peak = 0

        def _tracking_adapter(name: str) -> MagicMock:
            adapter = _make_adapter(name)

            async def _get_streams(*args: object, **kwargs: object) -> list:
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return []

            adapter.get_streams = _get_streams
            return adapter

        registry = _make_registry(*(_tracking_adapter(f"a{i}") for i in range(6)))

        await _make_uc(registry, max_concurrent_adapters=2).execute(movie_query)

        assert peak == 2
