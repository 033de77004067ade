"""Shared test fixtures for the Streamhound test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from streamhound.domain.entities.streams import (
    AdapterQuery,
    StreamDescriptor,
    TitleInfo,
)


class FakeMetadata:
    """MetadataResolverPort stand-in returning a fixed TitleInfo."""

    def __init__(self, info: TitleInfo | None) -> None:
        self.info = info
        self.calls: list[tuple[str, str, int | None]] = []

    async def resolve(
        self, catalog_id: str, media_type: str, season: int | None = None
    ) -> TitleInfo | None:
        self.calls.append((catalog_id, media_type, season))
        return self.info


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_query() -> AdapterQuery:
    return AdapterQuery(catalog_id="872585", media_type="movie")


@pytest.fixture()
def episode_query() -> AdapterQuery:
    return AdapterQuery(catalog_id="3916", media_type="tv", season=1, episode=5)


@pytest.fixture()
def oppenheimer() -> TitleInfo:
    return TitleInfo(title="Oppenheimer", year=2023, query="Oppenheimer 2023")


@pytest.fixture()
def fake_metadata() -> Callable[[TitleInfo | None], FakeMetadata]:
    """Factory for a metadata resolver with a canned answer."""
    return FakeMetadata


@pytest.fixture()
def make_descriptor() -> Callable[..., StreamDescriptor]:
    """Factory for StreamDescriptor with sensible defaults."""

    def _make(url: str, quality: str = "720p", **kwargs: object) -> StreamDescriptor:
        fields: dict[str, object] = {
            "name": f"Test - Direct [{quality}]",
            "title": "Test",
            "provider": "test",
        }
        fields.update(kwargs)
        fields["url"] = url
        fields["quality"] = quality
        return StreamDescriptor(**fields)  # type: ignore[arg-type]

    return _make
