"""Protocols for site adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamhound.domain.entities.streams import MediaType, StreamDescriptor


@runtime_checkable
class SiteAdapterProtocol(Protocol):
    """
    Protocol for site adapters.

    An adapter module must export a module-level variable named `adapter` that:
    - has a `name: str` attribute
    - implements: async def get_streams(catalog_id, media_type, season, episode)
      -> list[StreamDescriptor], which never raises
    """

    name: str

    async def get_streams(
        self,
        catalog_id: str,
        media_type: MediaType,
        season: int | None = None,
        episode: int | None = None,
    ) -> list[StreamDescriptor]: ...
