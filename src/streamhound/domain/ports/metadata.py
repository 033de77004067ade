"""Port for catalog metadata lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamhound.domain.entities.streams import MediaType, TitleInfo


@runtime_checkable
class MetadataResolverPort(Protocol):
    """Async interface mapping a catalog ID to a display title and year."""

    async def resolve(
        self,
        catalog_id: str,
        media_type: MediaType,
        season: int | None = None,
    ) -> TitleInfo | None:
        """Resolve title/year and the site search query.

        Returns None when the item is unknown or the lookup failed.
        """
        ...
