"""Port for adapter discovery and access."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streamhound.domain.adapters.base import SiteAdapterProtocol


@runtime_checkable
class AdapterRegistryPort(Protocol):
    """Synchronous interface for adapter discovery, listing, and retrieval."""

    def discover(self) -> None: ...
    def list_names(self) -> list[str]: ...
    def get(self, name: str) -> SiteAdapterProtocol: ...
