"""Adapter registry with lazy loading and in-memory caching."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

import structlog

from streamhound.domain.adapters import (
    AdapterLoadError,
    AdapterNotFoundError,
    DuplicateAdapterError,
    SiteAdapterProtocol,
)
from streamhound.domain.ports.metadata import MetadataResolverPort

from .loader import load_python_adapter

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _AdapterRef:
    path: Path


class AdapterRegistry:
    """
    Lazy-loading adapter registry.

    discover():
      - indexes ``*.py`` files only (no Python execution)

    get()/load_all()/list_names():
      - import on demand; each file is imported at most once and the
        resulting adapter is cached by path
    """

    def __init__(
        self,
        adapter_dir: Path,
        *,
        metadata: MetadataResolverPort | None = None,
        disabled: Iterable[str] = (),
    ) -> None:
        self._adapter_dir = adapter_dir
        self._metadata = metadata
        self._disabled: frozenset[str] = frozenset(disabled)
        self._discovered: bool = False
        self._refs: list[_AdapterRef] = []

        self._by_path: dict[Path, SiteAdapterProtocol] = {}
        self._failed: set[Path] = set()

    @property
    def adapter_dir(self) -> Path:
        return self._adapter_dir

    def discover(self) -> None:
        if self._discovered:
            return

        self._discovered = True
        self._refs = []

        if not self._adapter_dir.is_dir():
            log.warning(
                "adapter_directory_not_found", directory=str(self._adapter_dir)
            )
            return

        for path in sorted(self._adapter_dir.iterdir(), key=lambda p: p.name):
            if path.is_dir() or path.suffix.lower() != ".py":
                continue
            if path.name.startswith("_"):
                continue
            self._refs.append(_AdapterRef(path=path))

        log.info(
            "adapters_discovered",
            count=len(self._refs),
            directory=str(self._adapter_dir),
        )

        if not self._refs:
            log.warning("no_adapters_found", directory=str(self._adapter_dir))

    def list_names(self) -> list[str]:
        """Sorted names of every loadable, enabled adapter."""
        self.discover()

        names: set[str] = set()
        for ref in self._refs:
            name = self._peek_name(ref)
            if name is None or name in self._disabled:
                continue
            # duplicates are surfaced on load_all()
            names.add(name)
        return sorted(names)

    def get(self, name: str) -> SiteAdapterProtocol:
        self.discover()

        if name not in self._disabled:
            for ref in self._refs:
                if self._peek_name(ref) == name:
                    return self._by_path[ref.path]

        raise AdapterNotFoundError(f"Adapter '{name}' not found")

    def load_all(self) -> None:
        """
        Force-load all discovered adapters.

        Raises AdapterLoadError for a broken module and
        DuplicateAdapterError when two files export the same name.
        """
        self.discover()

        loaded_names: set[str] = set()
        for ref in self._refs:
            adapter = self._load(ref)
            if adapter.name in loaded_names:
                raise DuplicateAdapterError(
                    f"Adapter name '{adapter.name}' already exists"
                )
            loaded_names.add(adapter.name)

    def remove(self, name: str) -> None:
        """Forget an adapter; later lookups raise AdapterNotFoundError.

        A loaded instance stays cached so cleanup() still closes it.
        """
        self.discover()

        for ref in list(self._refs):
            if self._peek_name(ref) == name:
                self._refs.remove(ref)
                log.info("adapter_removed", adapter=name)
                return

        raise AdapterNotFoundError(f"Adapter '{name}' not found")

    async def cleanup(self) -> None:
        """Close the HTTP clients of every loaded adapter."""
        for adapter in self._by_path.values():
            close = getattr(adapter, "cleanup", None)
            if close is None:
                continue
            try:
                await close()
            except Exception:  # noqa: BLE001
                log.warning(
                    "adapter_cleanup_failed", adapter=adapter.name, exc_info=True
                )

    def _load(self, ref: _AdapterRef) -> SiteAdapterProtocol:
        cached = self._by_path.get(ref.path)
        if cached is not None:
            return cached

        adapter = load_python_adapter(ref.path)
        attach = getattr(adapter, "attach_metadata", None)
        if attach is not None:
            attach(self._metadata)
        self._by_path[ref.path] = adapter
        log.info("adapter_loaded", adapter=adapter.name, adapter_file=ref.path.name)
        return adapter

    def _peek_name(self, ref: _AdapterRef) -> str | None:
        """
        Name of the adapter in *ref*, importing it on first use.

        A module that fails to load is remembered and skipped afterwards.
        """
        if ref.path in self._failed:
            return None
        try:
            return self._load(ref).name
        except AdapterLoadError:
            self._failed.add(ref.path)
            return None
