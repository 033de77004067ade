"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streamhound.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streamhound.application.use_cases.stream_lookup import StreamLookupUseCase
    from streamhound.domain.ports import MetadataResolverPort
    from streamhound.infrastructure.adapters import AdapterRegistry


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Metadata (optional; requires a TMDB API key)
    metadata: MetadataResolverPort | None

    # Adapters
    adapters: AdapterRegistry

    # Application Services
    stream_lookup_uc: StreamLookupUseCase
