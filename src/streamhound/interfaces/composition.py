"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streamhound.application.use_cases.stream_lookup import StreamLookupUseCase
from streamhound.infrastructure.adapters import AdapterRegistry, HttpxAdapterBase
from streamhound.infrastructure.config.schema import AppConfig
from streamhound.infrastructure.tmdb.client import HttpxTmdbClient
from streamhound.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _apply_adapter_limits(adapters: AdapterRegistry, config: AppConfig) -> None:
    """Push the HTTP timeout and sub-fetch limit into every loaded adapter.

    The User-Agent stays per adapter; ``http.user_agent`` only applies to
    the shared metadata client.
    """
    timeout = config.http_timeout_seconds
    limit = config.streams.max_concurrent_subfetches
    for name in adapters.list_names():
        adapter = adapters.get(name)
        if isinstance(adapter, HttpxAdapterBase):
            adapter.apply_limits(timeout=timeout, max_subfetches=limit)
    log.debug(
        "adapter_limits_applied",
        timeout_seconds=timeout,
        max_concurrent_subfetches=limit,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (required by the metadata resolver)
        2. Metadata resolver (optional, wired into adapters on load)
        3. Adapter Registry
        4. Stream lookup use case
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Shared HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    log.info("http_client_initialized")

    # 2) Metadata resolver
    if config.tmdb_api_key:
        state.metadata = HttpxTmdbClient(
            api_key=config.tmdb_api_key,
            http_client=state.http_client,
            language=config.tmdb_language,
        )
        log.info("tmdb_client_initialized", language=config.tmdb_language)
    else:
        state.metadata = None
        log.warning(
            "tmdb_client_disabled",
            reason="no API key, title-based adapters will return no streams",
        )

    # 3) Adapter registry
    state.adapters = AdapterRegistry(
        config.adapter_dir,
        metadata=state.metadata,
        disabled=config.disabled_adapters,
    )
    state.adapters.discover()
    _apply_adapter_limits(state.adapters, config)
    log.info("adapters_ready", adapters=state.adapters.list_names())

    # 4) Use case
    state.stream_lookup_uc = StreamLookupUseCase(
        adapters=state.adapters,
        config=config.streams,
    )
    log.info("stream_lookup_initialized")

    try:
        yield
    finally:
        await state.adapters.cleanup()
        await state.http_client.aclose()
        log.info("app_shutdown")
