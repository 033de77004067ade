"""Shared base class for httpx-based site adapters.

Holds everything the site adapters have in common: client lifecycle,
the immutable request profile, safe fetch/parse helpers, and the shared
pipeline (classify -> episode filter -> dedup -> rank) that turns raw
candidates into descriptors.  A site only supplies ``locate()`` and
``extract()``, plus ``_collect_candidates()`` when one located resource
needs several sub-fetches.

This base class lives in the *infrastructure* layer because it depends
on ``httpx`` and ``structlog``.  The *domain* layer only knows
``SiteAdapterProtocol``; adapters that inherit from ``HttpxAdapterBase``
structurally satisfy that Protocol.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Iterable

import httpx
import structlog

from streamhound.domain.entities.streams import (
    AdapterQuery,
    MediaType,
    QualityTier,
    RequestProfile,
    StreamCandidate,
    StreamDescriptor,
    TitleInfo,
)
from streamhound.domain.ports.metadata import MetadataResolverPort
from streamhound.infrastructure.pipeline import (
    classify_quality,
    classify_server,
    dedupe_and_rank,
    extract_size,
    gather_settled,
    matches_episode,
)

from .constants import (
    DEFAULT_ACCEPT,
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_MAX_SUBFETCHES,
    DEFAULT_USER_AGENT,
)


class HttpxAdapterBase:
    """Shared base for httpx-based site adapters.

    Subclasses **must** set:
    - ``name`` (stable provider identifier) and ``display_name``
    - ``_domains`` (list with at least one domain string)

    Subclasses **must** override:
    - ``locate()`` and ``extract()``

    Subclasses **may** override:
    - ``media_types``, ``requires_episode``, ``requires_title``,
      ``episode_scoped``, ``known_hosters``
    - ``_default_headers()``, ``_collect_candidates()``
    - ``_timeout``, ``_max_subfetches``, ``_user_agent``
    """

    # --- Must be set by subclass ---
    name: str = ""
    display_name: str = ""

    # --- Overridable defaults ---
    media_types: frozenset[str] = frozenset({"movie", "tv"})
    # TV requests without season AND episode short-circuit to [].
    requires_episode: bool = False
    # Resolve title/year via the metadata service before locating.
    requires_title: bool = False
    # The located resource already addresses one episode; skip label filter.
    episode_scoped: bool = False
    # URL fragment -> server display name, checked in order.
    known_hosters: dict[str, str] = {}  # noqa: RUF012  # subclass overrides

    _domains: list[str] = []  # noqa: RUF012  # subclass overrides
    _timeout: float = DEFAULT_CLIENT_TIMEOUT
    _max_subfetches: int = DEFAULT_MAX_SUBFETCHES
    _user_agent: str = DEFAULT_USER_AGENT

    def __init__(
        self,
        *,
        metadata: MetadataResolverPort | None = None,
        profile: RequestProfile | None = None,
    ) -> None:
        self._client: httpx.AsyncClient | None = None
        self._metadata = metadata
        self.base_url: str = f"https://{self._domains[0]}" if self._domains else ""
        self.profile: RequestProfile = profile or RequestProfile(
            self._default_headers()
        )
        self._log = structlog.get_logger(self.name or __name__)

    def _default_headers(self) -> dict[str, str]:
        """Request profile headers; built once at construction."""
        return {
            "User-Agent": self._user_agent,
            "Accept": DEFAULT_ACCEPT,
            "Referer": f"{self.base_url}/",
        }

    def attach_metadata(self, metadata: MetadataResolverPort | None) -> None:
        """Wire the metadata resolver (done once by the registry on load)."""
        self._metadata = metadata

    def apply_limits(self, *, timeout: float, max_subfetches: int) -> None:
        """Override the site timeout and sub-fetch bound before the first fetch."""
        self._timeout = timeout
        self._max_subfetches = max_subfetches

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create httpx client if not already running."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers=self.profile.as_dict(),
            )
        return self._client

    async def cleanup(self) -> None:
        """Close httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    async def _safe_fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        context: str = "",
        **kwargs: object,
    ) -> httpx.Response | None:
        """Fetch *url* with structured error logging.

        Returns ``None`` on failure instead of raising.
        """
        client = await self._ensure_client()
        try:
            handler = getattr(client, method.lower(), client.get)
            resp = await handler(url, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.TimeoutException:
            self._log.warning(
                f"{self.name}_timeout",
                url=url,
                context=context,
            )
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                f"{self.name}_http_error",
                url=url,
                status=exc.response.status_code,
                context=context,
            )
        except Exception as exc:  # noqa: BLE001
            self._log.warning(
                f"{self.name}_fetch_error",
                url=url,
                error=str(exc),
                context=context,
            )
        return None

    def _safe_parse_json(
        self,
        response: httpx.Response,
        context: str = "",
    ) -> dict | list | None:
        """Parse JSON response with structured error logging."""
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError):
            self._log.warning(
                f"{self.name}_invalid_json",
                url=str(response.url),
                context=context,
            )
            return None

    async def _fan_out(
        self,
        jobs: Iterable[Awaitable[list[StreamCandidate]]],
        *,
        label: str,
    ) -> list[StreamCandidate]:
        """Run sub-fetches concurrently; failed ones contribute nothing."""
        return await gather_settled(
            jobs,
            label=f"{self.name}_{label}",
            max_concurrent=self._max_subfetches,
        )

    # ------------------------------------------------------------------
    # Site-specific operations
    # ------------------------------------------------------------------

    async def locate(
        self, query: AdapterQuery, title_info: TitleInfo | None
    ) -> str | None:
        """Return the URL of the resource listing candidates, or None.

        Subclasses **must** override this method.
        """
        raise NotImplementedError(f"{type(self).__name__}.locate() not implemented")

    def extract(self, document: str, context: str) -> list[StreamCandidate]:
        """Return raw candidates found in *document*.

        Subclasses **must** override this method.
        """
        raise NotImplementedError(f"{type(self).__name__}.extract() not implemented")

    async def _collect_candidates(
        self, query: AdapterQuery, handle: str
    ) -> list[StreamCandidate]:
        """Fetch the located resource and extract candidates from it."""
        resp = await self._safe_fetch(handle, context="content")
        if resp is None:
            return []
        return self.extract(resp.text, handle)

    # ------------------------------------------------------------------
    # Shared pipeline
    # ------------------------------------------------------------------

    def _can_handle(self, query: AdapterQuery) -> bool:
        """Short-circuit check run before any fetch."""
        if query.media_type not in self.media_types:
            return False
        if query.is_tv and self.requires_episode:
            return query.season is not None and query.episode is not None
        return True

    async def _resolve_title(self, query: AdapterQuery) -> TitleInfo | None:
        if self._metadata is None:
            return None
        try:
            return await self._metadata.resolve(
                query.catalog_id, query.media_type, query.season
            )
        except Exception:  # noqa: BLE001
            self._log.warning(
                f"{self.name}_metadata_failed",
                catalog_id=query.catalog_id,
                exc_info=True,
            )
            return None

    def _display_title(
        self,
        query: AdapterQuery,
        title_info: TitleInfo | None,
        tier: QualityTier,
    ) -> str:
        base = title_info.title if title_info else self.display_name
        if query.is_tv and query.season is not None and query.episode is not None:
            return f"{base} S{query.season:02d}E{query.episode:02d}"
        if title_info is None:
            return f"{base} {tier.label}"
        if title_info.year:
            return f"{base} ({title_info.year})"
        return base

    def _to_descriptor(
        self,
        candidate: StreamCandidate,
        query: AdapterQuery,
        title_info: TitleInfo | None,
    ) -> StreamDescriptor | None:
        """Classify one candidate; None when it fails the episode filter."""
        if (
            query.wants_episode
            and not self.episode_scoped
            and not matches_episode(candidate.label_text, query.episode)
        ):
            return None

        tier = classify_quality(candidate.label_text)
        server = candidate.server or classify_server(candidate.url, self.known_hosters)
        return StreamDescriptor(
            name=f"{self.display_name} - {server} [{tier.label}]",
            title=self._display_title(query, title_info, tier),
            url=candidate.url,
            quality=tier.label,
            size=extract_size(candidate.label_text),
            headers=self.profile.as_dict(),
            provider=self.name,
        )

    def build_streams(
        self,
        candidates: list[StreamCandidate],
        query: AdapterQuery,
        title_info: TitleInfo | None = None,
    ) -> list[StreamDescriptor]:
        """Classify, filter, deduplicate and rank *candidates*."""
        streams: list[StreamDescriptor] = []
        for candidate in candidates:
            descriptor = self._to_descriptor(candidate, query, title_info)
            if descriptor is not None:
                streams.append(descriptor)
        return dedupe_and_rank(streams)

    async def _run(self, query: AdapterQuery) -> list[StreamDescriptor]:
        if not self._can_handle(query):
            self._log.debug(
                f"{self.name}_query_unsupported",
                media_type=query.media_type,
                season=query.season,
                episode=query.episode,
            )
            return []

        title_info: TitleInfo | None = None
        if self.requires_title:
            title_info = await self._resolve_title(query)
            if title_info is None:
                self._log.info(
                    f"{self.name}_title_unresolved", catalog_id=query.catalog_id
                )
                return []

        handle = await self.locate(query, title_info)
        if not handle:
            self._log.info(f"{self.name}_no_content", catalog_id=query.catalog_id)
            return []

        candidates = await self._collect_candidates(query, handle)
        streams = self.build_streams(candidates, query, title_info)
        self._log.info(
            f"{self.name}_streams_found",
            catalog_id=query.catalog_id,
            candidates=len(candidates),
            streams=len(streams),
        )
        return streams

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    async def get_streams(
        self,
        catalog_id: str,
        media_type: MediaType,
        season: int | None = None,
        episode: int | None = None,
    ) -> list[StreamDescriptor]:
        """Resolve ranked stream descriptors for one item.

        Never raises: every failure is logged and downgraded to ``[]``.
        """
        query = AdapterQuery(
            catalog_id=str(catalog_id),
            media_type=media_type,
            season=season,
            episode=episode,
        )
        try:
            return await self._run(query)
        except Exception:  # noqa: BLE001
            self._log.error(
                f"{self.name}_get_streams_failed",
                catalog_id=query.catalog_id,
                exc_info=True,
            )
            return []
