"""TMDB API client: async httpx implementation of MetadataResolverPort."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streamhound.domain.entities.streams import MediaType, TitleInfo

log = structlog.get_logger(__name__)

_BASE_URL = "https://api.themoviedb.org/3"
_DEFAULT_LANGUAGE = "en-US"


def build_search_query(
    title: str,
    year: int | None,
    media_type: MediaType,
    season: int | None = None,
) -> str:
    """Site search text: ``"Dexter Season 1 2006"`` or ``"Oppenheimer 2023"``."""
    year_part = str(year) if year else ""
    if media_type == "tv" and season:
        return f"{title} Season {season} {year_part}".strip()
    return f"{title} {year_part}".strip()


def _year_of(date_str: Any) -> int | None:
    if isinstance(date_str, str) and len(date_str) >= 4 and date_str[:4].isdigit():
        return int(date_str[:4])
    return None


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``MetadataResolverPort`` from domain.ports.metadata.
    Catalog IDs are TMDB numeric IDs; IDs starting with ``tt`` are
    treated as IMDb IDs and resolved through ``/find``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        language: str = _DEFAULT_LANGUAGE,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._language = language

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"api_key": self._api_key, "language": self._language, **extra}

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{_BASE_URL}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

        if not isinstance(data, dict):
            log.warning("tmdb_unexpected_payload", path=path)
            return None
        return data

    async def _find_by_imdb_id(
        self, imdb_id: str, media_type: MediaType
    ) -> dict[str, Any] | None:
        data = await self._get(f"/find/{imdb_id}", external_source="imdb_id")
        if data is None:
            return None

        # /find groups results by media type; prefer the requested one.
        order = (
            ("tv_results", "movie_results")
            if media_type == "tv"
            else ("movie_results", "tv_results")
        )
        for key in order:
            results = data.get(key) or []
            if results and isinstance(results[0], dict):
                return results[0]
        return None

    # ------------------------------------------------------------------
    # Public API (MetadataResolverPort)
    # ------------------------------------------------------------------

    async def resolve(
        self,
        catalog_id: str,
        media_type: MediaType,
        season: int | None = None,
    ) -> TitleInfo | None:
        """Title, year and site search query for *catalog_id*, or None."""
        if catalog_id.startswith("tt"):
            item = await self._find_by_imdb_id(catalog_id, media_type)
        else:
            endpoint = "tv" if media_type == "tv" else "movie"
            item = await self._get(f"/{endpoint}/{catalog_id}")
        if item is None:
            return None

        if media_type == "tv":
            title = item.get("name") or item.get("title")
            year = _year_of(item.get("first_air_date") or item.get("release_date"))
        else:
            title = item.get("title") or item.get("name")
            year = _year_of(item.get("release_date") or item.get("first_air_date"))
        if not title:
            log.info("tmdb_title_missing", catalog_id=catalog_id)
            return None

        query = build_search_query(title, year, media_type, season)
        log.debug("tmdb_title_resolved", catalog_id=catalog_id, query=query)
        return TitleInfo(title=title, year=year, query=query)
