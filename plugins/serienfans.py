"""serienfans.org Python adapter for Streamhound.

German TV series site, episodes only:
- catalog IDs map to series slugs through a pre-seeded registry; an
  unknown ID yields nothing (no guessing, no request)
- the show page at /{slug} embeds the internal series id in an inline
  ``initSeason('<id>', ...)`` call
- POST /api/series/{id}/episode (form-encoded) returns an HTML fragment
  with hoster links for exactly one episode
"""

from __future__ import annotations

import re

from streamhound.domain.entities.streams import (
    AdapterQuery,
    StreamCandidate,
    TitleInfo,
)
from streamhound.infrastructure.adapters.httpx_base import HttpxAdapterBase
from streamhound.infrastructure.common.html_selectors import extract_links, parse_html

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["serienfans.org"]

# Catalog ID -> series slug.
_SERIES_SLUGS: dict[str, str] = {
    "3916": "dexter",
}

_EPISODE_LANG = "DE"
_EPISODE_QUALITY = "ALL"

_HOSTER_LINK_SELECTOR = (
    'a.hoster, .stream-link a, a[href*="voe"], a[href*="mixdrop"], a[href*="dood"]'
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# initSeason('series_id', ...) in the show page's inline script
_INIT_SEASON_RE = re.compile(r"initSeason\(\s*'([^']+)'")

_API_HEADERS = {
    "X-Requested-With": "XMLHttpRequest",
    "Content-Type": "application/x-www-form-urlencoded",
}


class SerienfansAdapter(HttpxAdapterBase):
    """Registry-based adapter for serienfans.org (TV only)."""

    name = "serienfans"
    display_name = "SerienFans"
    media_types = frozenset({"tv"})
    requires_episode = True
    episode_scoped = True
    known_hosters = {  # noqa: RUF012
        "voe": "VOE",
        "mixdrop": "Mixdrop",
        "dood": "DoodStream",
    }

    _domains = _DOMAINS

    def __init__(self, *, series_slugs: dict[str, str] | None = None, **kwargs):
        super().__init__(**kwargs)
        self.series_slugs: dict[str, str] = dict(
            _SERIES_SLUGS if series_slugs is None else series_slugs
        )

    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        headers.update(
            {
                "Accept-Language": "de-DE,de;q=0.9,en;q=0.8",
                "Accept-Encoding": "gzip, deflate",
                "Origin": self.base_url,
                "Sec-Fetch-Dest": "document",
                "Sec-Fetch-Mode": "navigate",
                "Sec-Fetch-Site": "none",
                "Cache-Control": "max-age=0",
            }
        )
        return headers

    async def locate(
        self, query: AdapterQuery, title_info: TitleInfo | None
    ) -> str | None:
        slug = self.series_slugs.get(query.catalog_id)
        if slug is None:
            self._log.debug("serienfans_unknown_series", catalog_id=query.catalog_id)
            return None
        return f"{self.base_url}/{slug}"

    async def _collect_candidates(
        self, query: AdapterQuery, handle: str
    ) -> list[StreamCandidate]:
        resp = await self._safe_fetch(handle, context="show_page")
        if resp is None:
            return []

        m = _INIT_SEASON_RE.search(resp.text)
        if not m:
            self._log.warning("serienfans_no_series_id", url=handle)
            return []
        series_id = m.group(1)

        api_resp = await self._safe_fetch(
            f"{self.base_url}/api/series/{series_id}/episode",
            method="POST",
            data={
                "series_id": series_id,
                "season": str(query.season),
                "episode": str(query.episode),
                "lang": _EPISODE_LANG,
                "quality": _EPISODE_QUALITY,
            },
            headers=_API_HEADERS,
            context="episode_api",
        )
        if api_resp is None:
            return []
        return self.extract(api_resp.text, handle)

    def extract(self, document: str, context: str) -> list[StreamCandidate]:
        """Hoster links from the episode fragment.

        The link text names the hoster; quality markers sit in the
        surrounding row.
        """
        root = parse_html(document)
        return [
            StreamCandidate(
                url=link["href"], label_text=link["label"], server=link["text"]
            )
            for link in extract_links(
                root, _HOSTER_LINK_SELECTOR, base_url=self.base_url
            )
        ]


adapter = SerienfansAdapter()
