"""hdrezka Python adapter for Streamhound.

Direct-path site, no search step:
- movies live at /films/{id}/watching.html
- episodes live at /series/{id}-{season}-{episode}/watching.html
- the watching page lists translators (``.translators .item`` with a
  ``data-id``); each translator's files come from the CDN endpoint
  GET /ajax/get_cdn_series/ as JSON ``{"ok": true, "data": [{file, label}]}``,
  decoded by the base JSON helper before extraction
- one CDN request per translator, fetched concurrently; a failing
  translator never hides the others
"""

from __future__ import annotations

from streamhound.domain.entities.streams import (
    AdapterQuery,
    StreamCandidate,
    TitleInfo,
)
from streamhound.infrastructure.adapters.httpx_base import HttpxAdapterBase
from streamhound.infrastructure.common.html_selectors import (
    extract_attr,
    parse_html,
    resolve_href,
    select_items,
)

# ---------------------------------------------------------------------------
# Configurable settings
# ---------------------------------------------------------------------------
_DOMAINS = ["hdrezka.ag"]

_TRANSLATOR_SELECTOR = ".translators .item"
_CDN_PATH = "/ajax/get_cdn_series/"


class HdRezkaAdapter(HttpxAdapterBase):
    """Direct-path adapter for hdrezka with per-translator fan-out."""

    name = "hdrezka"
    display_name = "HDRezka"
    requires_episode = True
    episode_scoped = True

    _domains = _DOMAINS

    def _default_headers(self) -> dict[str, str]:
        headers = super()._default_headers()
        headers.update(
            {
                "Accept-Language": "en-US,en;q=0.5",
                "Referer": self.base_url,
                "Sec-Fetch-Mode": "navigate",
            }
        )
        return headers

    async def locate(
        self, query: AdapterQuery, title_info: TitleInfo | None
    ) -> str | None:
        if query.is_tv:
            return (
                f"{self.base_url}/series/"
                f"{query.catalog_id}-{query.season}-{query.episode}/watching.html"
            )
        return f"{self.base_url}/films/{query.catalog_id}/watching.html"

    async def _collect_candidates(
        self, query: AdapterQuery, handle: str
    ) -> list[StreamCandidate]:
        resp = await self._safe_fetch(handle, context="watching_page")
        if resp is None:
            return []

        translators = self._parse_translators(resp.text)
        if not translators:
            self._log.info("hdrezka_no_translators", url=handle)
            return []

        self._log.debug(
            "hdrezka_translators", url=handle, count=len(translators)
        )
        return await self._fan_out(
            (
                self._fetch_translator(query, tid, tname)
                for tid, tname in translators
            ),
            label="translator",
        )

    def _parse_translators(self, html: str) -> list[tuple[str, str]]:
        """``(data-id, display name)`` for every translator on the page."""
        root = parse_html(html)
        translators: list[tuple[str, str]] = []
        for item in select_items(root, _TRANSLATOR_SELECTOR):
            tid = extract_attr(item, "", "data-id")
            if not tid:
                continue
            tname = item.get_text(" ", strip=True) or tid
            translators.append((tid, tname))
        return translators

    async def _fetch_translator(
        self, query: AdapterQuery, translator_id: str, translator_name: str
    ) -> list[StreamCandidate]:
        params = {
            "translator_id": translator_id,
            "title": query.catalog_id,
            "season": query.season or 0,
            "episode": query.episode or 0,
        }
        context = f"translator:{translator_id}"
        resp = await self._safe_fetch(
            f"{self.base_url}{_CDN_PATH}", params=params, context=context
        )
        if resp is None:
            return []
        payload = self._safe_parse_json(resp, context=context)
        if payload is None:
            return []
        return self.extract(payload, translator_name)

    def extract(self, document: object, context: str) -> list[StreamCandidate]:
        """Files from one decoded CDN payload; *context* is the translator name."""
        if not isinstance(document, dict) or not document.get("ok"):
            return []
        items = document.get("data")
        if not isinstance(items, list):
            return []

        candidates: list[StreamCandidate] = []
        for item in items:
            if not isinstance(item, dict) or not isinstance(item.get("file"), str):
                continue
            url = resolve_href(item["file"], self.base_url)
            if url is None:
                continue
            candidates.append(
                StreamCandidate(
                    url=url,
                    label_text=str(item.get("label") or ""),
                    server=context,
                )
            )
        return candidates


adapter = HdRezkaAdapter()
