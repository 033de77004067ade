"""hdhub4u Python adapter for Streamhound.

Search-based site for movies and TV seasons:
- title/year resolved through TMDB, then GET /?s={title year}
- first on-site result whose link text looks like a release (1080p, 4K,
  WEB-DL) or carries the title's first word wins
- the release page lists hoster links (HubCloud, Pixeldrain, StreamTape,
  HubDrive) inside h3/h4 headings and download buttons
- season pages list every episode, so TV candidates go through the
  episode label filter
"""

from __future__ import annotations

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
_DOMAINS = ["hdhub4u.rehab"]

# Result containers on the search page, in priority order.
_SEARCH_RESULT_SELECTOR = "article .entry-header a, .movie-item a, h2 a, h3 a"

# Hoster links on a release page.
_DOWNLOAD_LINK_SELECTOR = (
    "h3 a, h4 a, .download-btn a, "
    'a[href*="hubcloud"], a[href*="pixeldrain"], '
    'a[href*="streamtape"], a[href*="hubdrive"]'
)

# Link text that marks a search hit as a release page.
_RELEASE_MARKERS = ("1080p", "4k", "web-dl")


class HdHub4uAdapter(HttpxAdapterBase):
    """Search-based adapter for hdhub4u."""

    name = "hdhub4u"
    display_name = "HDHub4u"
    requires_title = True
    known_hosters = {  # noqa: RUF012
        "hubcloud": "HubCloud",
        "pixeldrain": "Pixeldrain",
        "streamtape": "StreamTape",
        "hubdrive": "HubDrive",
    }

    _domains = _DOMAINS

    async def locate(
        self, query: AdapterQuery, title_info: TitleInfo | None
    ) -> str | None:
        """Search the site and return the first matching release page."""
        if title_info is None or not title_info.query:
            return None

        resp = await self._safe_fetch(
            f"{self.base_url}/",
            params={"s": title_info.query},
            context="search",
        )
        if resp is None:
            return None

        hit = self._pick_result(resp.text, title_info.query)
        if hit is None:
            self._log.info("hdhub4u_search_no_match", query=title_info.query)
            return None

        self._log.debug("hdhub4u_search_match", query=title_info.query, url=hit)
        return hit

    def _pick_result(self, html: str, search_query: str) -> str | None:
        words = search_query.lower().split()
        first_word = words[0] if words else ""
        markers = (*_RELEASE_MARKERS, first_word) if first_word else _RELEASE_MARKERS

        root = parse_html(html)
        links = extract_links(root, _SEARCH_RESULT_SELECTOR, base_url=self.base_url)
        for link in links:
            if not self._is_on_site(link["href"]):
                continue
            text = link["text"].lower()
            if any(marker in text for marker in markers):
                return link["href"]
        return None

    def _is_on_site(self, url: str) -> bool:
        return url == self.base_url or url.startswith(f"{self.base_url}/")

    def extract(self, document: str, context: str) -> list[StreamCandidate]:
        """Hoster links from a release page; label is link + heading text."""
        root = parse_html(document)
        return [
            StreamCandidate(url=link["href"], label_text=link["label"])
            for link in extract_links(
                root, _DOWNLOAD_LINK_SELECTOR, base_url=self.base_url
            )
        ]


adapter = HdHub4uAdapter()
