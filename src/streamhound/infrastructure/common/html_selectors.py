"""CSS-selector-based HTML extraction helpers.

Thin helpers over BeautifulSoup shared by the site adapters.  Selectors
are adapter configuration; these functions only know how to apply them.
Every selection function accepts a primary selector and optional
*fallback_selectors*: the first selector that yields at least one match
wins.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML string into a BeautifulSoup tree (``lxml`` parser)."""
    return BeautifulSoup(html, "lxml")


def select_items(
    root: BeautifulSoup | Tag,
    selector: str,
    *fallback_selectors: str,
) -> list[Tag]:
    """Select elements via CSS with a fallback chain.

    Tries each selector in order.  Returns results from the **first**
    selector that matches at least one element.  A comma-separated
    selector returns its matches in document order.
    """
    for sel in (selector, *fallback_selectors):
        items = root.select(sel)
        if items:
            return items
    return []


def extract_attr(
    element: Tag,
    selector: str,
    attr: str,
    *fallback_selectors: str,
    default: str = "",
) -> str:
    """Extract an HTML attribute from the first matching child element.

    With ``selector=""`` the attribute is read from *element* itself.
    """
    if selector == "":
        val = element.get(attr)
        return str(val) if val else default

    for sel in (selector, *fallback_selectors):
        match = element.select_one(sel)
        if match:
            val = match.get(attr)
            if val:
                return str(val)
    return default


def resolve_href(href: str | None, base_url: str) -> str | None:
    """Return *href* as an absolute http(s) URL, or None.

    Relative paths are joined onto *base_url*; ``javascript:``,
    ``mailto:``, fragments and other schemes are discarded.
    """
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#"):
        return None
    absolute = urljoin(f"{base_url.rstrip('/')}/", href) if base_url else href
    parsed = urlparse(absolute)
    if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.netloc:
        return None
    return absolute


def anchor_label(tag: Tag) -> str:
    """Text of *tag* followed by the text of its immediate container.

    Quality and episode markers often sit next to the link rather than
    inside it, so classification looks at both.
    """
    own = tag.get_text(" ", strip=True)
    parent = tag.parent
    container = parent.get_text(" ", strip=True) if isinstance(parent, Tag) else ""
    return f"{own} {container}".strip()


def extract_links(
    root: BeautifulSoup | Tag,
    selector: str = "a[href]",
    *fallback_selectors: str,
    base_url: str = "",
) -> list[dict[str, str]]:
    """Extract all absolute links matching *selector*.

    Returns a list of ``{"text": ..., "href": ..., "label": ...}`` dicts,
    where ``label`` is the :func:`anchor_label` context.
    """
    results: list[dict[str, str]] = []
    for tag in select_items(root, selector, *fallback_selectors):
        href = resolve_href(_attr_str(tag, "href"), base_url)
        if href is None:
            continue
        results.append(
            {
                "text": tag.get_text(" ", strip=True),
                "href": href,
                "label": anchor_label(tag),
            }
        )
    return results


def _attr_str(tag: Tag, attr: str) -> str | None:
    val = tag.get(attr)
    if val is None:
        return None
    if isinstance(val, list):
        return " ".join(val)
    return str(val)
