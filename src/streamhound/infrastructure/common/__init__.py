from .html_selectors import (
    anchor_label,
    extract_attr,
    extract_links,
    parse_html,
    resolve_href,
    select_items,
)

__all__ = [
    "anchor_label",
    "extract_attr",
    "extract_links",
    "parse_html",
    "resolve_href",
    "select_items",
]
