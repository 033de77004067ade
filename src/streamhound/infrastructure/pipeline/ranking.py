"""Deduplication and quality ranking of one adapter's descriptors."""

from __future__ import annotations

from streamhound.domain.entities.streams import StreamDescriptor


def dedupe_by_url(streams: list[StreamDescriptor]) -> list[StreamDescriptor]:
    """Drop every descriptor whose URL already appeared earlier (first wins)."""
    seen: set[str] = set()
    result: list[StreamDescriptor] = []
    for s in streams:
        if s.url in seen:
            continue
        seen.add(s.url)
        result.append(s)
    return result


def rank_by_quality(streams: list[StreamDescriptor]) -> list[StreamDescriptor]:
    """Sort best tier first; equal tiers keep their original order."""
    return sorted(streams, key=lambda s: s.tier, reverse=True)


def dedupe_and_rank(streams: list[StreamDescriptor]) -> list[StreamDescriptor]:
    return rank_by_quality(dedupe_by_url(streams))
