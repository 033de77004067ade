"""Tests for URL dedup and quality ranking."""

from __future__ import annotations

from streamhound.domain.entities.streams import QualityTier
from streamhound.infrastructure.pipeline import (
    dedupe_and_rank,
    dedupe_by_url,
    rank_by_quality,
)


class TestDedupeByUrl:
    def test_first_occurrence_wins(self, make_descriptor) -> None:
        first = make_descriptor("https://host/x", quality="720p", name="first")
        second = make_descriptor("https://host/x", quality="4K", name="second")
        out = dedupe_by_url([first, second])
        assert out == [first]

    def test_preserves_order_of_unique_urls(self, make_descriptor) -> None:
        a = make_descriptor("https://host/a")
        b = make_descriptor("https://host/b")
        c = make_descriptor("https://host/c")
        assert dedupe_by_url([a, b, a, c, b]) == [a, b, c]

    def test_empty(self) -> None:
        assert dedupe_by_url([]) == []


class TestRankByQuality:
    def test_descending_tiers(self, make_descriptor) -> None:
        streams = [
            make_descriptor("https://h/1", quality="480p"),
            make_descriptor("https://h/2", quality="4K"),
            make_descriptor("https://h/3", quality="720p"),
            make_descriptor("https://h/4", quality="1080p"),
        ]
        ranked = rank_by_quality(streams)
        assert [s.quality for s in ranked] == ["4K", "1080p", "720p", "480p"]

    def test_stable_within_tier(self, make_descriptor) -> None:
        a = make_descriptor("https://h/a", quality="1080p")
        b = make_descriptor("https://h/b", quality="1080p")
        c = make_descriptor("https://h/c", quality="1080p")
        assert rank_by_quality([a, b, c]) == [a, b, c]

    def test_unknown_sorts_last(self, make_descriptor) -> None:
        odd = make_descriptor("https://h/odd", quality="weird")
        sd = make_descriptor("https://h/sd", quality="480p")
        assert rank_by_quality([odd, sd]) == [sd, odd]


class TestDedupeAndRank:
    def test_output_invariants(self, make_descriptor) -> None:
        streams = [
            make_descriptor("https://h/1", quality="720p"),
            make_descriptor("https://h/2", quality="4K"),
            make_descriptor("https://h/1", quality="1080p"),
            make_descriptor("https://h/3", quality="1080p"),
        ]
        out = dedupe_and_rank(streams)

        urls = [s.url for s in out]
        assert len(urls) == len(set(urls))
        tiers = [s.tier for s in out]
        assert tiers == sorted(tiers, reverse=True)
        # the first https://h/1 (720p) survived, not the later 1080p copy
        first = next(s for s in out if s.url == "https://h/1")
        assert first.tier is QualityTier.HD_720P
