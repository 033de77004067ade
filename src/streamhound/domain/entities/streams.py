"""Domain entities for stream resolution.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Literal

MediaType = Literal["movie", "tv"]

UNKNOWN_SIZE = "Unknown"


class QualityTier(IntEnum):
    """Ranked quality tiers (higher value = better quality)."""

    UNKNOWN = 0
    SD_480P = 1
    HD_720P = 2
    HD_1080P = 3
    UHD_4K = 4

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]

    @classmethod
    def from_label(cls, label: str | None) -> QualityTier:
        """Map a public label (``"4K"``, ``"1080p"``, ...) back to its tier."""
        if not label:
            return cls.UNKNOWN
        return _LABEL_TIERS.get(label.strip().lower(), cls.UNKNOWN)


_TIER_LABELS: dict[QualityTier, str] = {
    QualityTier.UNKNOWN: "Unknown",
    QualityTier.SD_480P: "480p",
    QualityTier.HD_720P: "720p",
    QualityTier.HD_1080P: "1080p",
    QualityTier.UHD_4K: "4K",
}

_LABEL_TIERS: dict[str, QualityTier] = {
    label.lower(): tier for tier, label in _TIER_LABELS.items()
}


@dataclass(frozen=True)
class AdapterQuery:
    """Input for one adapter invocation.

    ``season``/``episode`` are only meaningful for ``media_type == "tv"``.
    """

    catalog_id: str
    media_type: MediaType
    season: int | None = None
    episode: int | None = None

    @property
    def is_tv(self) -> bool:
        return self.media_type == "tv"

    @property
    def wants_episode(self) -> bool:
        """True when the episode filter applies to this query."""
        return self.is_tv and self.episode is not None


@dataclass(frozen=True)
class TitleInfo:
    """Display title and release year resolved from the metadata service."""

    title: str
    year: int | None = None
    query: str = ""


@dataclass(frozen=True)
class StreamCandidate:
    """Raw (url, label text) pair extracted from a site document.

    ``server`` is set when the site itself names the server (translator,
    hoster button text); empty means "classify from the URL".
    """

    url: str
    label_text: str
    server: str = ""


@dataclass(frozen=True)
class StreamDescriptor:
    """Normalized, classified, public stream record."""

    name: str  # "HDHub4u - HubCloud [1080p]"
    title: str  # "Oppenheimer (2023)"
    url: str
    quality: str  # QualityTier label
    provider: str  # adapter identifier, e.g. "hdhub4u"
    size: str = UNKNOWN_SIZE
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.url or "://" not in self.url:
            raise ValueError(f"Stream URL must be absolute, got: {self.url!r}")

    @property
    def tier(self) -> QualityTier:
        return QualityTier.from_label(self.quality)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "url": self.url,
            "quality": self.quality,
            "size": self.size,
            "headers": dict(self.headers),
            "provider": self.provider,
        }


@dataclass(frozen=True)
class RequestProfile:
    """Immutable default request headers for one adapter.

    Built once when the adapter is constructed and replayed on every
    outgoing request and on every descriptor the adapter emits.
    """

    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def as_dict(self) -> dict[str, str]:
        return dict(self.headers)
