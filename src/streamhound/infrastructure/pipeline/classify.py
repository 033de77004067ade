"""Label-substring classification shared by all site adapters.

Quality tier and server name are derived from plain text rules so every
adapter classifies the same label the same way.  Episode relevance is a
conservative match: a label without a marker for the requested episode
is never attributed to it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from functools import lru_cache
from urllib.parse import urlparse

from streamhound.domain.entities.streams import UNKNOWN_SIZE, QualityTier

DEFAULT_SERVER = "Direct"

# Checked top to bottom; the first tier with a matching marker wins.
# Markers are plain substrings, except that "sd" must start a word
# ("SDRip" matches, "Wednesday" does not).
_QUALITY_RULES: tuple[tuple[QualityTier, re.Pattern[str]], ...] = (
    (QualityTier.UHD_4K, re.compile(r"2160|4k|uhd")),
    (QualityTier.HD_1080P, re.compile(r"1080|fhd")),
    (QualityTier.HD_720P, re.compile(r"720")),
    (QualityTier.SD_480P, re.compile(r"480|(?<![a-z])sd")),
)

DEFAULT_QUALITY = QualityTier.HD_720P


def classify_quality(text: str) -> QualityTier:
    """Map label text to a quality tier (720p when no marker is present)."""
    lowered = text.lower()
    for tier, pattern in _QUALITY_RULES:
        if pattern.search(lowered):
            return tier
    return DEFAULT_QUALITY


def classify_server(url: str, known_hosters: Mapping[str, str]) -> str:
    """Return the display name of the first known hoster found in *url*.

    *known_hosters* maps a lowercase host/path fragment (``"pixeldrain"``)
    to its display name (``"Pixeldrain"``).  Order of the mapping decides
    ties.
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return DEFAULT_SERVER
    haystack = f"{parsed.netloc}{parsed.path}".lower()
    for fragment, display in known_hosters.items():
        if fragment in haystack:
            return display
    return DEFAULT_SERVER


_SIZE_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(TB|GB|MB|TiB|GiB|MiB)\b", re.IGNORECASE)


def extract_size(text: str) -> str:
    """First file size mentioned in *text* (``"1.4 GB"``), else ``"Unknown"``."""
    m = _SIZE_RE.search(text)
    if not m:
        return UNKNOWN_SIZE
    number = m.group(1).replace(",", ".")
    return f"{number} {m.group(2).upper().replace('I', 'i')}"


@lru_cache(maxsize=64)
def _episode_pattern(episode: int) -> re.Pattern[str]:
    # "e5", "E05", "S01E05", "Episode 5", "episode 05"; never "e50".
    return re.compile(
        rf"(?:(?<![a-z])e|episode\s*)0*{episode}(?!\d)",
        re.IGNORECASE,
    )


def matches_episode(text: str, episode: int) -> bool:
    """True when *text* carries an episode marker for *episode*."""
    return _episode_pattern(episode).search(text) is not None
