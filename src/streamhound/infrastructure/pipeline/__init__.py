from .aggregate import gather_settled
from .classify import (
    DEFAULT_QUALITY,
    DEFAULT_SERVER,
    classify_quality,
    classify_server,
    extract_size,
    matches_episode,
)
from .ranking import dedupe_and_rank, dedupe_by_url, rank_by_quality

__all__ = [
    "DEFAULT_QUALITY",
    "DEFAULT_SERVER",
    "classify_quality",
    "classify_server",
    "dedupe_and_rank",
    "dedupe_by_url",
    "extract_size",
    "gather_settled",
    "matches_episode",
    "rank_by_quality",
]
