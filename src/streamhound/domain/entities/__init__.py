from .streams import (
    UNKNOWN_SIZE,
    AdapterQuery,
    MediaType,
    QualityTier,
    RequestProfile,
    StreamCandidate,
    StreamDescriptor,
    TitleInfo,
)

__all__ = [
    "UNKNOWN_SIZE",
    "AdapterQuery",
    "MediaType",
    "QualityTier",
    "RequestProfile",
    "StreamCandidate",
    "StreamDescriptor",
    "TitleInfo",
]
