from .base import SiteAdapterProtocol
from .exceptions import (
    AdapterError,
    AdapterLoadError,
    AdapterNotFoundError,
    DuplicateAdapterError,
)

__all__ = [
    "AdapterError",
    "AdapterLoadError",
    "AdapterNotFoundError",
    "DuplicateAdapterError",
    "SiteAdapterProtocol",
]
