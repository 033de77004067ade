"""Adapter system exceptions."""

from __future__ import annotations


class AdapterError(Exception):
    """Base class for all adapter-related errors."""


class AdapterLoadError(AdapterError):
    """Raised when an adapter module fails to import or does not match the protocol."""


class AdapterNotFoundError(AdapterError):
    """Raised when an adapter name is not known to the registry."""


class DuplicateAdapterError(AdapterError):
    """Raised when two adapter modules resolve to the same name."""
