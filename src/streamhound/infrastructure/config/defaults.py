"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streamhound",
    "environment": "dev",
    "adapters": {
        "adapter_dir": "./plugins",
        "disabled": [],
    },
    "http": {
        "timeout_seconds": 15.0,
        "user_agent": "Streamhound/0.1.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "tmdb": {
        "api_key": None,
        "language": "en-US",
    },
    "streams": {
        "adapter_timeout_seconds": 30.0,
        "max_concurrent_adapters": 5,
        "max_concurrent_subfetches": 5,
    },
}
