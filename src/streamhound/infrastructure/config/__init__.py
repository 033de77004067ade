from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, StreamsConfig

__all__ = ["AppConfig", "EnvOverrides", "StreamsConfig", "load_config"]
