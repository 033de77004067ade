from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_TOP_LEVEL_KEYS: tuple[str, ...] = ("app_name", "environment")

# Flat ENV/CLI key -> (section, key in section)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "adapter_dir": ("adapters", "adapter_dir"),
    "disabled_adapters": ("adapters", "disabled"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "tmdb_api_key": ("tmdb", "api_key"),
    "tmdb_language": ("tmdb", "language"),
    "streams_adapter_timeout_seconds": ("streams", "adapter_timeout_seconds"),
    "streams_max_concurrent_adapters": ("streams", "max_concurrent_adapters"),
    "streams_max_concurrent_subfetches": ("streams", "max_concurrent_subfetches"),
}

_SECTIONS: frozenset[str] = frozenset(section for section, _ in _FLAT_MAP.values())


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested dicts merge, the rest replaces."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer into the sectioned shape AppConfig validates.

    A layer may already be sectioned (YAML: ``streams: {...}``), flat
    (ENV/CLI: ``streams_adapter_timeout_seconds``), or a mix of both.
    Unknown keys are dropped.
    """
    out: dict[str, Any] = {
        key: data[key] for key in _TOP_LEVEL_KEYS if key in data
    }

    for section in _SECTIONS:
        block = data.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat_key, (section, key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})[key] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars (incl. .env) < cli overrides

    Reads files only; never creates files or directories.
    """
    # A .env file only fills variables that are not already set.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_read_yaml_config(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _deep_merge(merged, _normalize_layer(layer))

    return AppConfig.model_validate(merged)
