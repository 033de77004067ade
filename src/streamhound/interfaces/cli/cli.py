"""``streamhound`` command: load config once, set up logging, serve with uvicorn."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from streamhound.infrastructure.config import load_config
from streamhound.infrastructure.logging.setup import configure_logging
from streamhound.interfaces.main import build_app

log = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 7980

# (flag, flat config key, argparse options). The key doubles as the
# namespace attribute and is passed to load_config() as a CLI override.
_CONFIG_FLAGS: tuple[tuple[str, str, dict[str, Any]], ...] = (
    (
        "--adapter-dir",
        "adapter_dir",
        {"metavar": "DIR", "help": "directory with the site adapter modules"},
    ),
    (
        "--disable-adapter",
        "disabled_adapters",
        {"action": "append", "metavar": "NAME", "help": "skip an adapter (repeatable)"},
    ),
    (
        "--adapter-timeout",
        "streams_adapter_timeout_seconds",
        {"type": float, "metavar": "SECONDS", "help": "deadline per adapter call"},
    ),
    (
        "--tmdb-api-key",
        "tmdb_api_key",
        {"metavar": "KEY", "help": "enables title lookups for search-based sites"},
    ),
    (
        "--log-level",
        "log_level",
        {"choices": ["DEBUG", "INFO", "WARNING", "ERROR"]},
    ),
    (
        "--log-format",
        "log_format",
        {"choices": ["json", "console"]},
    ),
)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="streamhound",
        description="Serve ranked stream candidates over HTTP.",
    )

    server = parser.add_argument_group("server")
    server.add_argument("--host", default=os.getenv("HOST", DEFAULT_HOST))
    server.add_argument(
        "--port", type=int, default=int(os.getenv("PORT", str(DEFAULT_PORT)))
    )

    sources = parser.add_argument_group("config sources")
    sources.add_argument("--config", type=Path, metavar="YAML")
    sources.add_argument("--dotenv", type=Path, metavar="ENV_FILE")

    overrides = parser.add_argument_group("config overrides")
    for flag, key, options in _CONFIG_FLAGS:
        overrides.add_argument(flag, dest=key, default=None, **options)

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Flat config keys for every override flag that was given."""
    values = {key: getattr(args, key) for _, key, _ in _CONFIG_FLAGS}
    return {key: value for key, value in values.items() if value is not None}


def start(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)

    config = load_config(
        config_path=args.config,
        dotenv_path=args.dotenv,
        cli_overrides=_cli_overrides(args),
    )
    log_config = configure_logging(config)

    log.info(
        "server_starting",
        host=args.host,
        port=args.port,
        environment=config.environment,
        adapter_dir=str(config.adapter_dir),
    )
    uvicorn.run(
        build_app(config), host=args.host, port=args.port, log_config=log_config
    )
