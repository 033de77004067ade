"""Logging bootstrap.

Application code logs through ``structlog.get_logger(__name__)``; uvicorn
and httpx emit plain stdlib records.  Both reach one stderr handler whose
``ProcessorFormatter`` runs them through the same processors, so a log
stream is either all JSON or all console lines.
"""

from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog.typing import Processor

from streamhound.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Third-party loggers given an explicit level; all of them propagate to root.
_LIBRARY_LOGGERS: tuple[str, ...] = ("uvicorn.error", "uvicorn.access", "httpx")

# httpx reports every request at INFO.
_QUIET_UNLESS_DEBUG = frozenset({"httpx"})


def _strip_color_message(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.pop("color_message", None)
    return event_dict


def _stamp_foreign_record(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Timestamp a stdlib record with its own creation time, in UTC."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = created.isoformat(timespec="milliseconds").replace(
            "+00:00", "Z"
        )
    return event_dict


def _common_processors() -> list[Processor]:
    return [
        _strip_color_message,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]


def _renderer(config: AppConfig) -> Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _library_level(name: str, level: str) -> str:
    if name in _QUIET_UNLESS_DEBUG and level != "DEBUG":
        return "WARNING"
    return level


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """dictConfig for stdlib logging; uvicorn receives it as ``log_config``."""
    level = config.log_level
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": [
                    *_common_processors(),
                    _stamp_foreign_record,
                    structlog.processors.format_exc_info,
                ],
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _renderer(config),
                ],
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "structlog",
            },
        },
        "loggers": {
            name: {"level": _library_level(name, level), "propagate": True}
            for name in _LIBRARY_LOGGERS
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Apply structlog and stdlib logging settings; return the dictConfig."""
    structlog.configure(
        processors=[
            *_common_processors(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_config = build_logging_config(config)
    logging.config.dictConfig(log_config)
    log.info(
        "logging_configured", log_level=config.log_level, log_format=config.log_format
    )
    return log_config
