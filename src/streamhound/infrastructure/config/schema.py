"""Validated settings for the service and the environment-variable layer."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _keyed(flat: str, section: str, key: str, **field_kwargs: Any) -> Any:
    """Field readable as ``flat`` (ENV/CLI) or ``section.key`` (YAML)."""
    return Field(
        validation_alias=AliasChoices(flat, AliasPath(section, key)),
        **field_kwargs,
    )


def _as_path(value: Any) -> Path:
    # Only expands "~"; the directory is not checked or created here.
    if isinstance(value, (str, Path)):
        return Path(value).expanduser()
    raise TypeError(f"adapter_dir must be a path, got {type(value).__name__}")


class StreamsConfig(BaseModel):
    """Fan-out limits for stream lookups (YAML section: streams.*)."""

    adapter_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Deadline per adapter call; a late adapter contributes [].",
    )
    max_concurrent_adapters: int = Field(
        default=5,
        ge=1,
        description="Adapters queried in parallel for one lookup.",
    )
    max_concurrent_subfetches: int = Field(
        default=5,
        ge=1,
        description="In-flight sub-fetches inside one adapter call.",
    )


class AppConfig(BaseModel):
    """Final configuration handed to the composition root.

    Accepts the sectioned YAML layout (``adapters``, ``http``, ``logging``,
    ``tmdb``, ``streams``) as well as flat keys; ``load.py`` merges the
    layers before validation.
    """

    app_name: str = "streamhound"
    environment: Environment = "dev"

    adapter_dir: Path = _keyed(
        "adapter_dir",
        "adapters",
        "adapter_dir",
        default=Path("./plugins"),
        description="Directory scanned for site adapter modules.",
    )
    disabled_adapters: list[str] = _keyed(
        "disabled_adapters",
        "adapters",
        "disabled",
        default_factory=list,
        description="Adapter names that are never queried.",
    )

    http_timeout_seconds: float = _keyed(
        "http_timeout_seconds",
        "http",
        "timeout_seconds",
        default=15.0,
        gt=0,
        description="Timeout for metadata and site requests.",
    )
    http_user_agent: str = _keyed(
        "http_user_agent",
        "http",
        "user_agent",
        default="Streamhound/0.1.0",
        description="User-Agent of the metadata client; adapters keep their own.",
    )

    log_level: LogLevel = _keyed("log_level", "logging", "level", default="INFO")
    # None until validated; then "json" in prod and "console" elsewhere.
    log_format: Optional[LogFormat] = _keyed(
        "log_format", "logging", "format", default=None
    )

    tmdb_api_key: Optional[str] = _keyed(
        "tmdb_api_key",
        "tmdb",
        "api_key",
        default=None,
        description="Without a key no metadata resolver is wired.",
    )
    tmdb_language: str = _keyed(
        "tmdb_language", "tmdb", "language", default="en-US"
    )

    streams: StreamsConfig = Field(default_factory=StreamsConfig)

    @field_validator("adapter_dir", mode="before")
    @classmethod
    def _coerce_adapter_dir(cls, v: Any) -> Path:
        return _as_path(v)

    @model_validator(mode="after")
    def _default_log_format(self) -> "AppConfig":
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self


class EnvOverrides(BaseSettings):
    """``STREAMHOUND_*`` variables, one flat name per setting.

    Lists are JSON (``STREAMHOUND_DISABLED_ADAPTERS='["hdrezka"]'``); the
    stream limits use a ``streams_`` prefix
    (``STREAMHOUND_STREAMS_ADAPTER_TIMEOUT_SECONDS``).
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMHOUND_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None
    adapter_dir: Optional[Path] = None
    disabled_adapters: Optional[list[str]] = None
    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None
    tmdb_api_key: Optional[str] = None
    tmdb_language: Optional[str] = None
    streams_adapter_timeout_seconds: Optional[float] = None
    streams_max_concurrent_adapters: Optional[int] = None
    streams_max_concurrent_subfetches: Optional[int] = None

    @field_validator("adapter_dir", mode="before")
    @classmethod
    def _coerce_adapter_dir(cls, v: Any) -> Any:
        return None if v is None else _as_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """Only the variables that were set, keyed by flat name."""
        return self.model_dump(exclude_none=True)
