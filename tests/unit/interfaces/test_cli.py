"""Tests for the CLI entrypoint."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from streamhound.interfaces.cli import cli


class TestParseArgs:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.delenv("PORT", raising=False)
        args = cli._parse_args([])
        assert args.host == cli.DEFAULT_HOST
        assert args.port == cli.DEFAULT_PORT
        assert args.config is None
        assert cli._cli_overrides(args) == {}

    def test_overrides(self) -> None:
        args = cli._parse_args(
            [
                "--adapter-dir",
                "/srv/adapters",
                "--log-level",
                "DEBUG",
                "--log-format",
                "json",
            ]
        )
        assert cli._cli_overrides(args) == {
            "adapter_dir": "/srv/adapters",
            "log_level": "DEBUG",
            "log_format": "json",
        }

    def test_adapter_flags_map_to_config_keys(self) -> None:
        args = cli._parse_args(
            [
                "--disable-adapter",
                "hdhub4u",
                "--disable-adapter",
                "hdrezka",
                "--adapter-timeout",
                "12.5",
                "--tmdb-api-key",
                "secret",
            ]
        )
        assert cli._cli_overrides(args) == {
            "disabled_adapters": ["hdhub4u", "hdrezka"],
            "streams_adapter_timeout_seconds": 12.5,
            "tmdb_api_key": "secret",
        }

    def test_config_paths_parsed(self) -> None:
        args = cli._parse_args(["--config", "a.yaml", "--dotenv", ".env"])
        assert args.config == Path("a.yaml")
        assert args.dotenv == Path(".env")

    def test_invalid_log_level(self) -> None:
        with pytest.raises(SystemExit):
            cli._parse_args(["--log-level", "TRACE"])


class TestStart:
    def test_wires_config_into_uvicorn(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("STREAMHOUND_LOG_LEVEL", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging:\n  level: WARNING\n", encoding="utf-8")

        with (
            patch.object(cli, "configure_logging", return_value={"version": 1}),
            patch.object(cli, "build_app", return_value=MagicMock()) as build_app,
            patch.object(cli.uvicorn, "run") as run,
        ):
            cli.start(["--config", str(config_file), "--port", "9000"])

        config = build_app.call_args.args[0]
        assert config.log_level == "WARNING"
        run.assert_called_once_with(
            build_app.return_value,
            host="0.0.0.0",
            port=9000,
            log_config={"version": 1},
        )

    def test_port_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8123")
        monkeypatch.setenv("HOST", "127.0.0.1")

        with (
            patch.object(cli, "configure_logging", return_value={}),
            patch.object(cli, "build_app"),
            patch.object(cli.uvicorn, "run") as run,
        ):
            cli.start([])

        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 8123

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            cli.start(["--config", str(tmp_path / "missing.yaml")])

    def test_cli_overrides_win_over_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("STREAMHOUND_DISABLED_ADAPTERS", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "adapters:\n  disabled: [serienfans]\n", encoding="utf-8"
        )

        with (
            patch.object(cli, "configure_logging", return_value={}),
            patch.object(cli, "build_app") as build_app,
            patch.object(cli.uvicorn, "run"),
        ):
            cli.start(
                ["--config", str(config_file), "--disable-adapter", "hdhub4u"]
            )

        assert build_app.call_args.args[0].disabled_adapters == ["hdhub4u"]
