"""Tests for the afkbot command line."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from afkbot.cli import cli
from afkbot.config import load_config


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    # Commands bind logging to the runner's stderr, which is closed afterwards.
    yield
    structlog.reset_defaults()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_init_config_writes_file(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"

    result = runner.invoke(
        cli,
        [
            "init-config",
            str(path),
            "--host",
            "mc.local",
            "--username",
            "Idler",
            "--version",
            "1.20.4",
            "--client-factory",
            "mypkg.adapter:create_client",
        ],
    )

    assert result.exit_code == 0, result.output
    config = load_config(path)
    assert config.server_host == "mc.local"
    assert config.server_port == 25565
    assert config.client_factory == "mypkg.adapter:create_client"


def test_init_config_refuses_overwrite(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(
        cli,
        ["init-config", str(config_file), "--host", "h", "--username", "u", "--version", "1.20.4"],
    )

    assert result.exit_code == 1
    assert "already exists" in result.output
    assert "play.example.net" in config_file.read_text()


def test_check_config_prints_options(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli, ["check-config", "-c", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "host: play.example.net" in result.output
    assert "port: 25570" in result.output
    assert "timing.watchdog_timeout_s: 45.0" in result.output
    assert "client_factory: (not set)" in result.output


def test_check_config_reports_invalid_file(runner: CliRunner, tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{"serverHost": "localhost"}')

    result = runner.invoke(cli, ["check-config", "-c", str(path)])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_check_config_uses_env_path(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli, ["check-config"], env={"AFKBOT_CONFIG": str(config_file)})

    assert result.exit_code == 0, result.output
    assert f"# {config_file}" in result.output


def test_run_requires_client_factory(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli, ["run", "-c", str(config_file)])

    assert result.exit_code == 2
    assert "No client factory" in result.output


def test_run_reports_bad_client_factory(runner: CliRunner, config_file: Path) -> None:
    result = runner.invoke(cli, ["run", "-c", str(config_file), "--client-factory", "afkbot_missing:create"])

    assert result.exit_code == 1
    assert "Cannot import" in result.output
