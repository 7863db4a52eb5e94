"""Tests for settings, paths and logging setup."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from afkbot.logging import configure_logging, get_logger
from afkbot.paths import CONFIG_FILENAME, default_config_path
from afkbot.settings import Settings


def test_default_config_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AFKBOT_CONFIG", raising=False)

    path = default_config_path()

    assert path.name == CONFIG_FILENAME
    assert "afkbot" in str(path.parent)


def test_config_path_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AFKBOT_CONFIG", str(tmp_path / "bot.json"))

    assert default_config_path() == tmp_path / "bot.json"
    assert Settings().config_path == tmp_path / "bot.json"


def test_settings_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFKBOT_LOG_LEVEL", "debug")
    monkeypatch.setenv("AFKBOT_LOG_FORMAT", "json")

    settings = Settings()

    assert settings.log_level == "debug"
    assert settings.log_format == "json"


def test_settings_rejects_unknown_format(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFKBOT_LOG_FORMAT", "xml")

    with pytest.raises(ValueError):
        Settings()


@pytest.mark.parametrize("log_format", ["console", "json"])
def test_configure_logging_writes_to_stderr(
    log_format: str, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AFKBOT_LOG_FORMAT", log_format)
    configure_logging()
    try:
        get_logger("test").warning("watchdog_expired", attempt=3)
        out, err = capsys.readouterr()
    finally:
        structlog.reset_defaults()

    assert out == ""
    assert "watchdog_expired" in err
    assert "attempt" in err


def test_configure_logging_filters_below_level(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(Settings(log_level="WARNING"))
    try:
        log = get_logger("test")
        log.info("attempt_started")
        log.error("client_error")
        _, err = capsys.readouterr()
    finally:
        structlog.reset_defaults()

    assert "attempt_started" not in err
    assert "client_error" in err
