# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration management for the AFK bot."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from afkbot import constants
from afkbot.errors import ConfigError
from afkbot.logging import get_logger

logger = get_logger(__name__)

ViewDistance = Annotated[int, Field(ge=2)] | Literal["far", "normal", "short", "tiny"]


class TimingConfig(BaseModel):
    """Delays and timeouts, all in seconds."""

    watchdog_timeout_s: float = Field(default=constants.WATCHDOG_TIMEOUT_S, gt=0)
    reconnect_delay_s: float = Field(default=constants.RECONNECT_DELAY_S, ge=0)
    reconnect_fail_delay_s: float = Field(default=constants.RECONNECT_FAIL_DELAY_S, ge=0)
    settle_delay_s: float = Field(default=constants.SETTLE_DELAY_S, ge=0)
    action_delay_min_s: float = Field(default=constants.ACTION_DELAY_MIN_S, ge=0)
    action_delay_max_s: float = Field(default=constants.ACTION_DELAY_MAX_S, gt=0)
    chat_cooldown_s: float = Field(default=constants.CHAT_COOLDOWN_S, ge=0)
    reply_delay_min_s: float = Field(default=constants.REPLY_DELAY_MIN_S, ge=0)
    reply_delay_max_s: float = Field(default=constants.REPLY_DELAY_MAX_S, ge=0)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def _check_ranges(self) -> TimingConfig:
        if self.action_delay_max_s <= self.action_delay_min_s:
            raise ValueError("action_delay_max_s must be greater than action_delay_min_s")
        if self.reply_delay_max_s < self.reply_delay_min_s:
            raise ValueError("reply_delay_max_s must not be less than reply_delay_min_s")
        return self


class BotConfig(BaseModel):
    """Complete bot configuration.

    Keys may be given in snake_case or in the camelCase used by the
    older ``config.json`` files (``serverHost``, ``botUsername``, ...).
    """

    server_host: str = Field(alias="serverHost")
    server_port: int = Field(default=constants.DEFAULT_PORT, alias="serverPort", gt=0, lt=65536)
    bot_username: str = Field(alias="botUsername", min_length=1)
    # Required: version auto-detection fails against some hosts (-1 protocol error)
    server_version: str = Field(alias="serverVersion", min_length=1)
    view_distance: ViewDistance = Field(default=constants.DEFAULT_VIEW_DISTANCE, alias="viewDistance")
    auth: str = constants.DEFAULT_AUTH
    client_factory: str | None = Field(default=None, alias="clientFactory")
    timing: TimingConfig = Field(default_factory=TimingConfig)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_view_distance(cls, data: Any) -> Any:
        # config.json files often carry "viewDistance": null
        if isinstance(data, dict):
            for key in ("viewDistance", "view_distance"):
                if key in data and data[key] is None:
                    data = {k: v for k, v in data.items() if k != key}
        return data

    @classmethod
    def from_yaml(cls, path: Path | str) -> BotConfig:
        path = Path(path)
        logger.info("config_loading", path=str(path))
        try:
            data = yaml.safe_load(path.read_text()) or {}
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML/JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e

    def to_yaml(self, path: Path | str) -> None:
        path = Path(path)
        logger.info("config_saving", path=str(path))
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json", exclude_none=True)
        path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    def client_options(self) -> dict[str, Any]:
        """Keyword arguments for the connected-session client constructor."""
        return {
            "host": self.server_host,
            "port": self.server_port,
            "username": self.bot_username,
            "auth": self.auth,
            "version": self.server_version,
            "view_distance": self.view_distance,
            # Lets the client library run its own keepalive timeout check too
            "check_timeout_interval": int(self.timing.watchdog_timeout_s * 1000),
        }


def load_config(path: Path | str) -> BotConfig:
    return BotConfig.from_yaml(path)
