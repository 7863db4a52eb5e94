# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

import pytest

from afkbot.config import BotConfig
from afkbot.core.attempt import SessionAttempt
from afkbot.core.driver import SessionDriver

from tests.fake_client import FakeClient, FakeClientFactory
from tests.fake_loop import FakeLoop

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def loop() -> FakeLoop:
    """Manual clock standing in for the event loop."""
    return FakeLoop()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def bot_config() -> BotConfig:
    return BotConfig(
        server_host="127.0.0.1",
        server_port=25565,
        bot_username="AfkBot",
        server_version="1.20.4",
    )


@pytest.fixture
def factory() -> FakeClientFactory:
    return FakeClientFactory()


@pytest.fixture
def driver(bot_config: BotConfig, factory: FakeClientFactory, loop: FakeLoop, rng: random.Random) -> SessionDriver:
    return SessionDriver(bot_config, factory, loop=loop, rng=rng)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient("AfkBot")


@pytest.fixture
def live_attempt(client: FakeClient) -> SessionAttempt:
    """An attempt whose client has already spawned."""
    client.spawn()
    return SessionAttempt(generation=1, client=client, has_ever_established=True)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(
        '{"serverHost": "play.example.net", "serverPort": 25570, '
        '"botUsername": "Sleepy", "serverVersion": "1.20.1", "viewDistance": null}'
    )
    return path
