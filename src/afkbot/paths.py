# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filesystem paths for configuration."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

ENV_CONFIG = "AFKBOT_CONFIG"
CONFIG_FILENAME = "config.yaml"


def default_config_path() -> Path:
    """Get the default bot configuration file."""
    env_path = os.getenv(ENV_CONFIG)
    if env_path:
        return Path(env_path)
    return Path(user_config_dir("afkbot", "afkbot")) / CONFIG_FILENAME
