# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for afkbot."""

from __future__ import annotations

# Reconnect delay after an in-game disconnect (kicked, connection lost)
RECONNECT_DELAY_S = 10.0

# Reconnect delay when the bot never spawned (server offline, version mismatch)
RECONNECT_FAIL_DELAY_S = 300.0

# Time without a server tick before the connection is assumed frozen
WATCHDOG_TIMEOUT_S = 45.0

# Delay between spawn and the first random action
SETTLE_DELAY_S = 3.0

# Delay range between random actions, [low, high)
ACTION_DELAY_MIN_S = 2.0
ACTION_DELAY_MAX_S = 7.0

# Chat mention handling
CHAT_COOLDOWN_S = 30.0
REPLY_DELAY_MIN_S = 1.5
REPLY_DELAY_MAX_S = 4.5
AFK_REPLIES = ("Sorry, I'm AFK.", "brb", "zZzZz...", "?")

# Collaborator defaults
DEFAULT_PORT = 25565
DEFAULT_AUTH = "offline"
DEFAULT_VIEW_DISTANCE = "normal"
