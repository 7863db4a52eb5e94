# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client layer: the connected game-session interface afkbot drives."""

from __future__ import annotations

from afkbot.client.base import Block, Entity, GameClient, GoalNearXZ, Item, Pathfinder, Vec3
from afkbot.client.chaos import ChaosClient
from afkbot.client.loader import load_client_factory

__all__ = [
    "Block",
    "ChaosClient",
    "Entity",
    "GameClient",
    "GoalNearXZ",
    "Item",
    "Pathfinder",
    "Vec3",
    "load_client_factory",
]
