# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Action catalog for the idle-avoidance loop."""

from __future__ import annotations

from afkbot.actions.catalog import CATALOG, WANDER_ACTION_ID, Action, ActionContext

__all__ = ["CATALOG", "WANDER_ACTION_ID", "Action", "ActionContext"]
