# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for afkbot."""


class AfkBotError(Exception):
    """Base exception for afkbot."""

    pass


class ConfigError(AfkBotError):
    """Configuration file missing, unreadable or invalid."""

    pass


class ClientFactoryError(AfkBotError):
    """Client factory import path could not be resolved."""

    pass
