# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Resolve a client factory from an import path."""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, Any

from afkbot.errors import ClientFactoryError

if TYPE_CHECKING:
    from collections.abc import Callable

    from afkbot.client.base import GameClient


def load_client_factory(path: str) -> Callable[..., GameClient]:
    """Import ``package.module:attribute`` and return the callable.

    The callable is invoked once per session attempt with the keyword
    arguments from :meth:`afkbot.config.BotConfig.client_options` and must
    return a fresh :class:`~afkbot.client.base.GameClient`.

    Raises:
        ClientFactoryError: If the path is malformed, the module cannot be
            imported, or the attribute is missing or not callable
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ClientFactoryError(f"Client factory must look like 'package.module:callable', got {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ClientFactoryError(f"Cannot import client factory module {module_name!r}: {e}") from e

    target: Any = module
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise ClientFactoryError(f"{module_name!r} has no attribute {attr_path!r}") from e

    if not callable(target):
        raise ClientFactoryError(f"Client factory {path!r} is not callable")
    return target
