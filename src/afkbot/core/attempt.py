# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""State owned by a single session attempt."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from afkbot.client.base import GameClient


class SessionAttempt(BaseModel):
    """One connect-to-disconnect lifecycle.

    Every handler registered for an attempt receives the attempt itself, so
    nothing about a session leaks into the next one. Only the driver creates
    attempts and only the coordinator tears them down.
    """

    generation: int
    client: GameClient | None = None
    log: Any = None

    # Sticky: once set it stays set for the life of the attempt.
    has_ever_established: bool = False
    disconnect_in_flight: bool = False
    last_reply_at: float | None = None
    is_crouching: bool = False

    # LivenessWatchdog, set by the driver when the attempt is created
    watchdog: Any = None
    # ActionScheduler, set once the session is established
    scheduler: Any = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    _listeners: list[tuple[str, Callable[..., Any]]] = PrivateAttr(default_factory=list)

    def listen(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a client handler that is detached again on teardown."""
        if self.client is None:
            return
        self.client.on(event, handler)
        self._listeners.append((event, handler))

    def detach_listeners(self) -> int:
        """Remove every handler this attempt registered. Returns how many."""
        count = len(self._listeners)
        if self.client is not None:
            for event, handler in self._listeners:
                self.client.remove_listener(event, handler)
        self._listeners.clear()
        return count

    def is_live(self) -> bool:
        """True while the session is established and not being torn down.

        Deferred callbacks check this first and do nothing when it is False.
        """
        if self.disconnect_in_flight or self.client is None:
            return False
        return self.client.entity is not None
