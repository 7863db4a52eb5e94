# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Liveness watchdog for a session attempt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from afkbot.constants import WATCHDOG_TIMEOUT_S

if TYPE_CHECKING:
    from collections.abc import Callable

    from afkbot.core.timers import TimerHandle, TimerLoop


class WatchdogStatus(BaseModel):
    timeout_s: float
    started: bool
    armed: bool
    expired: bool


class LivenessWatchdog:
    """Single-shot deadline, pushed back by every liveness tick.

    The watchdog only detects silence. When the deadline passes it calls
    ``on_expire`` once (normally ending the connection) and leaves the
    reconnect to whoever handles the resulting ``end`` event.
    """

    def __init__(
        self,
        loop: TimerLoop,
        on_expire: Callable[[], Any],
        timeout_s: float = WATCHDOG_TIMEOUT_S,
    ) -> None:
        self._loop = loop
        self._on_expire = on_expire
        self._timeout_s = timeout_s
        self._handle: TimerHandle | None = None
        self._started = False
        self._expired = False
        self._stopped = False

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def expired(self) -> bool:
        return self._expired

    def arm(self) -> None:
        """Start (or restart) the deadline."""
        if self._stopped or self._expired:
            return
        self._started = True
        self._cancel()
        self._handle = self._loop.call_later(self._timeout_s, self._fire)

    def rearm(self) -> None:
        """Push the deadline back. Ignored until the first :meth:`arm`."""
        if self._started:
            self.arm()

    def stop(self) -> None:
        """Cancel the pending deadline for good."""
        self._stopped = True
        self._cancel()

    def status(self) -> dict[str, Any]:
        return WatchdogStatus(
            timeout_s=self._timeout_s,
            started=self._started,
            armed=self.armed,
            expired=self._expired,
        ).model_dump()

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        if self._stopped or self._expired:
            return
        self._expired = True
        self._on_expire()
