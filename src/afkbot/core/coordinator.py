# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single funnel for every disconnect signal of a session attempt."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from afkbot.constants import RECONNECT_DELAY_S, RECONNECT_FAIL_DELAY_S
from afkbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from afkbot.core.attempt import SessionAttempt
    from afkbot.core.timers import TimerHandle, TimerLoop

logger = get_logger(__name__)


def backoff_delay(
    has_ever_established: bool,
    *,
    reconnect_delay_s: float = RECONNECT_DELAY_S,
    reconnect_fail_delay_s: float = RECONNECT_FAIL_DELAY_S,
) -> float:
    """Delay before the next attempt, in seconds.

    Two fixed tiers: a session that reached the world reconnects quickly, one
    that never did (server down, version mismatch) waits the long tier. There
    is no attempt counter, growth or jitter.
    """
    return reconnect_delay_s if has_ever_established else reconnect_fail_delay_s


class DisconnectCoordinator:
    """Turns error/kicked/end signals into exactly one scheduled restart.

    Independent sources fire for the same real disconnect (``error`` then
    ``end``, ``kicked`` then ``end``), so the first call for an attempt wins
    and every later call is a no-op.
    """

    def __init__(
        self,
        loop: TimerLoop,
        restart: Callable[[], Any],
        *,
        reconnect_delay_s: float = RECONNECT_DELAY_S,
        reconnect_fail_delay_s: float = RECONNECT_FAIL_DELAY_S,
    ) -> None:
        self._loop = loop
        self._restart = restart
        self._reconnect_delay_s = reconnect_delay_s
        self._reconnect_fail_delay_s = reconnect_fail_delay_s
        self._pending: TimerHandle | None = None
        self.restarts_scheduled = 0

    @property
    def restart_pending(self) -> bool:
        return self._pending is not None

    def handle_failure(self, attempt: SessionAttempt, reason: str) -> bool:
        """Tear down ``attempt`` and schedule the next one.

        Returns:
            True if this call scheduled the restart, False if the attempt was
            already being handled
        """
        if attempt.disconnect_in_flight:
            return False
        attempt.disconnect_in_flight = True

        log = attempt.log or logger
        if attempt.watchdog is not None:
            attempt.watchdog.stop()

        delay = backoff_delay(
            attempt.has_ever_established,
            reconnect_delay_s=self._reconnect_delay_s,
            reconnect_fail_delay_s=self._reconnect_fail_delay_s,
        )
        log.warning("disconnect_handled", reason=reason, established=attempt.has_ever_established)

        self._teardown(attempt)

        self._pending = self._loop.call_later(delay, self._fire_restart)
        self.restarts_scheduled += 1
        if attempt.has_ever_established:
            log.info("reconnect_scheduled", delay_s=delay)
        else:
            log.warning("connect_failed_server_offline", delay_s=delay)
        return True

    def cancel(self) -> None:
        """Drop the scheduled restart, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.info("reconnect_cancelled")

    def _teardown(self, attempt: SessionAttempt) -> None:
        log = attempt.log or logger
        detached = attempt.detach_listeners()
        client = attempt.client
        if client is not None:
            # Listeners are gone, so the end event this may emit goes unheard.
            try:
                client.end("session_teardown")
            except Exception as e:
                log.debug("client_end_failed", error=str(e))
        log.debug("attempt_torn_down", listeners_detached=detached)

    def _fire_restart(self) -> None:
        self._pending = None
        self._restart()
