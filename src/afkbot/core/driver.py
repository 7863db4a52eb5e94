# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session lifecycle: create attempts, wire their events, restart forever."""

from __future__ import annotations

import asyncio
import json
import random
from functools import partial
from typing import TYPE_CHECKING, Any

from afkbot.actions.catalog import CATALOG
from afkbot.chat import ChatResponder
from afkbot.client.base import CHAT, END, ERROR, KICKED, PHYSICS_TICK, SPAWN
from afkbot.core.attempt import SessionAttempt
from afkbot.core.coordinator import DisconnectCoordinator
from afkbot.core.scheduler import ActionScheduler
from afkbot.core.watchdog import LivenessWatchdog
from afkbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from afkbot.actions.catalog import Action
    from afkbot.client.base import GameClient
    from afkbot.config import BotConfig
    from afkbot.core.timers import TimerLoop

logger = get_logger(__name__)


class SessionDriver:
    """Owns the restart loop.

    Each call to :meth:`start_attempt` builds a fresh client and a fresh
    :class:`SessionAttempt`, registers handlers bound to that attempt, and
    returns without waiting for the connection. Failures reach the
    :class:`DisconnectCoordinator`, which schedules the next
    :meth:`start_attempt` on the event loop. Exactly one attempt is live at a
    time.
    """

    def __init__(
        self,
        config: BotConfig,
        client_factory: Callable[..., GameClient],
        *,
        loop: TimerLoop | None = None,
        rng: random.Random | None = None,
        catalog: Sequence[Action] = CATALOG,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._loop: TimerLoop = loop if loop is not None else asyncio.get_running_loop()
        self._rng = rng or random.Random()
        self._catalog = tuple(catalog)
        self._generation = 0
        self._current: SessionAttempt | None = None

        timing = config.timing
        self._coordinator = DisconnectCoordinator(
            self._loop,
            self.start_attempt,
            reconnect_delay_s=timing.reconnect_delay_s,
            reconnect_fail_delay_s=timing.reconnect_fail_delay_s,
        )
        self._chat = ChatResponder(
            config.bot_username,
            self._loop,
            self._rng,
            cooldown_s=timing.chat_cooldown_s,
            reply_delay_min_s=timing.reply_delay_min_s,
            reply_delay_max_s=timing.reply_delay_max_s,
        )

    @property
    def current(self) -> SessionAttempt | None:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def coordinator(self) -> DisconnectCoordinator:
        return self._coordinator

    def start_attempt(self) -> SessionAttempt:
        """Begin one session attempt and return immediately."""
        self._generation += 1
        log = logger.bind(attempt=self._generation)
        log.info(
            "attempt_started",
            host=self._config.server_host,
            port=self._config.server_port,
            version=self._config.server_version,
        )

        try:
            client = self._client_factory(**self._config.client_options())
        except Exception as e:
            # Same as a connection that never came up: long backoff tier.
            log.error("client_create_failed", error=str(e), exc_info=True)
            attempt = SessionAttempt(generation=self._generation, log=log)
            self._current = attempt
            self._coordinator.handle_failure(attempt, f"client_create_failed: {e}")
            return attempt

        attempt = SessionAttempt(generation=self._generation, client=client, log=log)
        attempt.watchdog = LivenessWatchdog(
            self._loop,
            partial(self._force_terminate, attempt),
            timeout_s=self._config.timing.watchdog_timeout_s,
        )
        self._current = attempt

        attempt.listen(SPAWN, partial(self._on_spawn, attempt))
        attempt.listen(PHYSICS_TICK, attempt.watchdog.rearm)
        attempt.listen(CHAT, partial(self._chat.handle, attempt))
        attempt.listen(ERROR, partial(self._on_error, attempt))
        attempt.listen(KICKED, partial(self._on_kicked, attempt))
        attempt.listen(END, partial(self._on_end, attempt))

        try:
            client.connect()
        except Exception as e:
            log.error("client_connect_failed", error=str(e), exc_info=True)
            self._coordinator.handle_failure(attempt, f"client_connect_failed: {e}")
        return attempt

    async def run_forever(self) -> None:
        """Start the first attempt and keep the restart loop alive until cancelled."""
        self.start_attempt()
        try:
            await asyncio.Event().wait()
        finally:
            self._shutdown()

    def _shutdown(self) -> None:
        self._coordinator.cancel()
        attempt = self._current
        if attempt is None or attempt.disconnect_in_flight:
            return
        # Mark the attempt handled so its end event cannot schedule a restart.
        attempt.disconnect_in_flight = True
        if attempt.watchdog is not None:
            attempt.watchdog.stop()
        attempt.detach_listeners()
        if attempt.client is not None:
            try:
                attempt.client.end("shutdown")
            except Exception as e:
                attempt.log.debug("client_end_failed", error=str(e))
        attempt.log.info("driver_shutdown")

    # Event handlers; each is bound to the attempt it was registered for.

    def _on_spawn(self, attempt: SessionAttempt) -> None:
        if attempt.disconnect_in_flight:
            return
        first_spawn = not attempt.has_ever_established
        attempt.has_ever_established = True
        attempt.log.info("session_established", username=self._config.bot_username, first=first_spawn)

        # Spawn repeats on respawn and world change; set up the world-bound state each time.
        client = attempt.client
        assert client is not None
        try:
            pathfinder = client.pathfinder
            pathfinder.set_movements(pathfinder.default_movements())
        except Exception as e:
            attempt.log.warning("movements_setup_failed", error=str(e))

        attempt.watchdog.arm()
        if first_spawn:
            attempt.log.info("watchdog_started", timeout_s=self._config.timing.watchdog_timeout_s)
            self._loop.call_later(self._config.timing.settle_delay_s, self._start_actions, attempt)

    def _start_actions(self, attempt: SessionAttempt) -> None:
        if attempt.scheduler is not None or not attempt.is_live():
            return
        timing = self._config.timing
        attempt.scheduler = ActionScheduler(
            attempt,
            self._loop,
            self._rng,
            catalog=self._catalog,
            delay_min_s=timing.action_delay_min_s,
            delay_max_s=timing.action_delay_max_s,
        )
        attempt.scheduler.start()

    def _on_error(self, attempt: SessionAttempt, error: Any) -> None:
        message = str(error)
        attempt.log.error("client_error", error=message)
        self._coordinator.handle_failure(attempt, message)

    def _on_kicked(self, attempt: SessionAttempt, reason: Any) -> None:
        # A kick can only happen after the session was established.
        attempt.has_ever_established = True
        self._coordinator.handle_failure(attempt, f"Kicked: {_describe_reason(reason)}")

    def _on_end(self, attempt: SessionAttempt, reason: Any = None) -> None:
        self._coordinator.handle_failure(attempt, f"Connection ended: {reason}")

    def _force_terminate(self, attempt: SessionAttempt) -> None:
        attempt.log.warning(
            "watchdog_expired",
            timeout_s=self._config.timing.watchdog_timeout_s,
        )
        if attempt.client is None:
            return
        try:
            attempt.client.end("watchdog_timeout")
        except Exception as e:
            # The end event may never come; report it directly instead.
            attempt.log.error("watchdog_end_failed", error=str(e))
            self._coordinator.handle_failure(attempt, f"watchdog_timeout: {e}")


def _describe_reason(reason: Any) -> str:
    # Kick reasons often arrive as chat components (dicts)
    if isinstance(reason, str):
        return reason
    return json.dumps(reason, default=str)
