# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Self-rescheduling random action loop."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from afkbot.actions.catalog import CATALOG, ActionContext
from afkbot.constants import ACTION_DELAY_MAX_S, ACTION_DELAY_MIN_S
from afkbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from afkbot.actions.catalog import Action
    from afkbot.core.attempt import SessionAttempt
    from afkbot.core.timers import TimerHandle, TimerLoop

logger = get_logger(__name__)

# How many times a cycle redraws when the drawn action could not act
MAX_DRAWS_PER_CYCLE = 4


class ActionScheduler:
    """Dispatch one random action, then schedule the next cycle.

    The loop has no stop method. It ends when a cycle finds the session no
    longer live, in which case it dispatches nothing and schedules nothing.
    """

    def __init__(
        self,
        attempt: SessionAttempt,
        loop: TimerLoop,
        rng: random.Random | None = None,
        *,
        catalog: Sequence[Action] = CATALOG,
        delay_min_s: float = ACTION_DELAY_MIN_S,
        delay_max_s: float = ACTION_DELAY_MAX_S,
    ) -> None:
        self._attempt = attempt
        self._loop = loop
        self._rng = rng or random.Random()
        self._catalog = tuple(catalog)
        self._delay_min_ms = int(delay_min_s * 1000)
        self._delay_max_ms = int(delay_max_s * 1000)
        self._log = attempt.log or logger
        self._pending: TimerHandle | None = None
        self.cycles = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        self._log.info("action_cycle_started")
        self.tick()

    def tick(self) -> None:
        self._pending = None
        if not self._attempt.is_live():
            self._log.debug("action_cycle_stopped", cycles=self.cycles)
            return

        self.cycles += 1
        try:
            self._dispatch()
        except Exception as e:
            self._log.error("action_failed", error=str(e), exc_info=True)

        delay_s = self._next_delay()
        self._log.debug("next_action", delay_ms=int(delay_s * 1000))
        self._pending = self._loop.call_later(delay_s, self.tick)

    def _next_delay(self) -> float:
        # Whole milliseconds in [min, max)
        return self._rng.randrange(self._delay_min_ms, self._delay_max_ms) / 1000

    def _dispatch(self) -> None:
        ctx = ActionContext(attempt=self._attempt, loop=self._loop, rng=self._rng, log=self._log)
        pathfinder = ctx.client.pathfinder

        for _ in range(MAX_DRAWS_PER_CYCLE):
            action_id = self._rng.randrange(len(self._catalog))
            action = self._catalog[action_id]
            self._log.info("action_dispatched", action_id=action_id, action=action.name)

            if action.stationary and pathfinder.is_moving():
                self._log.info("navigation_stopped_for_action")
                pathfinder.stop()

            if action.run(ctx) is not False:
                return
