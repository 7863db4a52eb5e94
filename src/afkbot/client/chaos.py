# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fault-injection client wrapper (deterministic).

This is used for resilience testing. It wraps a real client and injects
frozen connections and errors at deterministic tick counts so tests are
repeatable.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

from afkbot.client.base import CHAT, END, ERROR, KICKED, PHYSICS_TICK, SPAWN, GameClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from afkbot.client.base import Block, Entity, Item, Pathfinder, Vec3


class ChaosClient(GameClient):
    def __init__(
        self,
        inner: GameClient,
        *,
        seed: int = 1,
        freeze_after_ticks: int = 0,
        error_after_ticks: int = 0,
        drop_tick_ratio: float = 0.0,
        label: str = "chaos",
    ) -> None:
        super().__init__()
        self._inner = inner
        self._rng = random.Random(int(seed))
        self._freeze_after = int(freeze_after_ticks or 0)
        self._error_after = int(error_after_ticks or 0)
        self._drop_ratio = float(drop_tick_ratio or 0.0)
        self._label = str(label or "chaos")
        self._tick_count = 0
        self._error_injected = False

        for event in (SPAWN, KICKED, END, ERROR, CHAT):
            inner.on(event, self._relay(event))
        inner.on(PHYSICS_TICK, self._on_inner_tick)

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def _relay(self, event: str) -> Callable[..., None]:
        def _forward(*args: Any) -> None:
            self.emit(event, *args)

        return _forward

    def _on_inner_tick(self) -> None:
        self._tick_count += 1

        if self._error_after > 0 and self._tick_count >= self._error_after and not self._error_injected:
            self._error_injected = True
            self.emit(ERROR, ConnectionError(f"{self._label}: injected error on tick #{self._tick_count}"))
            return

        if self._freeze_after > 0 and self._tick_count > self._freeze_after:
            # Simulate a frozen connection: the socket stays open but nothing is processed.
            return

        if self._drop_ratio > 0 and self._rng.random() < self._drop_ratio:
            return

        self.emit(PHYSICS_TICK)

    def connect(self) -> None:
        self._inner.connect()

    def end(self, reason: str | None = None) -> None:
        self._inner.end(reason)

    @property
    def username(self) -> str:
        return self._inner.username

    @property
    def entity(self) -> Entity | None:
        return self._inner.entity

    @property
    def pathfinder(self) -> Pathfinder:
        return self._inner.pathfinder

    def set_control_state(self, control: str, state: bool) -> None:
        self._inner.set_control_state(control, state)

    def look(self, yaw: float, pitch: float, force: bool = False) -> None:
        self._inner.look(yaw, pitch, force)

    def look_at(self, point: Vec3, force: bool = False, callback: Callable[[], None] | None = None) -> None:
        self._inner.look_at(point, force, callback)

    def find_block(self, matching: Callable[[Block], bool], max_distance: float) -> Block | None:
        return self._inner.find_block(matching, max_distance)

    def nearest_entity(self, matching: Callable[[Entity], bool]) -> Entity | None:
        return self._inner.nearest_entity(matching)

    def dig(self, block: Block) -> None:
        self._inner.dig(block)

    def swing_arm(self) -> None:
        self._inner.swing_arm()

    def set_quick_bar_slot(self, slot: int) -> None:
        self._inner.set_quick_bar_slot(slot)

    def inventory_items(self) -> list[Item]:
        return self._inner.inventory_items()

    def toss(self, item_type: int, metadata: int | None, count: int) -> None:
        self._inner.toss(item_type, metadata, count)

    def chat(self, message: str) -> None:
        self._inner.chat(message)


def chaos_factory(factory: Callable[..., GameClient], **chaos: Any) -> Callable[..., GameClient]:
    """Wrap a client factory so every client it builds is a ChaosClient."""

    def _build(**options: Any) -> GameClient:
        return ChaosClient(factory(**options), **chaos)

    return _build
