# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Idle-avoidance actions.

Each action receives an :class:`ActionContext` and performs one short
behaviour on the client. Follow-up steps (releasing a key, extra swings) are
scheduled through :meth:`ActionContext.later`, which drops them once the
session is gone.

An action returns False when it could not do anything and another action
should be drawn instead; any other return value counts as performed.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from afkbot.client.base import GoalNearXZ

if TYPE_CHECKING:
    from collections.abc import Callable

    from afkbot.client.base import Block, Entity, GameClient
    from afkbot.core.attempt import SessionAttempt
    from afkbot.core.timers import TimerLoop

DIRECTIONS = ("forward", "back", "left", "right")
FOLIAGE = frozenset({"grass", "short_grass", "poppy", "dandelion", "dead_bush"})
AIR_BLOCK_TYPE = 0

# Main inventory only; armor and hotbar slots are never tossed
MAIN_INVENTORY_SLOTS = range(9, 36)

WANDER_RADIUS = 16
WANDER_GOAL_RANGE = 2
SWING_SPACING_S = 0.3


@dataclass
class ActionContext:
    attempt: SessionAttempt
    loop: TimerLoop
    rng: random.Random
    log: Any

    @property
    def client(self) -> GameClient:
        assert self.attempt.client is not None
        return self.attempt.client

    def guard(self, func: Callable[..., Any], *args: Any) -> Callable[[], None]:
        """Wrap ``func`` so it only runs while the session is live."""

        def _guarded() -> None:
            if not self.attempt.is_live():
                self.log.debug("deferred_action_dropped", func=getattr(func, "__name__", repr(func)))
                return
            try:
                func(*args)
            except Exception as e:
                self.log.warning("deferred_action_failed", error=str(e), exc_info=True)

        return _guarded

    def later(self, delay_s: float, func: Callable[..., Any], *args: Any) -> None:
        self.loop.call_later(delay_s, self.guard(func, *args))


@dataclass(frozen=True)
class Action:
    name: str
    run: Callable[[ActionContext], bool | None]
    # Stationary actions stop any active navigation first
    stationary: bool = True


def move_burst(ctx: ActionContext) -> None:
    direction = ctx.rng.choice(DIRECTIONS)
    duration_ms = ctx.rng.randint(100, 300)
    ctx.log.info("moving", direction=direction, duration_ms=duration_ms)
    ctx.client.set_control_state(direction, True)
    ctx.later(duration_ms / 1000, ctx.client.set_control_state, direction, False)


def jump(ctx: ActionContext) -> None:
    ctx.log.info("jumping")
    ctx.client.set_control_state("jump", True)
    ctx.client.set_control_state("jump", False)


def look_around(ctx: ActionContext) -> None:
    yaw = ctx.rng.random() * math.pi * 2 - math.pi
    pitch = ctx.rng.random() * (math.pi / 2) - math.pi / 4
    ctx.log.info("looking_around", yaw=round(yaw, 3), pitch=round(pitch, 3))
    ctx.client.look(yaw, pitch, False)


def fake_mine(ctx: ActionContext) -> None:
    client = ctx.client
    block = client.find_block(lambda blk: blk.type != AIR_BLOCK_TYPE, 3)
    if block is None:
        ctx.log.info("swinging_at_air")
        client.swing_arm()
        return

    ctx.log.info("fake_mining", block=block.name)

    def _swing_sequence() -> None:
        client.swing_arm()
        ctx.later(SWING_SPACING_S, client.swing_arm)
        ctx.later(SWING_SPACING_S * 2, client.swing_arm)

    client.look_at(block.position, False, ctx.guard(_swing_sequence))


def toggle_crouch(ctx: ActionContext) -> None:
    attempt = ctx.attempt
    attempt.is_crouching = not attempt.is_crouching
    ctx.log.info("toggling_crouch", crouching=attempt.is_crouching)
    ctx.client.set_control_state("sneak", attempt.is_crouching)


def wander(ctx: ActionContext) -> None:
    client = ctx.client
    pathfinder = client.pathfinder
    if pathfinder.is_moving():
        ctx.log.info("already_wandering")
        return

    entity = client.entity
    assert entity is not None
    pos = entity.position
    target_x = pos.x + ctx.rng.randint(-WANDER_RADIUS, WANDER_RADIUS)
    target_z = pos.z + ctx.rng.randint(-WANDER_RADIUS, WANDER_RADIUS)
    ctx.log.info("wandering", x=target_x, z=target_z)
    pathfinder.set_goal(GoalNearXZ(target_x, target_z, WANDER_GOAL_RANGE))


def switch_hotbar_slot(ctx: ActionContext) -> None:
    slot = ctx.rng.randint(0, 8)
    ctx.log.info("switching_hotbar", slot=slot)
    ctx.client.set_quick_bar_slot(slot)


def look_at_player(ctx: ActionContext) -> bool:
    client = ctx.client

    def _is_other_player(entity: Entity) -> bool:
        return entity.type == "player" and entity.username != client.username

    player = client.nearest_entity(_is_other_player)
    if player is None:
        ctx.log.info("no_player_nearby")
        return False
    ctx.log.info("looking_at_player", player=player.username)
    # Aim at the eyes
    client.look_at(player.position.offset(0, player.height, 0))
    return True


def idle(ctx: ActionContext) -> None:
    ctx.log.info("idling")


def break_foliage(ctx: ActionContext) -> None:
    client = ctx.client

    def _is_foliage(blk: Block) -> bool:
        return blk.name in FOLIAGE

    block = client.find_block(_is_foliage, 6)
    if block is None:
        ctx.log.info("no_foliage_nearby")
        return
    ctx.log.info("breaking_foliage", block=block.name)
    client.look_at(block.position.offset(0.5, 0.5, 0.5), False, ctx.guard(client.dig, block))


def toss_random_item(ctx: ActionContext) -> None:
    items = [item for item in ctx.client.inventory_items() if item.slot in MAIN_INVENTORY_SLOTS]
    if not items:
        ctx.log.info("nothing_to_toss")
        return
    item = ctx.rng.choice(items)
    ctx.log.info("tossing_item", item=item.name, slot=item.slot)
    ctx.client.toss(item.type, None, 1)


# Index in this tuple is the action id.
CATALOG: tuple[Action, ...] = (
    Action("move_burst", move_burst),
    Action("jump", jump),
    Action("look_around", look_around),
    Action("fake_mine", fake_mine),
    Action("toggle_crouch", toggle_crouch),
    Action("wander", wander, stationary=False),
    Action("switch_hotbar_slot", switch_hotbar_slot),
    Action("look_at_player", look_at_player),
    Action("idle", idle),
    Action("break_foliage", break_foliage),
    Action("toss_random_item", toss_random_item),
)

WANDER_ACTION_ID = 5
