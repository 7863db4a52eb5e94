# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Abstract base for connected game-session clients.

The protocol work (handshake, packet codec, world tracking, path search) lives
in a client library. afkbot drives it through this interface only; an adapter
for a concrete library subclasses :class:`GameClient` and :class:`Pathfinder`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

# Events emitted by a client
SPAWN = "spawn"  # session established, no args
KICKED = "kicked"  # forcibly removed, (reason)
END = "end"  # session ended, (reason)
ERROR = "error"  # transport/protocol error, (exception)
CHAT = "chat"  # inbound chat, (username, message)
PHYSICS_TICK = "physics_tick"  # periodic liveness tick, no args

CONTROLS = ("forward", "back", "left", "right", "jump", "sprint", "sneak")


@dataclass(frozen=True)
class Vec3:
    x: float
    y: float
    z: float

    def offset(self, dx: float, dy: float, dz: float) -> Vec3:
        return Vec3(self.x + dx, self.y + dy, self.z + dz)


@dataclass
class Block:
    name: str
    type: int
    position: Vec3


@dataclass
class Entity:
    type: str
    position: Vec3
    username: str | None = None
    height: float = 1.8


@dataclass
class Item:
    name: str
    type: int
    slot: int
    count: int = 1


@dataclass(frozen=True)
class GoalNearXZ:
    """Navigation goal: get within ``range`` blocks of (x, z), any height."""

    x: float
    z: float
    range: float


class Pathfinder(ABC):
    """Navigation extension of a game client."""

    @abstractmethod
    def default_movements(self) -> Any:
        """Build the default movement capability profile for the current world."""

    @abstractmethod
    def set_movements(self, movements: Any) -> None:
        """Set the movement capability profile used for path search."""

    @abstractmethod
    def set_goal(self, goal: GoalNearXZ | None) -> None:
        """Set a navigation goal, or clear it with None."""

    @abstractmethod
    def is_moving(self) -> bool:
        """Check whether navigation is currently active."""

    @abstractmethod
    def stop(self) -> None:
        """Stop navigation at the next safe point."""


class GameClient(ABC):
    """Abstract base for a connected game session.

    Listener bookkeeping is implemented here so adapters only need to call
    :meth:`emit`. Everything else is delegated to the client library.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    # Event surface

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a handler for an event."""
        self._listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable[..., Any]) -> None:
        """Detach a handler. Unknown handlers are ignored."""
        handlers = self._listeners.get(event)
        if not handlers:
            return
        try:
            handlers.remove(handler)
        except ValueError:
            return
        if not handlers:
            del self._listeners[event]

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(handlers) for handlers in self._listeners.values())

    def emit(self, event: str, *args: Any) -> None:
        """Deliver an event to every handler registered for it."""
        for handler in list(self._listeners.get(event, ())):
            handler(*args)

    # Lifecycle

    @abstractmethod
    def connect(self) -> None:
        """Start connecting in the background and return immediately.

        Progress is reported through events: ``spawn`` on success, ``error``
        and/or ``end`` on failure.
        """

    @abstractmethod
    def end(self, reason: str | None = None) -> None:
        """Terminate the connection. The ``end`` event follows.

        Should be idempotent - safe to call on an already ended client.
        """

    @property
    @abstractmethod
    def username(self) -> str:
        """Name the server knows this client by."""

    @property
    @abstractmethod
    def entity(self) -> Entity | None:
        """Own player entity; None before spawn and after the session ends."""

    @property
    @abstractmethod
    def pathfinder(self) -> Pathfinder:
        """Navigation extension bound to this client."""

    # Commands

    @abstractmethod
    def set_control_state(self, control: str, state: bool) -> None:
        """Press or release a movement control (see CONTROLS)."""

    @abstractmethod
    def look(self, yaw: float, pitch: float, force: bool = False) -> None:
        """Set absolute look orientation in radians."""

    @abstractmethod
    def look_at(
        self,
        point: Vec3,
        force: bool = False,
        callback: Callable[[], None] | None = None,
    ) -> None:
        """Turn to face a point; ``callback`` runs once the turn completes."""

    @abstractmethod
    def find_block(self, matching: Callable[[Block], bool], max_distance: float) -> Block | None:
        """Nearest block satisfying ``matching`` within ``max_distance``."""

    @abstractmethod
    def nearest_entity(self, matching: Callable[[Entity], bool]) -> Entity | None:
        """Nearest entity satisfying ``matching``."""

    @abstractmethod
    def dig(self, block: Block) -> None:
        """Start digging a block."""

    @abstractmethod
    def swing_arm(self) -> None:
        """Play the arm swing animation."""

    @abstractmethod
    def set_quick_bar_slot(self, slot: int) -> None:
        """Select hotbar slot 0-8."""

    @abstractmethod
    def inventory_items(self) -> list[Item]:
        """All occupied inventory slots."""

    @abstractmethod
    def toss(self, item_type: int, metadata: int | None, count: int) -> None:
        """Drop ``count`` units of an item type."""

    @abstractmethod
    def chat(self, message: str) -> None:
        """Send a public chat message."""
