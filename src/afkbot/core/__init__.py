"""Session-resilience core."""

from __future__ import annotations

from afkbot.core.attempt import SessionAttempt
from afkbot.core.coordinator import DisconnectCoordinator, backoff_delay
from afkbot.core.driver import SessionDriver
from afkbot.core.scheduler import ActionScheduler
from afkbot.core.watchdog import LivenessWatchdog

__all__ = [
    "ActionScheduler",
    "DisconnectCoordinator",
    "LivenessWatchdog",
    "SessionAttempt",
    "SessionDriver",
    "backoff_delay",
]
