# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Reply to chat messages that mention the bot."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from afkbot.constants import AFK_REPLIES, CHAT_COOLDOWN_S, REPLY_DELAY_MAX_S, REPLY_DELAY_MIN_S
from afkbot.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from afkbot.core.attempt import SessionAttempt
    from afkbot.core.timers import TimerLoop

logger = get_logger(__name__)


class ChatResponder:
    """Answer name mentions with a short AFK reply, at most once per cooldown.

    The cooldown is measured from the mention that triggered the last reply,
    not from when the reply was sent.
    """

    def __init__(
        self,
        own_name: str,
        loop: TimerLoop,
        rng: random.Random | None = None,
        *,
        replies: Sequence[str] = AFK_REPLIES,
        cooldown_s: float = CHAT_COOLDOWN_S,
        reply_delay_min_s: float = REPLY_DELAY_MIN_S,
        reply_delay_max_s: float = REPLY_DELAY_MAX_S,
    ) -> None:
        self._own_name = own_name.lower()
        self._loop = loop
        self._rng = rng or random.Random()
        self._replies = tuple(replies)
        self._cooldown_s = cooldown_s
        self._reply_delay_min_ms = int(reply_delay_min_s * 1000)
        self._reply_delay_max_ms = int(reply_delay_max_s * 1000)

    def handle(self, attempt: SessionAttempt, username: str, message: str) -> str | None:
        """Process one inbound chat line.

        Returns:
            The reply that was scheduled, or None
        """
        client = attempt.client
        if client is None or username == client.username:
            return None
        if self._own_name not in message.lower():
            return None

        log = attempt.log or logger
        log.info("chat_mention", username=username, message=message)

        now = self._loop.time()
        if attempt.last_reply_at is not None and now - attempt.last_reply_at < self._cooldown_s:
            log.info("chat_cooldown_active")
            return None
        attempt.last_reply_at = now

        reply = self._rng.choice(self._replies)
        delay_s = self._rng.randint(self._reply_delay_min_ms, self._reply_delay_max_ms) / 1000
        self._loop.call_later(delay_s, self._send, attempt, reply)
        return reply

    def _send(self, attempt: SessionAttempt, reply: str) -> None:
        log = attempt.log or logger
        if not attempt.is_live():
            log.debug("chat_reply_dropped", reply=reply)
            return
        try:
            attempt.client.chat(reply)
        except Exception as e:
            log.warning("chat_reply_failed", error=str(e))
            return
        log.info("chat_replied", reply=reply)
