"""Tests for the disconnect coordinator and backoff tiers."""

from __future__ import annotations

import itertools

import pytest

from afkbot.core.attempt import SessionAttempt
from afkbot.core.coordinator import DisconnectCoordinator, backoff_delay
from afkbot.core.watchdog import LivenessWatchdog

from tests.fake_client import FakeClient
from tests.fake_loop import FakeLoop


def test_backoff_tiers() -> None:
    assert backoff_delay(False) == 300.0
    assert backoff_delay(True) == 10.0


def test_backoff_tiers_are_configurable() -> None:
    assert backoff_delay(False, reconnect_delay_s=1, reconnect_fail_delay_s=2) == 2
    assert backoff_delay(True, reconnect_delay_s=1, reconnect_fail_delay_s=2) == 1


class TestDisconnectCoordinator:
    def _setup(self, loop: FakeLoop, established: bool) -> tuple[DisconnectCoordinator, SessionAttempt, list[int]]:
        restarts: list[int] = []
        coordinator = DisconnectCoordinator(loop, lambda: restarts.append(1))
        client = FakeClient()
        attempt = SessionAttempt(generation=1, client=client, has_ever_established=established)
        return coordinator, attempt, restarts

    def test_first_call_wins(self, loop: FakeLoop) -> None:
        coordinator, attempt, restarts = self._setup(loop, established=True)

        assert coordinator.handle_failure(attempt, "error") is True
        assert coordinator.handle_failure(attempt, "end") is False
        assert coordinator.handle_failure(attempt, "kicked") is False

        assert coordinator.restarts_scheduled == 1
        assert len(loop.pending()) == 1
        loop.advance(1000)
        assert restarts == [1]

    @pytest.mark.parametrize(("established", "delay_s"), [(False, 300.0), (True, 10.0)])
    def test_restart_delay_follows_tier(self, loop: FakeLoop, established: bool, delay_s: float) -> None:
        coordinator, attempt, restarts = self._setup(loop, established=established)
        start = loop.time()

        coordinator.handle_failure(attempt, "boom")

        (handle,) = loop.pending()
        assert handle.when() - start == pytest.approx(delay_s)
        loop.advance(delay_s - 0.5)
        assert restarts == []
        loop.advance(0.5)
        assert restarts == [1]
        assert not coordinator.restart_pending

    def test_cancels_watchdog(self, loop: FakeLoop) -> None:
        coordinator, attempt, _ = self._setup(loop, established=True)
        fired: list[int] = []
        attempt.watchdog = LivenessWatchdog(loop, lambda: fired.append(1))
        attempt.watchdog.arm()

        coordinator.handle_failure(attempt, "end")

        assert not attempt.watchdog.armed
        loop.advance(100)
        assert fired == []

    def test_detaches_listeners_and_ends_client(self, loop: FakeLoop) -> None:
        coordinator, attempt, _ = self._setup(loop, established=True)
        client = attempt.client
        assert isinstance(client, FakeClient)
        attempt.listen("end", lambda reason=None: None)
        attempt.listen("physics_tick", lambda: None)

        coordinator.handle_failure(attempt, "error")

        assert client.listener_count() == 0
        assert client.ended
        assert client.end_reasons == ["session_teardown"]

    def test_attempt_without_client(self, loop: FakeLoop) -> None:
        restarts: list[int] = []
        coordinator = DisconnectCoordinator(loop, lambda: restarts.append(1))
        attempt = SessionAttempt(generation=1)

        assert coordinator.handle_failure(attempt, "client_create_failed") is True
        loop.advance(300)
        assert restarts == [1]

    @pytest.mark.parametrize("order", list(itertools.permutations(["error", "end", "kicked"])))
    def test_any_event_order_schedules_one_restart(self, loop: FakeLoop, order: tuple[str, ...]) -> None:
        coordinator, attempt, restarts = self._setup(loop, established=False)

        results = [coordinator.handle_failure(attempt, reason) for reason in order]

        assert results == [True, False, False]
        loop.advance(1000)
        assert restarts == [1]


def test_cancel_drops_scheduled_restart(loop: FakeLoop) -> None:
    restarts: list[int] = []
    coordinator = DisconnectCoordinator(loop, lambda: restarts.append(1))
    attempt = SessionAttempt(generation=1, has_ever_established=True)
    coordinator.handle_failure(attempt, "socketClosed")

    coordinator.cancel()
    coordinator.cancel()
    loop.advance(400)

    assert restarts == []
    assert not coordinator.restart_pending
    assert loop.pending() == []
