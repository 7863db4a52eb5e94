from __future__ import annotations

from afkbot.client.base import CHAT, END, ERROR, PHYSICS_TICK, SPAWN
from afkbot.client.chaos import ChaosClient, chaos_factory
from afkbot.core.driver import SessionDriver

from tests.fake_client import FakeClient, FakeClientFactory


def _collect(client: ChaosClient, event: str) -> list[tuple]:
    seen: list[tuple] = []
    client.on(event, lambda *args: seen.append(args))
    return seen


def test_chaos_relays_events() -> None:
    inner = FakeClient("AfkBot")
    client = ChaosClient(inner, label="t")
    spawns = _collect(client, SPAWN)
    chats = _collect(client, CHAT)
    ends = _collect(client, END)

    inner.spawn()
    inner.say("Steve", "hi")
    inner.drop("socketClosed")

    assert spawns == [()]
    assert chats == [("Steve", "hi")]
    assert ends == [("socketClosed",)]


def test_chaos_freezes_ticks_after_n() -> None:
    inner = FakeClient()
    client = ChaosClient(inner, freeze_after_ticks=3, label="t")
    ticks = _collect(client, PHYSICS_TICK)

    inner.tick(10)

    assert len(ticks) == 3
    assert client.tick_count == 10


def test_chaos_injects_error_once() -> None:
    inner = FakeClient()
    client = ChaosClient(inner, error_after_ticks=2, label="t")
    errors = _collect(client, ERROR)
    ticks = _collect(client, PHYSICS_TICK)

    inner.tick(5)

    assert len(errors) == 1
    assert isinstance(errors[0][0], ConnectionError)
    assert "t: injected error on tick #2" in str(errors[0][0])
    assert len(ticks) == 4


def test_chaos_drop_ratio_is_deterministic() -> None:
    def run() -> int:
        inner = FakeClient()
        client = ChaosClient(inner, seed=7, drop_tick_ratio=0.5)
        ticks = _collect(client, PHYSICS_TICK)
        inner.tick(200)
        return len(ticks)

    first = run()
    assert first == run()
    assert 0 < first < 200


def test_chaos_delegates_commands() -> None:
    inner = FakeClient("AfkBot")
    client = ChaosClient(inner)

    client.connect()
    client.chat("hello")
    client.set_quick_bar_slot(4)
    client.end("bye")

    assert inner.connect_calls == 1
    assert inner.chats == ["hello"]
    assert inner.slots == [4]
    assert inner.end_reasons == ["bye"]
    assert client.username == "AfkBot"
    assert client.pathfinder is inner.pathfinder


def test_frozen_chaos_client_triggers_watchdog_reconnect(bot_config, loop) -> None:  # noqa: ANN001
    inner_factory = FakeClientFactory()
    driver = SessionDriver(bot_config, chaos_factory(inner_factory, freeze_after_ticks=5), loop=loop)

    driver.start_attempt()
    inner = inner_factory.last
    inner.spawn()
    for _ in range(20):
        inner.tick()
        loop.advance(5)

    # Ticks stopped reaching the watchdog after the fifth one.
    assert inner.end_reasons[0] == "watchdog_timeout"
    assert len(inner_factory.clients) == 2
