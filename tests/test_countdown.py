# tests/test_countdown.py

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from tickdown.tasks.countdown import CountdownEngine, EngineState, render_remaining
from tickdown.tasks.task_models import Task

from .fakes import ManualClock


def _engine(tasks: list[Task], clock: ManualClock, **kwargs) -> CountdownEngine:
    return CountdownEngine(lambda: tasks, clock=clock, **kwargs)


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (3_661_000, "1h 1m 1s"),
        (999, "0h 0m 0s"),
        (1000, "0h 0m 1s"),
        (59 * 60_000 + 59_999, "0h 59m 59s"),
        (50 * 3_600_000, "50h 0m 0s"),
        (0, "Time's up!"),
        (-5, "Time's up!"),
    ],
)
def test_render_remaining(ms: int, expected: str) -> None:
    assert render_remaining(ms) == expected


def test_tick_formats_remaining_time() -> None:
    clock = ManualClock()
    task = Task(id="t1", text="x", deadline=clock.iso_in(milliseconds=3_661_000))
    engine = _engine([task], clock)

    assert engine.tick() == {"t1": "1h 1m 1s"}
    assert engine.snapshot() == {"t1": "1h 1m 1s"}


def test_tick_at_deadline_is_expired() -> None:
    clock = ManualClock()
    task = Task(id="t1", text="x", deadline=clock.now.isoformat())
    engine = _engine([task], clock, expiry_marker="EXPIRED")

    assert engine.tick() == {"t1": "EXPIRED"}


def test_tick_invalid_deadline_uses_invalid_marker() -> None:
    clock = ManualClock()
    engine = _engine([Task(id="t1", text="x", deadline="soon")], clock)
    assert engine.tick() == {"t1": "Invalid deadline"}


def test_naive_deadline_is_local_time() -> None:
    clock = ManualClock()
    local_naive = (clock.now.astimezone() + timedelta(hours=2)).replace(tzinfo=None)
    task = Task(id="t1", text="x", deadline=local_naive.isoformat(timespec="minutes"))

    assert _engine([task], clock).tick() == {"t1": "2h 0m 0s"}


def test_tick_drops_entries_for_removed_tasks() -> None:
    clock = ManualClock()
    tasks = [
        Task(id="a", text="a", deadline=clock.iso_in(minutes=5)),
        Task(id="b", text="b", deadline=clock.iso_in(minutes=5)),
    ]
    engine = _engine(tasks, clock)
    assert set(engine.tick()) == {"a", "b"}

    tasks.pop(0)
    clock.advance(seconds=1)

    assert engine.tick() == {"b": "0h 4m 59s"}


def test_tick_publishes_to_subscribers_and_survives_failures() -> None:
    clock = ManualClock()
    engine = _engine([Task(id="a", text="a", deadline=clock.iso_in(seconds=10))], clock)
    received = []

    def broken(_mapping) -> None:
        raise RuntimeError("boom")

    engine.subscribe(broken)
    cancel = engine.subscribe(received.append)
    engine.tick()
    cancel()
    engine.tick()

    assert received == [{"a": "0h 0m 10s"}]


def test_start_stop_lifecycle() -> None:
    clock = ManualClock()
    engine = _engine([Task(id="a", text="a", deadline=clock.iso_in(hours=1))], clock, interval_seconds=0.01)
    ticked = threading.Event()
    engine.subscribe(lambda _m: ticked.set())

    assert engine.state == EngineState.IDLE
    engine.start()
    try:
        assert engine.state == EngineState.RUNNING
        assert ticked.wait(2.0)
        with pytest.raises(RuntimeError):
            engine.start()
    finally:
        engine.stop()

    assert engine.state == EngineState.IDLE
    engine.stop()  # idempotent
    assert not any(t.name == "countdown" and t.is_alive() for t in threading.enumerate())


def test_no_ticks_after_stop() -> None:
    clock = ManualClock()
    engine = _engine([], clock, interval_seconds=0.01)
    counter = {"n": 0}
    engine.subscribe(lambda _m: counter.__setitem__("n", counter["n"] + 1))

    engine.start()
    engine.stop()
    after_stop = counter["n"]
    threading.Event().wait(0.05)

    assert counter["n"] == after_stop


def test_stop_warns_when_thread_outlives_join_timeout(caplog: pytest.LogCaptureFixture) -> None:
    engine = _engine([], ManualClock(), interval_seconds=0.01)
    entered = threading.Event()
    release = threading.Event()

    def slow_listener(_m) -> None:
        entered.set()
        release.wait(2.0)

    engine.subscribe(slow_listener)
    engine.start()
    assert entered.wait(2.0)
    worker = next(t for t in threading.enumerate() if t.name == "countdown" and t.is_alive())

    with caplog.at_level("WARNING", logger="tickdown.tasks.countdown"):
        engine.stop(timeout=0.01)

    release.set()
    worker.join(2.0)

    assert any("did not stop" in r.getMessage() for r in caplog.records)
    assert engine.state == EngineState.IDLE
    assert not worker.is_alive()


def test_context_manager_stops_on_error() -> None:
    engine = _engine([], ManualClock(), interval_seconds=0.01)

    with pytest.raises(ValueError):
        with engine:
            assert engine.running
            raise ValueError("init failed")

    assert not engine.running


def test_engine_can_restart_after_stop() -> None:
    engine = _engine([], ManualClock(), interval_seconds=0.01)
    engine.start()
    engine.stop()
    engine.start()
    try:
        assert engine.running
    finally:
        engine.stop()


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CountdownEngine(lambda: [], interval_seconds=0)
