# src/tickdown/tasks/countdown.py

from __future__ import annotations

"""
Deadline countdown.

A small background loop that, once per interval:
- takes a snapshot of the current tasks,
- renders "Xh Ym Zs" (or an expiry marker) for every task,
- publishes a fresh id -> text mapping to subscribers.

The loop only reads tasks and the clock; it never touches the remote store.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone
from enum import StrEnum

from .task_models import Task

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_MARKER = "Time's up!"
DEFAULT_INVALID_MARKER = "Invalid deadline"

_MS = timedelta(milliseconds=1)

Countdown = dict[str, str]
CountdownListener = Callable[[Countdown], None]
TaskSource = Callable[[], Iterable[Task]]
Clock = Callable[[], datetime]


class EngineState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def remaining_ms(deadline: datetime, now: datetime) -> int:
    """Whole milliseconds until deadline (floored, negative once passed)."""
    return (deadline - now) // _MS


def render_remaining(difference_ms: int, *, expiry_marker: str = DEFAULT_EXPIRY_MARKER) -> str:
    if difference_ms <= 0:
        return expiry_marker
    hours = difference_ms // 3_600_000
    minutes = (difference_ms % 3_600_000) // 60_000
    seconds = (difference_ms % 60_000) // 1000
    return f"{hours}h {minutes}m {seconds}s"


class CountdownEngine:
    """
    Recomputes the remaining time of every task on a fixed period.

    State machine: IDLE -> RUNNING on start(), RUNNING -> IDLE on stop().
    start() while running is a caller error; stop() is idempotent.
    Use as a context manager to guarantee the thread is released.
    """

    def __init__(
        self,
        source: TaskSource,
        *,
        interval_seconds: float = 1.0,
        expiry_marker: str = DEFAULT_EXPIRY_MARKER,
        invalid_marker: str = DEFAULT_INVALID_MARKER,
        clock: Clock | None = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._source = source
        self._interval = float(interval_seconds)
        self.expiry_marker = expiry_marker
        self.invalid_marker = invalid_marker
        self._clock = clock or _utc_now

        self._latest: Countdown = {}
        self._listeners: list[CountdownListener] = []
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()

    # ---- state ----

    @property
    def state(self) -> EngineState:
        return EngineState.RUNNING if self._thread is not None else EngineState.IDLE

    @property
    def running(self) -> bool:
        return self.state == EngineState.RUNNING

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def snapshot(self) -> Countdown:
        return dict(self._latest)

    # ---- observers ----

    def subscribe(self, listener: CountdownListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def cancel() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return cancel

    # ---- computation ----

    def render(self, task: Task, now: datetime) -> str:
        try:
            deadline = task.deadline_at()
        except ValueError:
            return self.invalid_marker
        return render_remaining(remaining_ms(deadline, now), expiry_marker=self.expiry_marker)

    def tick(self) -> Countdown:
        """Build a fresh mapping for the current tasks and publish it."""
        now = self._clock()
        fresh: Countdown = {task.id: self.render(task, now) for task in tuple(self._source())}
        self._latest = fresh

        for listener in list(self._listeners):
            try:
                listener(dict(fresh))
            except Exception:
                logger.exception("Countdown listener failed")
        return dict(fresh)

    # ---- lifecycle ----

    def _run(self, stop_event: threading.Event) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Countdown tick failed")
            if stop_event.wait(self._interval):
                break

    def start(self) -> None:
        with self._lifecycle_lock:
            if self._thread is not None:
                raise RuntimeError("CountdownEngine is already running")

            self._stop_event = threading.Event()
            t = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="countdown",
                daemon=True,
            )
            self._thread = t
            try:
                t.start()
            except Exception:
                self._thread = None
                raise
        logger.info("Countdown started (interval=%.2fs).", self._interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        with self._lifecycle_lock:
            t = self._thread
            if t is None:
                return
            self._stop_event.set()
            if t is not threading.current_thread():
                t.join(timeout=timeout)
                if t.is_alive():
                    logger.warning(
                        "Countdown thread did not stop within %ss; it exits after the current tick.",
                        timeout,
                    )
            self._thread = None
        logger.info("Countdown stopped.")

    def __enter__(self) -> CountdownEngine:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
