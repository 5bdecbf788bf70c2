from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, Optional, Protocol, TypeVar

from trackdash.config import DEBOUNCE_MS


logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerLike(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerLike]


def _thread_timer(interval: float, fn: Callable[[], None]) -> TimerLike:
    timer = threading.Timer(interval, fn)
    timer.daemon = True
    return timer


class Debouncer(Generic[T]):
    """Emit a value only once it has stopped changing for ``interval_ms``.

    Every ``push`` cancels the pending emission and restarts the quiet
    interval, so a burst of pushes settles to the last value exactly once.
    ``cancel`` is the teardown hook: nothing is emitted after it returns.
    """

    def __init__(
        self,
        on_settle: Optional[Callable[[T], Any]] = None,
        *,
        interval_ms: int = DEBOUNCE_MS,
        initial: Optional[T] = None,
        timer_factory: TimerFactory = _thread_timer,
    ) -> None:
        if interval_ms < 0:
            raise ValueError("interval_ms must be >= 0")
        self.interval_ms = interval_ms
        self._on_settle = on_settle
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: Optional[TimerLike] = None
        self._pending_value: Optional[T] = None
        self._has_pending = False
        self._generation = 0
        self._settled: Optional[T] = initial

    @property
    def settled(self) -> Optional[T]:
        with self._lock:
            return self._settled

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._has_pending

    def push(self, value: T) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            generation = self._generation
            self._pending_value = value
            self._has_pending = True
            timer = self._timer_factory(self.interval_ms / 1000.0, lambda: self._fire(generation))
            self._timer = timer
        timer.start()

    def flush(self) -> None:
        """Emit the pending value now instead of waiting out the interval."""
        with self._lock:
            if not self._has_pending:
                return
            self._cancel_locked()
            generation = self._generation
        self._fire(generation)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._has_pending = False
            self._pending_value = None

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer push or a cancel happened after this timer was armed.
            if generation != self._generation or not self._has_pending:
                return
            value = self._pending_value
            self._settled = value
            self._pending_value = None
            self._has_pending = False
            self._timer = None
            callback = self._on_settle
        logger.debug("Debounced value settled: %r", value)
        if callback is not None:
            callback(value)
