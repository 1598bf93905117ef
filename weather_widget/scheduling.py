"""Cancellable timers and a trailing-edge debouncer built on top of them."""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol


logger = logging.getLogger(__name__)


class CancelHandle(Protocol):
    def cancel(self) -> None:
        """Cancel the scheduled call; calling it again is a no-op."""
        ...


class Scheduler(Protocol):
    """Something that can run a callable after a delay."""

    def schedule_after(self, delay: float, fn: Callable[[], Any]) -> CancelHandle:
        ...


class _TimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    """Scheduler backed by :class:`threading.Timer` daemon threads."""

    def schedule_after(self, delay: float, fn: Callable[[], Any]) -> CancelHandle:
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return _TimerHandle(timer)


class Debouncer:
    """Run a callable once input has been quiet for ``delay`` seconds.

    Each :meth:`call` cancels the previously scheduled invocation, so only the
    arguments of the most recent call within a burst are ever used.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._handle: Optional[CancelHandle] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    def call(self, fn: Callable[..., Any], *args: Any) -> None:
        with self._lock:
            if self._handle is not None:
                logger.debug("Rescheduling debounced call")
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self._scheduler.schedule_after(
                self._delay, lambda: self._fire(generation, fn, args)
            )

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        with self._lock:
            if self._handle is None:
                return False
            self._handle.cancel()
            self._handle = None
            self._generation += 1
            return True

    def _fire(self, generation: int, fn: Callable[..., Any], args: tuple) -> None:
        with self._lock:
            # A timer thread may already be running when it gets cancelled.
            if generation != self._generation:
                return
            self._handle = None
        fn(*args)


__all__ = ["CancelHandle", "Scheduler", "ThreadingScheduler", "Debouncer"]
