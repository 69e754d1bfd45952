"""Deferred callbacks for delayed commits.

Under ``panel serve`` callbacks run on the Bokeh document's event loop
(``DocumentTimers``); outside a session they run on daemon threads
(``ThreadTimers``). ``ManualTimers`` drives a virtual clock by hand, which
makes debounce and rate-limit behavior reproducible in tests and scripts.
"""

import heapq
import itertools
import logging
import threading
import time
from typing import Any, Callable, List, Optional, Tuple

import panel as pn
from bokeh.io import curdoc

logger = logging.getLogger(__name__)


class TimerHandle:
    """Pending callback that can be cancelled until it has run."""

    def __init__(self, cancel: Callable[[], None]):
        self._cancel = cancel
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        if self.cancelled or self.done:
            return
        self.cancelled = True
        self._cancel()


def monotonic_ms() -> float:
    return time.monotonic() * 1000


class DocumentTimers:
    """Timers backed by a Bokeh document's timeout callbacks."""

    def __init__(self, doc: Any = None):
        self.doc = doc if doc is not None else (pn.state.curdoc or curdoc())

    def now(self) -> float:
        return monotonic_ms()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle: TimerHandle

        def run() -> None:
            handle.done = True
            callback()

        bokeh_callback = self.doc.add_timeout_callback(run, int(delay))
        handle = TimerHandle(lambda: self.doc.remove_timeout_callback(bokeh_callback))
        return handle


class ThreadTimers:
    """Timers backed by ``threading.Timer`` for use outside a Panel session.

    Callbacks run on a daemon thread, so scripts and notebooks still get their
    delayed commits without a Bokeh server driving the document.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._timers: List[threading.Timer] = []

    def now(self) -> float:
        return monotonic_ms()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle: TimerHandle

        def run() -> None:
            try:
                if handle.cancelled:
                    return
                handle.done = True
                callback()
            finally:
                with self._lock:
                    if timer in self._timers:
                        self._timers.remove(timer)

        timer = threading.Timer(max(delay, 0) / 1000, run)
        timer.daemon = True
        handle = TimerHandle(timer.cancel)
        with self._lock:
            self._timers.append(timer)
        timer.start()
        return handle

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the timers started so far to finish (``timeout`` in seconds)."""
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)


def default_timers() -> Any:
    """Document timers inside a Panel session, thread timers otherwise."""
    if pn.state.curdoc is not None:
        return DocumentTimers(pn.state.curdoc)
    return ThreadTimers()


class ManualTimers:
    """Virtual clock whose timers only fire when the clock is advanced.

    Usage:
        timers = ManualTimers()
        timers.call_later(200, callback)
        timers.advance(199)   # nothing happens
        timers.advance(1)     # callback runs
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._counter = itertools.count()
        self._queue: List[Tuple[float, int, TimerHandle, Callable[[], None]]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(lambda: None)
        heapq.heappush(self._queue, (self._now + max(delay, 0), next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, delay: float) -> None:
        """Move the clock forward by ``delay`` ms, firing due callbacks in order."""
        target = self._now + delay
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if handle.cancelled:
                continue
            handle.done = True
            callback()
        self._now = target

    def run_all(self, limit: Optional[int] = 1000) -> None:
        """Fire every pending callback, including ones scheduled while running."""
        fired = 0
        while self._queue:
            if limit is not None and fired >= limit:
                raise RuntimeError(f"Timers still pending after {limit} callbacks")
            when, _, handle, callback = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if handle.cancelled:
                continue
            handle.done = True
            callback()
            fired += 1
