"""
Shared search-param state for a tree of components.

One ``ParamContext`` is created per app (or per independent part of an
app). Components ask it for the handle of the current location, watch its
``location`` parameter to re-render after navigation, and ``close()`` it
when they are torn down.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Set, Tuple

import param

from config import MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS
from utils.url_state import Pairs, resolve_url

from .handle import SearchParams
from .history import Location, default_history
from .rate_limit import PushRateLimiter
from .registry import SetterRegistry
from .timers import TimerHandle, default_timers

if TYPE_CHECKING:
    from config import SyncConfig

logger = logging.getLogger(__name__)


class ContextClosedError(RuntimeError):
    """Raised when a closed ``ParamContext`` is asked for a handle."""


class ParamContext(param.Parameterized):
    """
    Shared state of the search-param engine.

    Attributes:
        keep: Parameters kept when navigating to another path
        minimum_delay: Minimum delay between two history pushes, in
            milliseconds; negative to commit synchronously
        max_cached_handles: Number of location handles kept in the cache
            (None keeps all of them)
        location: Latest known location, updated on every navigation
    """

    keep = param.List(default=[], doc="Parameters kept across page changes")
    minimum_delay = param.Integer(
        default=MINIMUM_DELAY_BETWEEN_TWO_HISTORY_PUSH_IN_MS,
        doc="Minimum delay between two history pushes (ms), negative for synchronous",
    )
    max_cached_handles = param.Integer(
        default=64, bounds=(1, None), allow_None=True, doc="Maximum number of cached handles"
    )
    location = param.ClassSelector(class_=Location, doc="Current location")

    def __init__(self, history: Any = None, timers: Any = None, **params):
        """
        Initialize the context.

        Args:
            history: Navigation sink; defaults to the browser location inside
                a Panel session, an in-memory history otherwise
            timers: Timer source for delayed commits; defaults to the
                current Bokeh document inside a Panel session, daemon-thread
                timers otherwise
            **params: Values for ``keep``, ``minimum_delay``, ``max_cached_handles``
        """
        super().__init__(**params)
        self.history = history if history is not None else default_history()
        self.timers = timers if timers is not None else default_timers()
        self.rate_limiter = PushRateLimiter(self.minimum_delay, self.timers.now)
        self.setters = SetterRegistry()
        self._cache: List[Tuple[Location, SearchParams]] = []
        self._pending: Set[TimerHandle] = set()
        self.closed = False

        self.location = self.history.location
        self._unlisten = self.history.listen(self._on_navigate)
        self.param.watch(self._on_minimum_delay_change, "minimum_delay")
        logger.info(
            f"Param context created (keep={self.keep}, minimum_delay={self.minimum_delay}ms)"
        )

    @classmethod
    def from_config(cls, config: "SyncConfig", history: Any = None, timers: Any = None) -> "ParamContext":
        """Build a context from a ``SyncConfig``."""
        config.validate()
        return cls(
            history=history,
            timers=timers,
            keep=list(config.keep),
            minimum_delay=config.minimum_delay,
            max_cached_handles=config.max_cached_handles,
        )

    @property
    def last_push(self) -> Optional[float]:
        """Time of the latest mutation request (ms), None if there was none."""
        return self.rate_limiter.last_request

    @property
    def cached_handles(self) -> int:
        return len(self._cache)

    def _on_navigate(self, location: Location) -> None:
        self.location = location

    def _on_minimum_delay_change(self, event) -> None:
        self.rate_limiter.minimum_delay = event.new

    def search_params(self, location: Optional[Location] = None) -> SearchParams:
        """
        Return the handle for ``location`` (the current location by default).

        The same location object always gets the same handle while it is
        cached; the oldest handles are dropped once ``max_cached_handles``
        is reached.

        Raises:
            ContextClosedError: If the context has been closed
        """
        if self.closed:
            raise ContextClosedError("Param context is closed")
        location = location if location is not None else self.location
        for cached_location, handle in self._cache:
            if cached_location is location:
                return handle

        handle = SearchParams(self, location)
        self._cache.append((location, handle))
        if self.max_cached_handles is not None and len(self._cache) > self.max_cached_handles:
            self._cache = self._cache[-self.max_cached_handles :]
        logger.debug(f"Created handle for {location.path}")
        return handle

    def url_for(self, to: Optional[str] = None, params: Optional[Pairs] = None) -> str:
        """URL to ``to`` (default: current path) keeping the relevant params."""
        return resolve_url(self.location, self.keep, to, params)

    def navigate(self, to: Optional[str] = None, params: Optional[Pairs] = None) -> None:
        """Push ``url_for(to, params)`` to history right away."""
        self.history.push(self.url_for(to, params))

    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` after ``delay`` ms unless the context is closed first."""
        handle: Optional[TimerHandle] = None

        def run() -> None:
            # Thread timers may fire before call_later has returned
            if handle is not None:
                self._pending.discard(handle)
            if self.closed:
                return
            callback()

        handle = self.timers.call_later(delay, run)
        if not handle.done:
            self._pending.add(handle)
        return handle

    @property
    def pending_commits(self) -> int:
        return sum(1 for handle in self._pending if not (handle.done or handle.cancelled))

    def close(self) -> None:
        """Cancel pending commits and drop every cached handle and setter."""
        if self.closed:
            return
        cancelled = self.pending_commits
        for handle in list(self._pending):
            handle.cancel()
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending commit(s)")
        self._pending.clear()
        self._cache = []
        self.setters.clear()
        self._unlisten()
        self.closed = True
        logger.info("Param context closed")

    def __enter__(self) -> "ParamContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
