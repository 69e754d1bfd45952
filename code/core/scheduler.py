"""Batched, rate-limited commits of search-param mutations.

Every handle owns one ``PushScheduler``. Mutations are applied to its
accumulator right away and committed to history as a single entry once the
debounce window is over, so many setters called in the same callback end up
as one navigation.
"""

import logging
from typing import TYPE_CHECKING, Optional

from utils.url_state import Pairs, QueryParams, format_value, iter_pairs

if TYPE_CHECKING:
    from core.context import ParamContext
    from core.timers import TimerHandle

logger = logging.getLogger(__name__)


class PushScheduler:
    """
    Accumulates mutations and commits them with at most one pending timer.

    Attributes:
        params: Accumulated query parameters, seeded from the location the
            owning handle was built for
    """

    def __init__(self, context: "ParamContext", params: QueryParams):
        self.context = context
        self.params = params
        self._timer: Optional["TimerHandle"] = None
        self.commits = 0

    @property
    def pending(self) -> bool:
        """Whether a commit is scheduled and has not run yet."""
        timer = self._timer
        return timer is not None and not (timer.done or timer.cancelled)

    def apply(self, values: Pairs) -> bool:
        """Apply mutations to the accumulator; returns whether anything changed."""
        changed = False
        for name, value in iter_pairs(values):
            if value is None:
                if self.params.has(name):
                    self.params.delete(name)
                    changed = True
            elif self.params.get_all(name) != [format_value(value)]:
                self.params.set(name, value)
                changed = True
        return changed

    def push(self, values: Pairs) -> None:
        """
        Apply ``values`` and schedule a commit if needed.

        Args:
            values: Mapping (or ordered pairs) of parameter name to value;
                None deletes the parameter
        """
        if not self.apply(values):
            return
        if self.pending:
            logger.debug("Commit already pending, batching mutation")
            return

        delay = self.context.rate_limiter.request()
        if delay is None:
            self.commit()
            return
        self._timer = self.context.schedule(delay, self.commit)
        logger.debug(f"Commit scheduled in {delay}ms")

    def commit(self) -> None:
        """Write the accumulated parameters to history as a single entry."""
        self._timer = None
        location = self.context.location
        query_string = self.params.to_string()
        url = "".join(
            [
                location.pathname,
                f"?{query_string}" if query_string else "",
                location.hash or "",
            ]
        )
        self.commits += 1
        logger.debug(f"Committing {url}")
        try:
            self.context.history.push(url)
        except Exception as e:
            logger.error(f"Failed to push {url} to history: {e}")
            raise

    def cancel(self) -> None:
        """Drop the pending commit, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __repr__(self) -> str:
        return f"PushScheduler(params={self.params.to_string()!r}, pending={self.pending})"
