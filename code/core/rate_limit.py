"""Rate limiting of history writes.

Browsers throttle (or silently ignore) history entries pushed too often, so
commits are spaced by a minimum delay. The limiter is stamped when a
mutation is *requested*, not when its commit lands: two bursts that start
close together are kept ``minimum_delay`` apart no matter how many
mutations each of them batches.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Negative delay: commit synchronously, without batching
SYNCHRONOUS = -1


class PushRateLimiter:
    """Stamp-on-request rate limiter shared by every handle of a context."""

    def __init__(self, minimum_delay: int, clock: Callable[[], float]):
        """
        Args:
            minimum_delay: Minimum delay between two requests, in milliseconds.
                A negative value disables batching entirely.
            clock: Function returning the current time in milliseconds
        """
        self.minimum_delay = minimum_delay
        self._clock = clock
        self._last_request: Optional[float] = None

    @property
    def last_request(self) -> Optional[float]:
        """Timestamp of the most recent request, None before the first one."""
        return self._last_request

    @property
    def synchronous(self) -> bool:
        return self.minimum_delay < 0

    def request(self) -> Optional[float]:
        """
        Record a new request and return how long its commit must wait.

        Returns:
            None to commit synchronously, otherwise a delay in milliseconds
        """
        now = self._clock()
        if self._last_request is not None and now < self._last_request:
            # Keep the timestamp monotonic if the clock goes backwards
            now = self._last_request
        elapsed = None if self._last_request is None else now - self._last_request
        self._last_request = now

        if self.synchronous:
            return None
        if elapsed is None or elapsed > self.minimum_delay:
            return 0
        logger.debug(f"Last push was {elapsed}ms ago, delaying commit by {self.minimum_delay}ms")
        return self.minimum_delay
