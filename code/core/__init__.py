"""Search-param synchronization engine."""

from .context import ContextClosedError, ParamContext
from .handle import SearchParams
from .history import Location, MemoryHistory, PanelLocationHistory
from .rate_limit import PushRateLimiter
from .registry import ParamSetter, SetterRegistry
from .scheduler import PushScheduler
from .timers import DocumentTimers, ManualTimers, ThreadTimers

__all__ = [
    "ContextClosedError",
    "DocumentTimers",
    "Location",
    "ManualTimers",
    "MemoryHistory",
    "PanelLocationHistory",
    "ParamContext",
    "ParamSetter",
    "PushRateLimiter",
    "PushScheduler",
    "SearchParams",
    "SetterRegistry",
    "ThreadTimers",
]
