"""Locations and navigation sinks.

A navigation sink records new history entries (``push``), exposes the
current ``location`` and notifies listeners whenever it changes.

- ``MemoryHistory`` keeps entries in memory (tests, scripts, notebooks).
- ``PanelLocationHistory`` drives the browser address bar through
  ``pn.state.location``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional
from urllib.parse import urlsplit

import panel as pn

logger = logging.getLogger(__name__)

Listener = Callable[["Location"], None]


@dataclass(frozen=True, eq=False)
class Location:
    """
    A navigable address.

    Every navigation produces a new ``Location`` object, and consumers tell
    navigations apart by identity: two visits of the same URL are two
    different locations.

    Attributes:
        pathname: Path with a leading slash
        search: Query string with a leading ``?``, or empty
        hash: Fragment with a leading ``#``, or empty
    """

    pathname: str = "/"
    search: str = ""
    hash: str = ""

    @classmethod
    def from_path(cls, path: str) -> "Location":
        """Build a location from ``/path?query#hash``."""
        parts = urlsplit(path)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
        )

    @property
    def path(self) -> str:
        return f"{self.pathname}{self.search}{self.hash}"

    def __repr__(self) -> str:
        return f"Location({self.path!r})"


class _Listeners:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def listen(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unlisten() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unlisten

    def _notify(self, location: Location) -> None:
        for listener in list(self._listeners):
            listener(location)


class MemoryHistory(_Listeners):
    """In-memory history stack."""

    def __init__(self, initial: str = "/"):
        super().__init__()
        self.entries: List[Location] = [Location.from_path(initial)]

    @property
    def location(self) -> Location:
        return self.entries[-1]

    def push(self, path: str) -> None:
        location = Location.from_path(path)
        self.entries.append(location)
        logger.debug(f"History push: {location.path}")
        self._notify(location)

    def back(self) -> None:
        """Pop the latest entry, like the browser's back button."""
        if len(self.entries) > 1:
            self.entries.pop()
            self._notify(self.entries[-1])


class PanelLocationHistory(_Listeners):
    """Navigation sink bound to a Panel session's ``Location``."""

    def __init__(self, location: Any = None):
        super().__init__()
        self._panel_location = location if location is not None else pn.state.location
        if self._panel_location is None:
            raise RuntimeError("No Panel location available; run inside `panel serve`")
        self._location = self._read()
        self._panel_location.param.watch(self._on_change, ["pathname", "search", "hash"])

    def _read(self) -> Location:
        panel_location = self._panel_location
        return Location(
            pathname=panel_location.pathname or "/",
            search=panel_location.search or "",
            hash=panel_location.hash or "",
        )

    @property
    def location(self) -> Location:
        return self._location

    def push(self, path: str) -> None:
        target = Location.from_path(path)
        logger.debug(f"Updating browser location: {target.path}")
        self._panel_location.param.update(
            pathname=target.pathname,
            search=target.search,
            hash=target.hash,
        )

    def _on_change(self, *events: Any) -> None:
        self._location = self._read()
        self._notify(self._location)


def default_history(initial: Optional[str] = None) -> Any:
    """Browser history inside a Panel session, in-memory history otherwise."""
    if initial is None and pn.state.location is not None:
        return PanelLocationHistory(pn.state.location)
    return MemoryHistory(initial or "/")
