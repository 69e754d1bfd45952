"""Stable setter identities.

Handles are rebuilt on every navigation, but a widget callback registered
once must keep working. The registry hands out one ``ParamSetter`` per
(name, default) for the whole lifetime of a context, and re-points it at the
newest handle every time that handle asks for it.
"""

import logging
from typing import TYPE_CHECKING, Any, Hashable, List, Optional, Tuple

from utils.codecs import ParamKind

if TYPE_CHECKING:
    from core.handle import SearchParams

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = (str, int, float, bool, bytes, type(None))


class ParamSetter:
    """Callable that encodes a value and pushes it through the bound handle."""

    def __init__(self, name: str, default: Any, codec: ParamKind, handle: "SearchParams"):
        self.name = name
        self.default = default
        self.codec = codec
        self.handle = handle
        self.calls = 0

    def bind(self, handle: "SearchParams") -> None:
        """Commit through ``handle`` from now on."""
        self.handle = handle

    def __call__(self, value: Any) -> None:
        handle = self.handle
        if handle.context.closed:
            logger.warning(f"Ignoring update of '{self.name}': context is closed")
            return
        self.calls += 1
        params = handle.scheduler.params
        entries = self.codec.encode(params, self.name, value, self.default)
        if all(_is_applied(params, key, encoded) for key, encoded in entries):
            return
        handle.push([(self.name, None)] + entries)

    def __repr__(self) -> str:
        return f"ParamSetter({self.name!r}, default={self.default!r})"


def _is_applied(params: Any, key: str, value: Optional[str]) -> bool:
    if value is None:
        return not params.has(key)
    return params.get_all(key) == [value]


def _default_matches(registered: Any, default: Any) -> bool:
    if isinstance(default, PRIMITIVE_TYPES) and isinstance(registered, PRIMITIVE_TYPES):
        if type(default) is not type(registered):
            return False
        # nan never equals itself but still names the same default
        if default != default and registered != registered:
            return True
        return registered == default
    return registered is default


class SetterRegistry:
    """Ordered (name, default, setter) entries owned by a context.

    Primitive defaults match by value, composite defaults by identity. When
    the caller supplies an explicit ``key`` it is matched by equality
    instead of the default, which keeps the setter stable even if a fresh
    default list or dict is built on every render.
    """

    def __init__(self) -> None:
        self._entries: List[Tuple[str, Any, Optional[Hashable], ParamSetter]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, name: str, default: Any, key: Optional[Hashable] = None) -> Optional[ParamSetter]:
        for entry_name, entry_default, entry_key, setter in self._entries:
            if entry_name != name:
                continue
            if key is not None or entry_key is not None:
                if entry_key == key:
                    return setter
                continue
            if _default_matches(entry_default, default):
                return setter
        return None

    def get_or_create(
        self,
        name: str,
        default: Any,
        handle: "SearchParams",
        codec: ParamKind,
        key: Optional[Hashable] = None,
    ) -> ParamSetter:
        """
        Return the setter for (name, default), bound to ``handle``.

        Args:
            name: Parameter name
            default: Default value of the parameter
            handle: Handle whose scheduler the setter must commit through
            codec: Codec used to encode values on creation
            key: Optional explicit identity replacing ``default`` in the lookup

        Returns:
            The existing setter re-pointed at ``handle``, or a new one
        """
        setter = self.find(name, default, key)
        if setter is None:
            setter = ParamSetter(name, default, codec, handle)
            self._entries.append((name, default, key, setter))
            logger.debug(f"Registered setter for '{name}' (default={default!r})")
        else:
            setter.bind(handle)
        return setter

    def clear(self) -> None:
        self._entries = []
