"""Per-location read/write view over the search params."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Hashable, List, Optional, Tuple

from utils.codecs import codec_for
from utils.url_state import Pairs, QueryParams

from .scheduler import PushScheduler

if TYPE_CHECKING:
    from core.context import ParamContext
    from core.history import Location
    from core.registry import ParamSetter

logger = logging.getLogger(__name__)


class SearchParams:
    """
    Read/write handle for the search params of one location.

    Reads reflect mutations pushed through this handle, even before they are
    committed. ``param()`` memoizes its result per name, so every consumer
    asking for the same parameter during one render gets the same
    ``(value, setter)`` tuple.

    Usage:
        search_params = context.search_params()
        page, set_page = search_params.param("page", 1)
        set_page(page + 1)
    """

    def __init__(self, context: "ParamContext", location: "Location"):
        self.context = context
        self.location = location
        self.scheduler = PushScheduler(context, QueryParams(location.search))
        self._params: Dict[str, Tuple[Any, "ParamSetter"]] = {}

    @property
    def params(self) -> QueryParams:
        return self.scheduler.params

    def get(self, name: str) -> Optional[str]:
        """Raw value of ``name``, or None if absent."""
        return self.params.get(name)

    def entries(self) -> List[Tuple[str, str]]:
        """All (name, raw value) pairs, in query-string order."""
        return self.params.entries()

    def push(self, values: Pairs) -> None:
        """Low-level batched write; a None value deletes the parameter."""
        self.scheduler.push(values)

    def param(
        self,
        name: str,
        default: Any = None,
        kind: Any = None,
        key: Optional[Hashable] = None,
    ) -> Tuple[Any, "ParamSetter"]:
        """
        Typed value and setter for a parameter.

        Args:
            name: Parameter name (or prefix, for dict parameters)
            default: Value used when the parameter is absent; also decides
                how the raw value is decoded unless ``kind`` is given
            kind: Explicit parameter kind (``"string"``, ``"number"``,
                ``"boolean"``, ``"array"``, ``"object"`` or a ``ParamKind``)
            key: Optional stable identity for the setter

        Returns:
            ``(value, setter)``, identical for repeated calls with the same name
        """
        if name in self._params:
            return self._params[name]

        codec = codec_for(default, kind)
        value = codec.decode(self.params, name, default)
        setter = self.context.setters.get_or_create(name, default, self, codec, key=key)
        result = (value, setter)
        self._params[name] = result
        return result

    def __repr__(self) -> str:
        return f"SearchParams({self.location.path!r})"
