"""URL state utilities: query-string parameters and URL merging.

The query string is kept as an ordered list of (name, value) pairs so that
parameter order survives a parse / serialize cycle, the same way a browser's
search params object behaves. ``resolve_url()`` builds navigable URLs that
carry the current state over to a new page.
"""

import logging
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl, urlencode, urlsplit

logger = logging.getLogger(__name__)

Pairs = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


class URLSyntaxError(ValueError):
    """Raised when a target URL passed to ``resolve_url()`` cannot be parsed."""


def format_number(value: float) -> str:
    """Format a number the way it should appear in a URL.

    Integral values are written without a trailing ``.0`` so that ``43.0``
    and ``43`` both serialize to ``"43"``.
    """
    if value != value:
        return "NaN"
    if value in (float("inf"), float("-inf")):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def format_value(value: Any) -> str:
    """Stringify a single value for use in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def iter_pairs(values: Pairs) -> Iterator[Tuple[str, Any]]:
    """Iterate over (name, value) pairs of a mapping or a pair sequence."""
    if isinstance(values, Mapping):
        return iter(values.items())
    return iter(values)


class QueryParams:
    """Ordered, multi-valued query-string parameters.

    ``set()`` replaces the first occurrence in place and drops the others,
    while ``delete()`` + ``set()`` moves a parameter to the end.
    """

    def __init__(self, search: str = ""):
        if search.startswith("?"):
            search = search[1:]
        self._pairs: List[Tuple[str, str]] = parse_qsl(search, keep_blank_values=True)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "QueryParams":
        params = cls()
        params._pairs = [(name, value) for name, value in pairs]
        return params

    def copy(self) -> "QueryParams":
        return QueryParams.from_pairs(self._pairs)

    def get(self, name: str) -> Optional[str]:
        """Return the first value for ``name``, or None if absent."""
        for key, value in self._pairs:
            if key == name:
                return value
        return None

    def get_all(self, name: str) -> List[str]:
        return [value for key, value in self._pairs if key == name]

    def has(self, name: str) -> bool:
        return any(key == name for key, _ in self._pairs)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def set(self, name: str, value: Any) -> None:
        value = format_value(value)
        result = []
        found = False
        for key, current in self._pairs:
            if key != name:
                result.append((key, current))
            elif not found:
                result.append((key, value))
                found = True
        if not found:
            result.append((name, value))
        self._pairs = result

    def delete(self, name: str) -> None:
        self._pairs = [(key, value) for key, value in self._pairs if key != name]

    def keys(self) -> List[str]:
        return [key for key, _ in self._pairs]

    def entries(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self._pairs == other._pairs

    def to_string(self) -> str:
        """Serialize without the leading ``?``."""
        return urlencode(self._pairs)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"QueryParams({self.to_string()!r})"


def _split_target(to: Any) -> Tuple[str, str]:
    # A bare query string targets the site root
    if isinstance(to, str) and to.startswith("?"):
        to = "/" + to
    if not isinstance(to, str) or not to.startswith("/"):
        raise URLSyntaxError(f"Invalid target URL: {to!r}")
    try:
        parts = urlsplit(to)
    except ValueError as e:
        raise URLSyntaxError(f"Invalid target URL: {to!r} ({e})") from e
    if parts.scheme or parts.netloc:
        raise URLSyntaxError(f"Target URL must be a path, got: {to!r}")
    return parts.path or "/", parts.query


def keep_params(search: str, keep: Iterable[str]) -> QueryParams:
    """Return the parameters of ``search`` whose names are in ``keep``."""
    query = QueryParams(search)
    result = QueryParams()
    for name in keep:
        if query.has(name):
            result.set(name, query.get(name))
    return result


def resolve_url(
    location: Any,
    keep: Iterable[str] = (),
    to: Optional[str] = None,
    params: Optional[Pairs] = None,
) -> str:
    """
    Compute the URL to navigate to while carrying the current state along.

    On the same path every current parameter is kept; on a different path
    only the ones listed in ``keep`` survive. The target's own query string
    wins over carried-over state, and ``params`` wins over both (a value of
    None removes the parameter).

    Args:
        location: Current location (``pathname``, ``search``)
        keep: Parameter names kept across page changes
        to: Target path, optionally with a query string; defaults to the
            current pathname. A bare query string (``"?page=2"``) targets ``/``
        params: Overrides applied last

    Returns:
        The target path followed by the merged query string, if any

    Raises:
        URLSyntaxError: If ``to`` is not a parsable path
    """
    if to is None:
        to = location.pathname
    to_path, to_query = _split_target(to)

    if to_path == location.pathname:
        query = QueryParams(location.search or "")
    else:
        query = keep_params(location.search or "", keep)

    for name, value in QueryParams(to_query):
        query.set(name, value)

    for name, value in iter_pairs(params or {}):
        query.delete(name)
        if value is not None:
            query.set(name, value)

    query_string = query.to_string()
    return f"{to_path}?{query_string}" if query_string else to_path
