"""Typed codecs between query-string entries and Python values.

Each parameter kind knows how to decode its value from the current query
parameters and how to encode a new value back into (name, value) entries.
An entry whose value is None is a deletion marker.
"""

import math
from typing import Any, Dict, List, Optional, Tuple

from .url_state import QueryParams, format_number, format_value

Entry = Tuple[str, Optional[str]]

FALSE_VALUES = ("", "0", "off", "false")


def to_number(raw: str) -> float:
    """Numeric cast of a raw string; non-numeric input gives ``nan``."""
    text = raw.strip()
    if not text:
        return 0
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    # float() also accepts "inf", "nan" and digit separators
    if "_" in text or text.lower().lstrip("+-") in ("inf", "infinity", "nan"):
        return math.nan
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return math.nan


def coerce_scalar(raw: str) -> Any:
    """Return ``raw`` as a number if it survives a format round trip."""
    number = to_number(raw)
    if format_number(number) == raw:
        return number
    return raw


class ParamKind:
    """Base codec for a single query-string parameter."""

    kind = "string"

    def decode(self, params: QueryParams, name: str, default: Any) -> Any:
        value = params.get(name)
        return default if value is None else value

    def encode(self, params: QueryParams, name: str, value: Any, default: Any) -> List[Entry]:
        """Entries to write for ``value``; a value equal to ``default`` clears the parameter."""
        if self.is_default(value, default):
            return self.clear(params, name)
        return self.encode_value(params, name, value)

    def encode_value(self, params: QueryParams, name: str, value: Any) -> List[Entry]:
        return [(name, format_value(value))]

    def clear(self, params: QueryParams, name: str) -> List[Entry]:
        return [(name, None)]

    def is_default(self, value: Any, default: Any) -> bool:
        return type(value) is type(default) and value == default

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StringParam(ParamKind):
    kind = "string"


class NumberParam(ParamKind):
    kind = "number"

    def decode(self, params: QueryParams, name: str, default: Any) -> Any:
        value = params.get(name)
        if value is None:
            return default
        return to_number(value)

    def is_default(self, value: Any, default: Any) -> bool:
        if isinstance(value, bool) or isinstance(default, bool):
            return False
        return isinstance(value, (int, float)) and value == default


class BooleanParam(ParamKind):
    kind = "boolean"

    def decode(self, params: QueryParams, name: str, default: Any) -> Any:
        value = params.get(name)
        if value is None:
            return default
        return value not in FALSE_VALUES


class ArrayParam(ParamKind):
    kind = "array"

    def decode(self, params: QueryParams, name: str, default: Any) -> Any:
        value = params.get(name)
        if value is None:
            return default
        return value.split(",") if value else []

    def encode_value(self, params: QueryParams, name: str, value: Any) -> List[Entry]:
        if not isinstance(value, (list, tuple)):
            return [(name, format_value(value))]
        return [(name, ",".join(format_value(item) for item in value))]

    def is_default(self, value: Any, default: Any) -> bool:
        return (
            isinstance(value, (list, tuple))
            and isinstance(default, (list, tuple))
            and list(value) == list(default)
        )


class ObjectParam(ParamKind):
    """Spreads a dict over several parameters sharing ``name`` as a prefix.

    ``filter`` = ``{"a": 1, "b": "x"}`` is stored as ``filtera=1&filterb=x``.
    """

    kind = "object"

    def decode(self, params: QueryParams, name: str, default: Any) -> Any:
        result: Dict[str, Any] = {}
        found = False
        for key, value in params:
            if key.startswith(name):
                found = True
                result[key[len(name):]] = coerce_scalar(value)
        return result if found else default

    def encode_value(self, params: QueryParams, name: str, value: Any) -> List[Entry]:
        if not isinstance(value, dict):
            return [(name, format_value(value))]
        entries: List[Entry] = [(name + str(k), format_value(v)) for k, v in value.items()]
        written = {key for key, _ in entries}
        for key in params.keys():
            if key.startswith(name) and key not in written:
                entries.append((key, None))
                written.add(key)
        return entries

    def clear(self, params: QueryParams, name: str) -> List[Entry]:
        entries: List[Entry] = [(name, None)]
        for key in params.keys():
            if key.startswith(name) and key != name and (key, None) not in entries:
                entries.append((key, None))
        return entries

    def is_default(self, value: Any, default: Any) -> bool:
        return isinstance(value, dict) and value == default


KINDS: Dict[str, ParamKind] = {
    "string": StringParam(),
    "number": NumberParam(),
    "boolean": BooleanParam(),
    "array": ArrayParam(),
    "object": ObjectParam(),
}


def codec_for(default: Any, kind: Any = None) -> ParamKind:
    """
    Select the codec for a parameter.

    Args:
        default: Default value, used as a type witness when ``kind`` is None
        kind: Explicit kind, either a ``ParamKind`` or one of the names in ``KINDS``

    Returns:
        The codec to decode and encode the parameter with
    """
    if isinstance(kind, ParamKind):
        return kind
    if kind is not None:
        try:
            return KINDS[kind]
        except KeyError:
            raise ValueError(f"Unknown parameter kind: {kind!r}") from None
    if isinstance(default, bool):
        return KINDS["boolean"]
    if isinstance(default, (int, float)):
        return KINDS["number"]
    if isinstance(default, (list, tuple)):
        return KINDS["array"]
    if isinstance(default, dict):
        return KINDS["object"]
    return KINDS["string"]


def decode_value(params: QueryParams, name: str, default: Any = None, kind: Any = None) -> Any:
    """Decode parameter ``name`` from ``params``."""
    return codec_for(default, kind).decode(params, name, default)


def encode_value(
    params: QueryParams, name: str, value: Any, default: Any = None, kind: Any = None
) -> List[Entry]:
    """Encode ``value`` into entries to push; None values delete."""
    return codec_for(default, kind).encode(params, name, value, default)
