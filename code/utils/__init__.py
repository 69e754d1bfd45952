"""Query-string parsing, URL merging and typed value codecs."""

from .codecs import (
    ArrayParam,
    BooleanParam,
    NumberParam,
    ObjectParam,
    ParamKind,
    StringParam,
    codec_for,
    decode_value,
    encode_value,
)
from .url_state import QueryParams, URLSyntaxError, format_value, resolve_url

__all__ = [
    "ArrayParam",
    "BooleanParam",
    "NumberParam",
    "ObjectParam",
    "ParamKind",
    "QueryParams",
    "StringParam",
    "URLSyntaxError",
    "codec_for",
    "decode_value",
    "encode_value",
    "format_value",
    "resolve_url",
]
