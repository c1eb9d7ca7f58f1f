"""URL and query-string encoding for API paths."""
from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import quote

# Characters left alone by JavaScript's encodeURIComponent.
_UNRESERVED = "-_.!~*'()"


def encode_component(value: Any) -> str:
    return quote(str(value), safe=_UNRESERVED)


def encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def encode_params(params: Mapping[str, Any] | None, prefix: str = "") -> str:
    """Append ``params`` to the query string ``prefix``.

    Lists, tuples and dicts are sent as JSON; ``None`` values are skipped.
    """

    query = prefix
    for key, value in (params or {}).items():
        if key is None or value is None:
            continue
        if query:
            query += "&"
        query += f"{key}={encode_component(encode_value(value))}"
    return query


def index_path(index_name: str, *parts: Any) -> str:
    path = "/1/indexes/" + encode_component(index_name)
    for part in parts:
        path += "/" + encode_component(part)
    return path


__all__ = ["encode_component", "encode_value", "encode_params", "index_path"]
