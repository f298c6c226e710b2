"""Query string helpers shared by the request builder and generated code."""

from __future__ import annotations

from typing import Any, Mapping

import httpx


def query_string_to_dict(query: str) -> dict[str, str]:
    """Parse ``a=1&b=two`` into ``{"a": "1", "b": "two"}``.

    A leading ``?`` is ignored. When a key repeats, the last value wins.
    """
    query = query.lstrip("?")
    if not query:
        return {}
    return dict(httpx.QueryParams(query).multi_items())


def dict_to_query_string(parameters: Mapping[str, str]) -> str:
    """Inverse of :func:`query_string_to_dict`, percent-encoding values."""
    return str(httpx.QueryParams(list(parameters.items())))


def stringify(value: Any) -> str:
    """Render a Python value the way the API expects it on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)
