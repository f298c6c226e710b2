"""Extract parameter types from discovery schemas.

Handles:
- Path and query parameters (``location`` or legacy ``parameterType``)
- parameterOrder, then remaining required, then optional parameters
- Repeated parameters (typed as lists)
- $ref resolution against the document's ``schemas``
- Enum value extraction into descriptions
- Request body and response schema names
"""

from __future__ import annotations

import re
from typing import Any

from .loader import resolve_ref
from .naming import to_argument_name

_SCALAR_TYPES: dict[str, str] = {
    "string": "str",
    "integer": "int",
    "number": "float",
    "boolean": "bool",
    "any": "Any",
}


def _strip_html(text: str) -> str:
    """Strip HTML tags and collapse whitespace."""
    text = re.sub(r"<[^>]+>", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return text


def resolve_schema_type(
    body: dict[str, Any],
    schema: dict[str, Any],
    _seen: frozenset[str] = frozenset(),
) -> str:
    """Resolve a discovery schema to a Python type string."""
    if not schema:
        return "Any"

    if "$ref" in schema:
        ref = schema["$ref"]
        if ref in _seen:
            return "dict"
        resolved = resolve_ref(body, ref)
        return resolve_schema_type(body, resolved, _seen | {ref})

    schema_type = schema.get("type")
    if schema_type in _SCALAR_TYPES:
        return _SCALAR_TYPES[schema_type]
    if schema_type == "array":
        item_type = resolve_schema_type(body, schema.get("items", {}), _seen)
        return f"list[{item_type}]"
    if schema_type == "object" or "properties" in schema:
        return "dict"

    return "Any"


def _parameter_type(body: dict[str, Any], param: dict[str, Any]) -> str:
    param_type = resolve_schema_type(body, param)
    if param.get("repeated"):
        return f"list[{param_type}]"
    return param_type


def _describe(param: dict[str, Any]) -> str:
    description = _strip_html(param.get("description", ""))
    enum_values = param.get("enum")
    if enum_values:
        enum_str = ", ".join(str(v) for v in enum_values)
        if description:
            description = f"{description.rstrip('.')} (values: {enum_str})"
        else:
            description = f"Values: {enum_str}"
    return description


def _order(method: dict[str, Any]) -> list[str]:
    declared = method.get("parameters", {})
    order = [p for p in method.get("parameterOrder", []) if p in declared]
    rest = [p for p in declared if p not in order]
    order += [p for p in rest if declared[p].get("required")]
    order += [p for p in rest if not declared[p].get("required")]
    # optional entries of parameterOrder must not precede required ones
    return sorted(order, key=lambda p: not declared[p].get("required"))


def parse_parameters(
    body: dict[str, Any],
    method: dict[str, Any],
) -> list[dict[str, Any]]:
    """Parse the parameters of a method, in signature order."""
    declared = method.get("parameters", {})
    params: list[dict[str, Any]] = []
    for name in _order(method):
        param = declared[name]
        is_required = bool(param.get("required", False))
        params.append({
            "name": name,
            "arg": to_argument_name(name),
            "type": _parameter_type(body, param),
            "required": is_required,
            "default": None,
            "description": _describe(param),
            "enum": param.get("enum"),
            "location": param.get("location") or param.get("parameterType") or "query",
            "pattern": param.get("pattern"),
            "repeated": bool(param.get("repeated", False)),
        })
    return params


def get_request_type(body: dict[str, Any], method: dict[str, Any]) -> str | None:
    """Schema name of the request body, ``"dict"`` if inline, None if absent."""
    request = method.get("request")
    if not request:
        return None
    return request.get("$ref", "dict")


def get_response_type(body: dict[str, Any], method: dict[str, Any]) -> str:
    """Schema name of the response, or ``"none"``."""
    response = method.get("response")
    if not response:
        return "none"
    if "$ref" in response:
        return response["$ref"]
    return resolve_schema_type(body, response)
