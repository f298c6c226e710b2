"""Load a discovery document and walk its resources.

Reads the document JSON and extracts resources, methods and schemas.
Both the REST discovery layout and the older ``data.<name>.<version>``
layout are accepted; see :func:`discoclient.discovery.unwrap_document`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

from discoclient.discovery import unwrap_document
from discoclient.errors import DiscoveryError


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load the discovery document from disk."""
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise DiscoveryError(f"{path}: not valid JSON ({e})") from e


def get_service(spec: dict[str, Any]) -> tuple[str, str, dict[str, Any]]:
    """Return ``(name, version, body)`` of the described service."""
    return unwrap_document(spec)


def get_resources(body: dict[str, Any]) -> dict[str, Any]:
    """Extract top-level resources from the service body."""
    return body.get("resources", {})


def get_schemas(body: dict[str, Any]) -> dict[str, Any]:
    """Extract schemas from the service body."""
    return body.get("schemas", {})


def iter_resources(
    resources: dict[str, Any], prefix: str = "",
) -> Iterator[tuple[str, dict[str, Any]]]:
    """Yield ``(dotted_path, resource)`` depth-first, parents before children."""
    for name, resource in resources.items():
        path = f"{prefix}.{name}" if prefix else name
        yield path, resource
        yield from iter_resources(resource.get("resources", {}), path)


def resolve_ref(body: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a discovery ``$ref`` (a bare schema name) against ``schemas``."""
    try:
        return get_schemas(body)[ref]
    except KeyError:
        raise DiscoveryError(f"unknown schema reference {ref!r}") from None
