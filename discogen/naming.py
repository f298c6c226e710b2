"""Convert discovery names into Python identifiers.

  - method / parameter names -> snake_case, keywords get a trailing _
  - resource names           -> {Pascal}Resource class names
  - service names            -> {Pascal}Service class names

Examples:
  maxResults        -> max_results
  import            -> import_
  activities        -> ActivitiesResource
  buzz              -> BuzzService
  url-shortener     -> UrlShortenerService
"""

from __future__ import annotations

import keyword
import re

# Names the generated method bodies already use
_RESERVED_LOCALS = {"self", "body", "kwargs", "parameters"}


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def _sanitize(name: str) -> str:
    """Sanitize a discovery name for use in a Python identifier."""
    name = _camel_to_snake(name)
    name = re.sub(r"[.\-@\s/]", "_", name)
    name = re.sub(r"[^a-z0-9_]", "", name)
    name = re.sub(r"_+", "_", name)
    name = name.strip("_")
    if not name:
        return "_"
    if name[0].isdigit():
        name = "_" + name
    return name


def to_identifier(name: str) -> str:
    """Build a snake_case identifier that is never a Python keyword."""
    ident = _sanitize(name)
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def to_argument_name(name: str) -> str:
    """Like :func:`to_identifier`, also avoiding names used in method bodies."""
    ident = to_identifier(name)
    if ident in _RESERVED_LOCALS:
        ident += "_"
    return ident


def to_class_name(name: str, suffix: str = "") -> str:
    """Build a PascalCase class name."""
    words = _sanitize(name).split("_")
    base = "".join(w[:1].upper() + w[1:] for w in words if w)
    if not base or base[0].isdigit():
        base = "_" + base
    return base + suffix


def resource_class_name(path: str) -> str:
    """Class name for a dotted resource path, e.g. ``activities.comments``."""
    return to_class_name("_".join(path.split(".")), "Resource")


def service_class_name(name: str) -> str:
    return to_class_name(name, "Service")


def module_name(name: str, version: str) -> str:
    """Module file stem, e.g. ``buzz_v1``."""
    return to_identifier(f"{name}_{version}".replace(".", "_"))


class NameAllocator:
    """Hands out unique identifiers, suffixing repeats with _2, _3, ..."""

    def __init__(self, taken: set[str] | None = None) -> None:
        self._seen: dict[str, int] = {}
        for name in taken or ():
            self._seen[name] = 1

    def allocate(self, name: str) -> str:
        if name not in self._seen:
            self._seen[name] = 1
            return name
        while True:
            self._seen[name] += 1
            candidate = f"{name}_{self._seen[name]}"
            if candidate not in self._seen:
                self._seen[candidate] = 1
                return candidate
