"""Parsing and expansion of discovery path templates.

Supports the two placeholder forms found in discovery documents:

  - ``{name}``   simple expansion, the value is fully percent-encoded
  - ``{+name}``  reserved expansion, ``/`` and other reserved characters
                 are kept as-is

Examples:
  PathTemplate("items/{id}").expand({"id": "42"})          -> "items/42"
  PathTemplate("files/{+path}").expand({"path": "a/b c"})  -> "files/a/b%20c"
"""

from __future__ import annotations

import dataclasses
import re
from typing import Mapping
from urllib.parse import quote

_PLACEHOLDER = re.compile(r"\{(\+?)([^{}]+)\}")

# RFC 6570 reserved characters, left unescaped by {+name}
_RESERVED = ":/?#[]@!$&'()*+,;="


@dataclasses.dataclass(frozen=True)
class Segment:
    text: str
    is_variable: bool = False
    reserved: bool = False


class PathTemplate:
    """A path template parsed once into literal and variable segments."""

    def __init__(self, template: str) -> None:
        self.template = template
        self.segments = _parse(template)

    def __repr__(self) -> str:
        return f"PathTemplate({self.template!r})"

    @property
    def variables(self) -> list[str]:
        """Names of the placeholders, in template order."""
        return [s.text for s in self.segments if s.is_variable]

    def expand(self, values: Mapping[str, str]) -> str:
        """Substitute ``values`` into the template.

        Raises ``KeyError`` naming the first placeholder with no value.
        """
        parts = []
        for segment in self.segments:
            if not segment.is_variable:
                parts.append(segment.text)
                continue
            value = values[segment.text]
            safe = _RESERVED if segment.reserved else ""
            parts.append(quote(value, safe=safe))
        return "".join(parts)

    def missing(self, values: Mapping[str, str]) -> list[str]:
        """Placeholders that ``values`` does not resolve."""
        return [name for name in self.variables if name not in values]


def _parse(template: str) -> tuple[Segment, ...]:
    segments: list[Segment] = []
    pos = 0
    for match in _PLACEHOLDER.finditer(template):
        if match.start() > pos:
            segments.append(Segment(template[pos:match.start()]))
        segments.append(Segment(match.group(2), is_variable=True, reserved=bool(match.group(1))))
        pos = match.end()
    if pos < len(template):
        segments.append(Segment(template[pos:]))
    return tuple(segments)
