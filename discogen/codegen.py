"""Render templates and write generated output.

Takes the context from context_builder and produces <name>_<version>.py.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from .config import get_settings

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "service.py.j2"


def _docstring(text: str) -> str:
    """Escape text for use inside a triple-quoted docstring."""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text


def make_environment(template_dir: Path | None = None) -> jinja2.Environment:
    """Create the jinja2 environment used for rendering."""
    if template_dir is None:
        template_dir = get_settings().template_dir
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["docstring"] = _docstring
    env.filters["pyrepr"] = repr
    return env


def render(context: dict[str, Any], template_dir: Path | None = None) -> str:
    """Render the service template to a source string."""
    template = make_environment(template_dir).get_template(TEMPLATE_NAME)
    return template.render(**context)


def generate(
    context: dict[str, Any],
    output_dir: Path | None = None,
    template_dir: Path | None = None,
) -> Path:
    """Render the service template and write it to <output_dir>/<module>.py."""
    if output_dir is None:
        output_dir = get_settings().output_dir
    output = render(context, template_dir)

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{context['module']}.py"
    output_path.write_text(output)
    logger.debug("wrote %d bytes to %s", len(output), output_path)

    print(f"Generated {output_path} ({context['method_count']} methods)")
    return output_path
