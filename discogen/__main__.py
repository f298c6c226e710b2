"""Entry point: python -m discogen DOCUMENT [-o DIR]

Reads a discovery document, generates <output>/<name>_<version>.py.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from discoclient.errors import DiscoveryError

from .codegen import generate
from .config import get_settings
from .context_builder import build_context
from .loader import load_spec

logger = logging.getLogger("discogen")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="discogen",
        description="Generate a Python client module from an API discovery document.",
    )
    parser.add_argument("document", type=Path, help="path to the discovery document (JSON)")
    parser.add_argument(
        "-o", "--output-dir", type=Path, default=settings.output_dir,
        help=f"directory to write the module to (default: {settings.output_dir})",
    )
    parser.add_argument(
        "-t", "--template-dir", type=Path, default=settings.template_dir,
        help="directory holding service.py.j2",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    args = parser.parse_args(argv)
    args.log_level = "DEBUG" if args.verbose else settings.log_level
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", level=args.log_level)

    try:
        spec = load_spec(args.document)
        context = build_context(spec)
        generate(context, args.output_dir, args.template_dir)
    except (OSError, DiscoveryError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
