"""Generator settings read from the environment.

  DISCOGEN_OUTPUT_DIR    directory generated modules are written to
  DISCOGEN_TEMPLATE_DIR  alternative jinja2 template directory
  DISCOGEN_LOG_LEVEL     default log level of the command line
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_OUTPUT_DIR = Path("generated")
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


@dataclass(frozen=True)
class Settings:
    output_dir: Path = DEFAULT_OUTPUT_DIR
    template_dir: Path = DEFAULT_TEMPLATE_DIR
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Read settings from the environment on every call."""
    return Settings(
        output_dir=Path(os.getenv("DISCOGEN_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
        template_dir=Path(os.getenv("DISCOGEN_TEMPLATE_DIR") or DEFAULT_TEMPLATE_DIR),
        log_level=(os.getenv("DISCOGEN_LOG_LEVEL") or "INFO").upper(),
    )
