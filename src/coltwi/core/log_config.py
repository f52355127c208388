"""Process-wide logging setup for the CLI."""
from __future__ import annotations

import logging
import os

_DEFAULT_LEVEL = "WARNING"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(*, level: str | None = None) -> None:
    """Configure root logging once; later calls only adjust the level."""

    if level is None:
        level = os.getenv("COLTWI_LOG_LEVEL", _DEFAULT_LEVEL)
    level = level.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = _DEFAULT_LEVEL

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=_FORMAT)
    root_logger.setLevel(level)
