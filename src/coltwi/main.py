"""Entry-point for launching the CLI application."""
from __future__ import annotations

import os
import sys

from .core.log_config import configure_logging
from .presentation.cli import config
from .presentation.cli.app import main as cli_main


def main() -> None:
    """Configure logging and run the CLI presentation layer."""
    if config.debug_enabled():
        level = "DEBUG"
    else:
        level = os.getenv("COLTWI_LOG_LEVEL") or str(config.load_config()["log_level"])
    configure_logging(level=level)
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
