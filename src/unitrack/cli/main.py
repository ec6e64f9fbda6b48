# src/unitrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (loading persisted tasks), then runs the
console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # Console shows WARNING+ unless the configured level is stricter; the file gets everything.
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = max(getattr(logging, level_name, logging.INFO), logging.WARNING)

    log_dir = getattr(settings, "data_dir", ".local/unitrack")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "unitrack"))

    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        # Every mutation is written through; nothing to flush here.
        logger.info("Bye.")


if __name__ == "__main__":
    main()
