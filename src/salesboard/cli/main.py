# src/salesboard/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the one-time task load, then starts
the console REPL.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, load_initial_tasks
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import parse_level, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(log_dir=settings.data_dir, console_level=parse_level(settings.log_level))

    logger.info("Starting %s (log file: %s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings)
    asyncio.run(load_initial_tasks(state))

    if state.store.error:
        logger.warning("Initial load reported: %s", state.store.error)

    try:
        if settings.console_enabled:
            run_console_loop(state)
        else:
            m = state.store.metrics
            logger.info(
                "Loaded %d tasks: revenue=%.2f avg_roi=%.2f grade=%s",
                len(state.store.tasks),
                m.total_revenue,
                m.average_roi,
                m.performance_grade,
            )
    finally:
        state.store.close()
        logger.info("Bye.")


if __name__ == "__main__":
    main()
