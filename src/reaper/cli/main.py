# src/reaper/cli/main.py

"""
CLI entrypoint.

Parses flags, initialises logging, builds State, then drains the task queue.

Exit codes:
- 0: every bootstrap step succeeded (individual non-bootstrap task failures are
  logged but do not change the exit code)
- 1: the config file could not be loaded or initialised
- 2: argument errors (raised by argparse)
"""

from __future__ import annotations

import logging
import sys

from ..config import Settings, get_settings
from ..core.errors import NotFoundError
from ..core.state import CMD_LOAD_CONFIG
from ..logging_setup import level_from_name, setup_logging
from ..tasks.task_dispatcher import run_queue
from ..tasks.task_handlers import TaskHandlerRegistry, registry
from .args import parse_inputs
from .bootstrap import create_initial_state

logger = logging.getLogger(__name__)

# Failing any of these aborts startup.
BOOTSTRAP_FATAL = frozenset({CMD_LOAD_CONFIG})


def main(
    argv: list[str] | None = None,
    *,
    settings: Settings | None = None,
    handlers: TaskHandlerRegistry | None = None,
) -> int:
    inputs = parse_inputs(argv)
    if settings is None:
        settings = get_settings()

    # Baseline until the set_log_level task applies -v/-q.
    setup_logging(console_level=level_from_name(settings.log_level), log_file=settings.log_file)
    logger.debug("Starting %s...", settings.app_name)

    state = create_initial_state(inputs, settings=settings)
    outcomes = run_queue(state, handlers or registry, fatal_commands=BOOTSTRAP_FATAL)

    for outcome in outcomes:
        if not outcome.ok and outcome.task.cmd in BOOTSTRAP_FATAL:
            hint = " (run with --init to create it)" if isinstance(outcome.error, NotFoundError) else ""
            print(f"rpr: {outcome.reason}{hint}", file=sys.stderr)
            return 1

    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
