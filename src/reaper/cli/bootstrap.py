# src/reaper/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- takes the resolved CLI inputs and settings,
- builds the State (which queues the built-in log level / config tasks),
- stages the task for the requested subcommand, if any.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..core.state import State
from ..remotes.models import Repository
from ..remotes.remote_api import repository_to_args
from ..tasks.task_handlers import CMD_ADD_REMOTE, PRIORITY_ADD_REMOTE
from ..tasks.task_models import Action
from .args import CliInputs

logger = logging.getLogger(__name__)


def create_initial_state(inputs: CliInputs, *, settings: Settings | None = None) -> State:
    """
    Create State from resolved inputs.

    Settings stay injectable so tests never depend on the real environment.
    """
    if settings is None:
        settings = get_settings()

    state = State.initialize(inputs, settings=settings)

    if inputs.command == CMD_ADD_REMOTE:
        args = repository_to_args(Repository(**inputs.remote))
        state.queue_task(Action(CMD_ADD_REMOTE).priority(PRIORITY_ADD_REMOTE).with_args(args).ready())
    elif inputs.command is not None:
        logger.warning("Ignoring unsupported command %s", inputs.command)

    return state
