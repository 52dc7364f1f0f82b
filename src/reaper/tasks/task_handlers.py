# src/reaper/tasks/task_handlers.py

from __future__ import annotations

import logging

from ..config import get_settings, resolve_config_path
from ..core.errors import ReaperError, UnknownCommandError
from ..core.ports import TaskHandler
from ..core.state import CMD_LOAD_CONFIG, CMD_SET_LOG_LEVEL, State
from ..logging_setup import level_from_name, set_console_level, verbosity_to_level
from ..remotes import config_store
from ..remotes.remote_api import add_repository, repository_from_args
from .task_models import Task

logger = logging.getLogger(__name__)

CMD_ADD_REMOTE = "add_remote"
PRIORITY_ADD_REMOTE = 300


class TaskHandlerRegistry:
    """Fixed, extensible table of task command name -> handler."""

    def __init__(self) -> None:
        self._handlers: dict[str, TaskHandler] = {}

    def register(
        self,
        name: str,
        handler: TaskHandler,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        self._handlers[name] = handler
        for alias in aliases:
            self._handlers[alias] = handler

    def get(self, cmd: str) -> TaskHandler | None:
        return self._handlers.get(cmd)

    def __contains__(self, cmd: object) -> bool:
        return cmd in self._handlers

    def dispatch(self, state: State, task: Task) -> None:
        handler = self._handlers.get(task.cmd)
        if handler is None:
            raise UnknownCommandError(task.cmd)
        handler(state, task)


def _settings(state: State):
    return state.settings if state.settings is not None else get_settings()


def handle_set_log_level(state: State, task: Task) -> None:
    inputs = state.inputs
    baseline = level_from_name(getattr(_settings(state), "log_level", "INFO"))
    level = verbosity_to_level(
        int(getattr(inputs, "verbosity", 0) or 0),
        quiet=bool(getattr(inputs, "quiet", False)),
        baseline=baseline,
    )
    if not set_console_level(level):
        logger.debug("No console handler installed; level %s not applied", level)
    logger.debug("Console log level set to %s", logging.getLevelName(level))


def handle_load_config(state: State, task: Task) -> None:
    """Load the config file into State, initialising it first when --init was given."""
    inputs = state.inputs
    path = resolve_config_path(getattr(inputs, "config", None), _settings(state))

    if getattr(inputs, "init", False):
        config = config_store.init(path)
    else:
        config = config_store.load(path)

    state.config_path = path
    state.config = config
    logger.info("Using config %s (%d repositories)", path, len(config.repositories))


def handle_add_remote(state: State, task: Task) -> None:
    if state.config is None or state.config_path is None:
        raise ReaperError("Configuration is not loaded; cannot add a remote")

    repo = repository_from_args(task.args)
    updated = add_repository(state.config, repo)

    dropped = config_store.read_unsupported_keys(state.config_path)
    if dropped:
        logger.warning(
            "Rewriting %s drops keys reaper does not manage: %s",
            state.config_path,
            ", ".join(dropped),
        )
    config_store.save(state.config_path, updated)
    state.config = updated


def default_registry() -> TaskHandlerRegistry:
    reg = TaskHandlerRegistry()
    reg.register(CMD_SET_LOG_LEVEL, handle_set_log_level)
    reg.register(CMD_LOAD_CONFIG, handle_load_config)
    reg.register(CMD_ADD_REMOTE, handle_add_remote)
    return reg


registry = default_registry()
