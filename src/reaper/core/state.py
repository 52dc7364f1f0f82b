# src/reaper/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..logging_setup import TRACE
from ..remotes.models import Config
from ..tasks.task_models import Action, Task

logger = logging.getLogger(__name__)

CMD_SET_LOG_LEVEL = "set_log_level"
CMD_LOAD_CONFIG = "set_state_from_rpr_conf"

PRIORITY_SET_LOG_LEVEL = 100
PRIORITY_LOAD_CONFIG = 200


def _utc_now_rfc3339() -> str:
    return datetime.now(UTC).isoformat()


@dataclass
class State:
    """
    In-memory context for one process run.

    Built once by State.initialize() in the bootstrap, passed explicitly to every
    task handler, dropped when main() returns. Never persisted.
    """

    process_start: str
    # Resolved CLI inputs; opaque to the queue.
    inputs: Any
    settings: Any = None
    queue: list[Task] = field(default_factory=list)

    # Filled by the config-load task.
    config_path: Path | None = None
    config: Config | None = None

    @classmethod
    def initialize(cls, inputs: Any, *, settings: Any = None) -> State:
        state = cls(process_start=_utc_now_rfc3339(), inputs=inputs, settings=settings)

        # Stage bootstrap tasks: log level first, then the config file.
        log_level = Action(CMD_SET_LOG_LEVEL).priority(PRIORITY_SET_LOG_LEVEL).ready()
        rpr_conf = Action(CMD_LOAD_CONFIG).priority(PRIORITY_LOAD_CONFIG).ready()
        state.queue_task(log_level).queue_task(rpr_conf)

        logger.debug("State initialised process_start=%s queued=%d", state.process_start, len(state.queue))
        return state

    def queue_task(self, task: Task) -> State:
        """Append a task for processing. Never fails."""
        self.queue.append(task)
        logger.log(TRACE, "Queued %s cmd=%s priority=%s", task.id, task.cmd, task.priority)
        return self

    def drain_ready(self) -> list[Task]:
        """
        Pop every queued task, ordered by ascending priority.

        Ties keep insertion order; tasks without a priority come last, also in
        insertion order. The queue is empty afterwards.
        """
        drained = sorted(
            self.queue,
            key=lambda t: (t.priority is None, t.priority if t.priority is not None else 0),
        )
        self.queue.clear()
        return drained
