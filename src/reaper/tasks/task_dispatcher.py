# src/reaper/tasks/task_dispatcher.py

from __future__ import annotations

"""
Task dispatcher.

A single-threaded loop that:
- drains the State queue in priority order,
- looks up each task's command in the handler registry,
- runs it and records the outcome.

One failing task never stops the rest; failures are logged as they happen and
returned to the caller once the queue is empty. Handlers may queue follow-up
tasks; those are picked up by the next drain.
"""

import logging
from collections.abc import Collection

from ..core.errors import ReaperError
from ..core.state import State
from .task_handlers import TaskHandlerRegistry
from .task_models import Task, TaskOutcome, TaskStatus

logger = logging.getLogger(__name__)


def dispatch_task(state: State, task: Task, registry: TaskHandlerRegistry) -> TaskOutcome:
    outcome = TaskOutcome(task=task)
    outcome.status = TaskStatus.EXECUTING
    logger.debug("Task %s -> executing cmd=%s args=%s", task.id, task.cmd, list(task.args))

    try:
        registry.dispatch(state, task)
    except ReaperError as e:
        outcome.status = TaskStatus.FAILED
        outcome.error = e
        logger.error("Task %s failed: %s", task.id, e)
        return outcome
    except Exception as e:
        outcome.status = TaskStatus.FAILED
        outcome.error = e
        logger.exception("Task %s failed cmd=%s", task.id, task.cmd)
        return outcome

    outcome.status = TaskStatus.COMPLETED
    logger.debug("Task %s -> completed", task.id)
    return outcome


def run_queue(
    state: State,
    registry: TaskHandlerRegistry,
    *,
    fatal_commands: Collection[str] = (),
) -> list[TaskOutcome]:
    """
    Dispatch every queued task (including ones queued while running).

    Returns outcomes in run order. If a task whose command is in `fatal_commands`
    fails, whatever is still queued is abandoned and the loop stops.
    """
    outcomes: list[TaskOutcome] = []

    while state.queue:
        batch = state.drain_ready()
        for i, task in enumerate(batch):
            outcome = dispatch_task(state, task, registry)
            outcomes.append(outcome)
            if not outcome.ok and task.cmd in fatal_commands:
                skipped = len(batch) - i - 1 + len(state.queue)
                state.queue.clear()
                if skipped:
                    logger.warning("Abandoning %d queued tasks after %s failed", skipped, task.cmd)
                return outcomes

    failed = [o for o in outcomes if not o.ok]
    if failed:
        logger.warning("%d of %d tasks failed", len(failed), len(outcomes))
    return outcomes
