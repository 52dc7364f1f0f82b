# src/reaper/tasks/task_models.py

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

# Process-scoped id source. Ids are never reused within one run.
_task_ids = itertools.count(1)


def _next_task_id() -> str:
    return f"task-{next(_task_ids)}"


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Action.ready() -> READY (queued Task) -> EXECUTING -> COMPLETED | FAILED.
    No transition goes backwards.
    """

    READY = "ready"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    priority: int | None  # lower runs sooner; None runs last
    cmd: str
    args: tuple[str, ...] = ()


class Action:
    """
    Builder for Task.

    Action("set_log_level").priority(100).with_arg("a").ready()

    Setters return the builder for chaining. priority() overwrites, with_arg()/with_args()
    append. ready() hands the fields over to an immutable Task; the builder cannot be
    used afterwards. The command name is not validated here, unknown commands fail
    at dispatch time.
    """

    def __init__(self, cmd: str) -> None:
        self._id = _next_task_id()
        self._priority: int | None = None
        self._cmd = str(cmd)
        self._args: list[str] = []
        self._consumed = False

    def _check_open(self) -> None:
        if self._consumed:
            raise RuntimeError(f"Action {self._id} ({self._cmd}) was already made ready")

    @property
    def id(self) -> str:
        return self._id

    def priority(self, p: int) -> Action:
        self._check_open()
        if isinstance(p, bool) or not isinstance(p, int):
            raise TypeError(f"priority must be an int, got {type(p).__name__}")
        self._priority = p
        return self

    def with_arg(self, a: str) -> Action:
        self._check_open()
        self._args.append(str(a))
        return self

    def with_args(self, args: Iterable[str]) -> Action:
        self._check_open()
        self._args.extend(str(a) for a in args)
        return self

    def ready(self) -> Task:
        self._check_open()
        self._consumed = True
        task = Task(id=self._id, priority=self._priority, cmd=self._cmd, args=tuple(self._args))
        self._args = []
        return task


@dataclass(slots=True)
class TaskOutcome:
    task: Task
    status: TaskStatus = TaskStatus.READY
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def reason(self) -> str | None:
        return None if self.error is None else str(self.error)
