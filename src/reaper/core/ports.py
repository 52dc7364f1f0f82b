# src/reaper/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task machinery.

Handlers are plain callables; the Protocol only pins down the call shape so the
registry and tests can swap implementations freely.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task
    from .state import State


class TaskHandler(Protocol):
    """Runs one task against the process State. Raise to mark the task failed."""
    def __call__(self, state: State, task: Task) -> None: ...
