"""reaper: declarative tracking of the git remotes you care about.

Reaper keeps one TOML file listing tracked repositories (name, url, upstream,
branch, path). Every run goes through the same bootstrap: resolve CLI inputs,
build a `State`, queue the built-in tasks (log level first, then config
load/merge) and drain the queue in priority order.

Repository operations (clone, fetch, prune) are not implemented yet; the task
queue is where they will plug in.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
