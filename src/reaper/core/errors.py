# src/reaper/core/errors.py

from __future__ import annotations

from pathlib import Path


class ReaperError(Exception):
    """Base class for every error reaper raises on purpose."""


class NotFoundError(ReaperError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Config file not found: {self.path}")


class ConfigIOError(ReaperError):
    """Filesystem failure other than a missing path (permissions, devices, disk full)."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot access {self.path}: {reason}")


class ParseError(ReaperError):
    """Malformed TOML, or a document that does not match the config schema."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = message
        where = f"{self.path}: " if self.path is not None else ""
        super().__init__(f"{where}{message}")


class SerializeError(ReaperError):
    pass


class DuplicateNameError(ReaperError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Duplicate repository name: {name!r}")


class UnknownCommandError(ReaperError):
    def __init__(self, cmd: str) -> None:
        self.cmd = cmd
        super().__init__(f"Unknown task command: {cmd!r}")
