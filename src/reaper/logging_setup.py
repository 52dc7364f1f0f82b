# src/reaper/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_CONSOLE_HANDLER_NAME = "reaper.console"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow reaper logs at whatever level the handler is set to
    - suppress Python warnings (captured as 'py.warnings') unless ERROR+
    - any other third-party logger only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "reaper" or name.startswith("reaper."):
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def level_from_name(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def verbosity_to_level(verbosity: int, *, quiet: bool = False, baseline: int = logging.INFO) -> int:
    """
    Map CLI flags to a console level.

        -q   : ERROR only
        (none): baseline (ERROR, WARN, INFO by default)
        -v   : + DEBUG
        -vv  : + TRACE
    """
    if quiet:
        return logging.ERROR
    if verbosity >= 2:
        return TRACE
    if verbosity == 1:
        return logging.DEBUG
    return baseline


def setup_logging(
    *,
    console_level: int = logging.INFO,
    log_file: str | Path | None = None,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Configure logging with:
    - Console handler: stderr, filtered
    - File handler (optional): full logs for debugging

    Call this ONCE, very early (before first logger.info).
    """
    root = logging.getLogger()
    root.setLevel(TRACE)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.set_name(_CONSOLE_HANDLER_NAME)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)


def set_console_level(level: int) -> bool:
    """Retune the console handler installed by setup_logging. Returns False if there is none."""
    for h in logging.getLogger().handlers:
        if h.get_name() == _CONSOLE_HANDLER_NAME:
            h.setLevel(level)
            return True
    return False
