# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from reaper.cli.args import CliInputs
from reaper.config import Settings
from reaper.core.state import State


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "reaper.toml"


@pytest.fixture()
def settings(config_path: Path) -> Settings:
    """
    Settings pointed at tmp paths.

    Built directly instead of via get_settings() so tests never read the real
    environment or a stray .env file.
    """
    return Settings(
        app_name="reaper-test",
        log_level="INFO",
        log_file=None,
        config_path=config_path,
    )


@pytest.fixture()
def state(settings: Settings, config_path: Path) -> State:
    """State with an empty queue (bootstrap tasks removed)."""
    st = State.initialize(CliInputs(config=str(config_path)), settings=settings)
    st.queue.clear()
    return st


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # main() reconfigures the root logger; put pytest's handlers back afterwards.
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
