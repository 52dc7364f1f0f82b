# tests/test_task_dispatcher.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from reaper.cli.args import CliInputs
from reaper.config import Settings
from reaper.core.errors import DuplicateNameError, NotFoundError, ReaperError, UnknownCommandError
from reaper.core.state import CMD_LOAD_CONFIG, State
from reaper.logging_setup import TRACE, setup_logging
from reaper.remotes import config_store
from reaper.remotes.models import Config, Repository
from reaper.tasks.task_dispatcher import dispatch_task, run_queue
from reaper.tasks.task_handlers import CMD_ADD_REMOTE, TaskHandlerRegistry, default_registry
from reaper.tasks.task_models import Action, TaskStatus

from .fakes import RecordingHandler


def test_registry_routes_by_name_and_alias(state: State) -> None:
    reg = TaskHandlerRegistry()
    handler = RecordingHandler()
    reg.register("sync", handler, aliases=["s"])

    reg.dispatch(state, Action("sync").with_arg("1").ready())
    reg.dispatch(state, Action("s").ready())

    assert handler.calls == [("sync", ("1",)), ("s", ())]
    assert "sync" in reg
    assert "s" in reg


def test_registry_unknown_command_raises(state: State) -> None:
    with pytest.raises(UnknownCommandError) as exc:
        TaskHandlerRegistry().dispatch(state, Action("nope").ready())
    assert exc.value.cmd == "nope"


def test_dispatch_task_records_completed(state: State) -> None:
    reg = TaskHandlerRegistry()
    reg.register("ok", RecordingHandler())

    outcome = dispatch_task(state, Action("ok").ready(), reg)

    assert outcome.status == TaskStatus.COMPLETED
    assert outcome.ok
    assert outcome.error is None


def test_run_queue_unknown_command_does_not_block_others(state: State) -> None:
    reg = TaskHandlerRegistry()
    handler = RecordingHandler()
    reg.register("known", handler)

    state.queue_task(Action("known").priority(1).with_arg("first").ready())
    state.queue_task(Action("mystery").priority(2).ready())
    state.queue_task(Action("known").priority(3).with_arg("last").ready())

    outcomes = run_queue(state, reg)

    assert [o.status for o in outcomes] == [TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.COMPLETED]
    assert isinstance(outcomes[1].error, UnknownCommandError)
    assert handler.calls == [("known", ("first",)), ("known", ("last",))]
    assert state.queue == []


def test_run_queue_isolates_handler_exceptions(state: State) -> None:
    reg = TaskHandlerRegistry()
    reg.register("boom", RecordingHandler(error=RuntimeError("kaboom")))
    after = RecordingHandler()
    reg.register("after", after)

    state.queue_task(Action("after").ready())
    state.queue_task(Action("boom").priority(0).ready())

    outcomes = run_queue(state, reg)

    assert [o.task.cmd for o in outcomes] == ["boom", "after"]
    assert outcomes[0].status == TaskStatus.FAILED
    assert outcomes[0].reason == "kaboom"
    assert after.calls == [("after", ())]


def test_run_queue_runs_tasks_queued_by_handlers(state: State) -> None:
    reg = TaskHandlerRegistry()
    followup = RecordingHandler()

    def spawn(st: State, task) -> None:
        st.queue_task(Action("followup").priority(1).ready())

    reg.register("spawn", spawn)
    reg.register("followup", followup)
    state.queue_task(Action("spawn").priority(50).ready())

    outcomes = run_queue(state, reg)

    assert [o.task.cmd for o in outcomes] == ["spawn", "followup"]
    assert followup.calls == [("followup", ())]


def test_run_queue_stops_after_fatal_failure(state: State) -> None:
    reg = TaskHandlerRegistry()
    later = RecordingHandler()
    reg.register("load", RecordingHandler(error=ReaperError("bad config")))
    reg.register("later", later)

    state.queue_task(Action("load").priority(1).ready())
    state.queue_task(Action("later").priority(2).ready())

    outcomes = run_queue(state, reg, fatal_commands={"load"})

    assert len(outcomes) == 1
    assert outcomes[0].status == TaskStatus.FAILED
    assert later.calls == []
    assert state.queue == []


def test_set_log_level_applies_verbosity(settings: Settings) -> None:
    setup_logging(console_level=logging.INFO)
    state = State.initialize(CliInputs(verbosity=2), settings=settings)
    state.queue.clear()
    state.queue_task(Action("set_log_level").ready())

    outcomes = run_queue(state, default_registry())

    assert outcomes[0].ok
    console = [h for h in logging.getLogger().handlers if h.get_name() == "reaper.console"]
    assert console[0].level == TRACE


def test_load_config_handler_reads_file(settings: Settings, config_path: Path) -> None:
    config_store.save(config_path, Config(repositories=[Repository(name="a")]))
    state = State.initialize(CliInputs(config=str(config_path)), settings=settings)

    outcomes = run_queue(state, default_registry())

    assert all(o.ok for o in outcomes)
    assert state.config_path == config_path
    assert state.config is not None
    assert state.config.names() == ["a"]


def test_load_config_handler_missing_file_fails(settings: Settings, tmp_path: Path) -> None:
    state = State.initialize(CliInputs(config=str(tmp_path / "missing.toml")), settings=settings)

    outcomes = run_queue(state, default_registry())

    failed = [o for o in outcomes if not o.ok]
    assert [o.task.cmd for o in failed] == [CMD_LOAD_CONFIG]
    assert isinstance(failed[0].error, NotFoundError)
    assert state.config is None


def test_load_config_handler_falls_back_to_settings_path(settings: Settings, config_path: Path) -> None:
    state = State.initialize(CliInputs(init=True), settings=settings)

    run_queue(state, default_registry())

    assert config_path.is_file()
    assert state.config == Config()


def test_add_remote_handler_saves_and_rejects_duplicates(settings: Settings, config_path: Path) -> None:
    state = State.initialize(CliInputs(config=str(config_path), init=True), settings=settings)
    state.queue_task(Action(CMD_ADD_REMOTE).priority(300).with_args(["name=a", "url=https://a"]).ready())
    state.queue_task(Action(CMD_ADD_REMOTE).priority(300).with_args(["name=a"]).ready())
    state.queue_task(Action(CMD_ADD_REMOTE).priority(300).with_args(["name=b"]).ready())

    outcomes = run_queue(state, default_registry())

    add_outcomes = [o for o in outcomes if o.task.cmd == CMD_ADD_REMOTE]
    assert [o.ok for o in add_outcomes] == [True, False, True]
    assert isinstance(add_outcomes[1].error, DuplicateNameError)
    assert config_store.load(config_path) == Config(
        repositories=[Repository(name="a", url="https://a"), Repository(name="b")]
    )


def test_add_remote_without_loaded_config_fails(state: State) -> None:
    state.queue_task(Action(CMD_ADD_REMOTE).with_arg("name=a").ready())

    outcomes = run_queue(state, default_registry())

    assert outcomes[0].status == TaskStatus.FAILED
    assert isinstance(outcomes[0].error, ReaperError)


def test_add_remote_warns_about_keys_the_rewrite_drops(
    settings: Settings, config_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_path.write_text('[settings]\ncolour = true\n\n[[remote]]\nname = "a"\nstars = 10\n', encoding="utf-8")
    state = State.initialize(CliInputs(config=str(config_path)), settings=settings)
    state.queue_task(Action(CMD_ADD_REMOTE).priority(300).with_arg("name=b").ready())

    with caplog.at_level(logging.WARNING, logger="reaper.tasks.task_handlers"):
        outcomes = run_queue(state, default_registry())

    assert all(o.ok for o in outcomes)
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "settings" in warnings[0]
    assert "remote.a.stars" in warnings[0]
    assert config_store.load(config_path).names() == ["a", "b"]


def test_add_remote_on_a_clean_file_does_not_warn(
    settings: Settings, config_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    config_store.save(config_path, Config(repositories=[Repository(name="a")]))
    state = State.initialize(CliInputs(config=str(config_path)), settings=settings)
    state.queue_task(Action(CMD_ADD_REMOTE).priority(300).with_arg("name=b").ready())

    with caplog.at_level(logging.WARNING, logger="reaper.tasks.task_handlers"):
        run_queue(state, default_registry())

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
