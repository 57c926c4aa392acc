# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from todo_vault.cli.bootstrap import create_initial_state, save_store_snapshot
from todo_vault.connectors.console_connector import run_console_loop
from todo_vault.tasks.task_snapshot import SnapshotCorruptError


def test_first_start_is_empty_and_signed_in(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    assert state.owner == "alice"
    assert state.task_store.get_tasks("alice") == []
    assert settings.data_dir.is_dir()


def test_restart_keeps_tasks_and_counter(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    store = state.task_store
    a = store.add_task("alice", title="t1", description="d1")
    b = store.add_task("bob", title="t2", description="d2")
    store.add_comment("bob", b, "c")
    store.toggle_status("alice", a)
    save_store_snapshot(state)

    restarted = create_initial_state(settings=settings)
    rs = restarted.task_store
    assert rs.get_tasks("alice") == store.get_tasks("alice")
    assert rs.get_tasks("bob") == store.get_tasks("bob")
    assert rs.add_task("carol", title="t3", description="d3") == 3


def test_corrupt_snapshot_refuses_to_start(settings: SimpleNamespace) -> None:
    settings.snapshot_path.parent.mkdir(parents=True)
    settings.snapshot_path.write_text('{"entries": []}', "utf-8")
    with pytest.raises(SnapshotCorruptError):
        create_initial_state(settings=settings)


def test_console_loop_runs_commands_until_exit(settings: SimpleNamespace, capsys) -> None:
    state = create_initial_state(settings=settings)
    lines = iter(["/add Plan trip | book hotel", "", "hello", "/list", "/exit", "/add never | run"])

    run_console_loop(state, read_line=lambda _prompt: next(lines))

    out = capsys.readouterr().out
    assert "Added task #1." in out
    assert "Commands start with '/'" in out
    assert "#1 Plan trip - book hotel" in out
    assert state.task_store.get_task_count("alice") == 1


def test_console_loop_stops_on_eof(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)

    def read_line(_prompt: str) -> str:
        raise EOFError

    run_console_loop(state, read_line=read_line)
