# tests/test_main.py

from __future__ import annotations

import json
import logging
import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_vault.cli import bootstrap
from todo_vault.cli import main as cli_main
from todo_vault.cli.bootstrap import create_initial_state, save_store_snapshot

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


@pytest.fixture()
def quiet_main(monkeypatch: pytest.MonkeyPatch, settings: SimpleNamespace) -> SimpleNamespace:
    """Point main() at the tmp settings and keep it from rewiring the root logger."""
    monkeypatch.setattr(cli_main, "get_settings", lambda: settings)
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_kw: None)
    # main() installs a SIGTERM handler; keep it out of the test process.
    monkeypatch.setattr(cli_main.signal, "signal", lambda *_a: None)
    return settings


def test_main_refuses_to_start_on_corrupt_snapshot(
    quiet_main: SimpleNamespace, caplog: pytest.LogCaptureFixture
) -> None:
    quiet_main.snapshot_path.parent.mkdir(parents=True)
    quiet_main.snapshot_path.write_text('{"version": 1, "entries": []}', "utf-8")

    with caplog.at_level(logging.CRITICAL, logger="todo_vault.cli.main"):
        with pytest.raises(SystemExit) as exc:
            cli_main.main()

    assert exc.value.code == 2
    assert any(
        r.levelno == logging.CRITICAL and "Refusing to start" in r.getMessage()
        for r in caplog.records
    )
    # the corrupt file is left alone for inspection
    assert quiet_main.snapshot_path.read_text("utf-8") == '{"version": 1, "entries": []}'


def test_main_saves_snapshot_after_console_exits(
    quiet_main: SimpleNamespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    quiet_main.console_enabled = True

    def fake_console(state) -> None:
        state.task_store.add_task("alice", title="t", description="d")

    monkeypatch.setattr(cli_main, "run_console_loop", fake_console)
    cli_main.main()

    data = json.loads(quiet_main.snapshot_path.read_text("utf-8"))
    assert data["next_id"] == 2
    assert [e["record"]["title"] for e in data["entries"]] == ["t"]


def test_failed_shutdown_save_is_logged_and_raised(
    settings: SimpleNamespace, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    state = create_initial_state(settings=settings)

    def broken_save(path, snapshot) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(bootstrap, "save_snapshot", broken_save)

    with caplog.at_level(logging.ERROR, logger="todo_vault.cli.bootstrap"):
        with pytest.raises(OSError, match="disk full"):
            save_store_snapshot(state)

    assert any("Failed to save task snapshot" in r.getMessage() for r in caplog.records)


def test_main_propagates_failed_shutdown_save(
    quiet_main: SimpleNamespace, monkeypatch: pytest.MonkeyPatch
) -> None:
    quiet_main.console_enabled = True
    monkeypatch.setattr(cli_main, "run_console_loop", lambda state: None)

    def broken_save(path, snapshot) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(bootstrap, "save_snapshot", broken_save)

    with pytest.raises(OSError, match="disk full"):
        cli_main.main()


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX SIGTERM delivery")
def test_sigterm_during_console_saves_snapshot(tmp_path: Path) -> None:
    data_dir = tmp_path / "data"
    env = {
        **os.environ,
        "PYTHONPATH": os.pathsep.join(filter(None, [str(SRC_DIR), os.environ.get("PYTHONPATH")])),
        "PYTHONUNBUFFERED": "1",
        "TODO_VAULT_DATA_DIR": str(data_dir),
        "TODO_VAULT_SNAPSHOT_PATH": str(data_dir / "tasks.json"),
        "TODO_VAULT_OWNER": "alice",
        "TODO_VAULT_CONSOLE_ENABLED": "true",
    }
    proc = subprocess.Popen(
        [sys.executable, "-m", "todo_vault.cli.main"],
        cwd=tmp_path,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        text=True,
    )
    try:
        assert proc.stdin is not None
        proc.stdin.write("/add t | d\n")
        proc.stdin.flush()

        # The file handler logs every created task; wait for ours.
        log_file = data_dir / "todo_vault.log"
        deadline = time.monotonic() + 15
        while time.monotonic() < deadline:
            if log_file.exists() and "Task created id=1" in log_file.read_text("utf-8"):
                break
            time.sleep(0.05)
        else:
            pytest.fail("console never created the task")

        # stdin stays open: only the signal may end the loop
        proc.send_signal(signal.SIGTERM)
        proc.wait(timeout=10)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    assert proc.returncode == 0
    data = json.loads((data_dir / "tasks.json").read_text("utf-8"))
    assert data["next_id"] == 2
    assert data["entries"][0]["record"]["owner"] == "alice"
