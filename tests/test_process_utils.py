import io
import logging
import subprocess
import sys

import pytest

from src.local.supervisor import process_utils
from src.local.supervisor.errors import SpawnError
from src.local.supervisor.lifecycle import ServerProcessStore
from src.local.supervisor.resolver import LaunchPlan


class RecordingPopen:
    calls = []

    def __init__(self, args, **kwargs):
        RecordingPopen.calls.append((args, kwargs))
        self.pid = 31337
        self.stdout = None
        self.stderr = None


@pytest.fixture
def recording_popen(monkeypatch):
    RecordingPopen.calls = []
    monkeypatch.setattr(process_utils.psutil, "Popen", RecordingPopen)
    return RecordingPopen


def test_spawn_uses_plan_and_exports_port(tmp_path, recording_popen):
    plan = LaunchPlan("npx", ("tsx", "server.ts"), tmp_path, "development")

    proc = process_utils.spawn_server(plan, port=3011, output_mode="inherit")

    assert proc.pid == 31337
    (args, kwargs), = recording_popen.calls
    assert args == ["npx", "tsx", "server.ts"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["PORT"] == "3011"
    assert kwargs["stdin"] == subprocess.DEVNULL
    assert "stdout" not in kwargs and "stderr" not in kwargs


def test_spawn_in_log_mode_pipes_output(tmp_path, recording_popen):
    plan = LaunchPlan("node", ("dist/server.js",), tmp_path, "production")

    process_utils.spawn_server(plan, port=3011, output_mode="log")

    (_, kwargs), = recording_popen.calls
    assert kwargs["stdout"] == subprocess.PIPE
    assert kwargs["stderr"] == subprocess.PIPE


def test_output_mode_is_case_insensitive(tmp_path, recording_popen):
    plan = LaunchPlan("node", ("dist/server.js",), tmp_path, "production")

    process_utils.spawn_server(plan, port=3011, output_mode=" LOG ")

    (_, kwargs), = recording_popen.calls
    assert kwargs["stdout"] == subprocess.PIPE


def test_unknown_output_mode_falls_back_to_inherit(tmp_path, recording_popen, caplog):
    plan = LaunchPlan("node", ("dist/server.js",), tmp_path, "production")

    with caplog.at_level(logging.WARNING):
        process_utils.spawn_server(plan, port=3011, output_mode="logg")

    (_, kwargs), = recording_popen.calls
    assert "stdout" not in kwargs
    assert "Unknown server output mode 'logg'" in caplog.text


def test_launch_process_passes_port_and_output_mode(tmp_path, recording_popen):
    plan = LaunchPlan("node", ("dist/server.js",), tmp_path, "production")

    proc = process_utils.launch_process(plan, port=4100, output_mode="log")

    assert proc.pid == 31337
    (_, kwargs), = recording_popen.calls
    assert kwargs["env"]["PORT"] == "4100"
    assert kwargs["stdout"] == subprocess.PIPE


def test_missing_executable_raises_spawn_error(tmp_path):
    plan = LaunchPlan("definitely-not-installed-xyz", ("server.ts",), tmp_path, "development")

    with pytest.raises(SpawnError, match="definitely-not-installed-xyz"):
        process_utils.spawn_server(plan, port=3011, output_mode="inherit")


def test_launch_process_returns_none_on_failure(tmp_path, caplog):
    plan = LaunchPlan("definitely-not-installed-xyz", (), tmp_path, "development")

    with caplog.at_level(logging.WARNING):
        assert process_utils.launch_process(plan) is None
    assert "Failed to start" in caplog.text


def test_pipe_lines_are_logged_under_process_logger(caplog):
    pipe = io.BytesIO(b"> ready on http://0.0.0.0:3011\n\n  \nsecond line\n")

    with caplog.at_level(logging.INFO, logger="proc.server"):
        process_utils._read_pipe(pipe, "server", logging.INFO)

    assert [r.getMessage() for r in caplog.records] == ["> ready on http://0.0.0.0:3011", "second line"]
    assert all(r.name == "proc.server" for r in caplog.records)
    assert pipe.closed


def test_real_child_is_killed_by_store(tmp_path):
    plan = LaunchPlan(sys.executable, ("-c", "import time; time.sleep(30)"), tmp_path, "development")
    proc = process_utils.spawn_server(plan, port=3011, output_mode="inherit")
    store = ServerProcessStore()
    store.store(proc)

    assert store.take_and_terminate() is proc
    assert proc.wait(timeout=10) != 0
