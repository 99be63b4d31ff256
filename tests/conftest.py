import logging
from types import SimpleNamespace

import psutil
import pytest


class FakeProcess:
    """Stands in for psutil.Popen: records kill calls instead of signalling anything."""

    def __init__(self, pid=4242, children=(), kill_error=None):
        self.pid = pid
        self.kill_calls = 0
        self._children = list(children)
        self._kill_error = kill_error

    def children(self, recursive=False):
        return list(self._children)

    def kill(self):
        self.kill_calls += 1
        if self._kill_error is not None:
            raise self._kill_error


@pytest.fixture
def make_process():
    return FakeProcess


@pytest.fixture
def vanished_process():
    return FakeProcess(pid=7, kill_error=psutil.NoSuchProcess(7))


@pytest.fixture
def settings(tmp_path):
    return SimpleNamespace(
        APP_NAME="AgentOS",
        SHELL_DIR_NAME="desktop",
        SERVER_ARTIFACT="dist/server.js",
        PRODUCTION_COMMAND=("node", "dist/server.js"),
        DEVELOPMENT_COMMAND=("npx", "tsx", "server.ts"),
        SERVER_OUTPUT="inherit",
        KILL_PROCESS_TREE=False,
        SERVER_HOST="127.0.0.1",
        SERVER_PORT=3011,
        READINESS_MAX_ATTEMPTS=60,
        READINESS_RETRY_DELAY=0.5,
        READINESS_CONNECT_TIMEOUT=1.0,
        WINDOW_WIDTH=1280,
        WINDOW_HEIGHT=800,
        LOG_TO_FILE=False,
        LOG_FILE_PATH=tmp_path / "logs" / "desktop.log",
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
