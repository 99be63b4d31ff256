import time
import logging
import threading
from typing import Any, Optional
from src.local import app_globals
from src.local.supervisor import process_utils, readiness, resolver
from src.local.supervisor.errors import LaunchEnvironmentError, ReadinessTimeout
from src.local.supervisor.lifecycle import ServerProcessStore

log = logging.getLogger(__name__)


class ServerSupervisor:
    """
    Starts the AgentOS backend for the desktop shell and stops it again on exit.

    Every failure is downgraded to a warning: when the backend cannot be
    launched the shell assumes one is already running, and when it does not
    become reachable in time the shell opens anyway.
    """

    def __init__(self, settings: Any = None, store: Optional[ServerProcessStore] = None) -> None:
        """
        :param settings: Settings object, defaults to the merged application settings.
        :param store: The lifecycle store shared with the shutdown hook.
        """
        self.settings = settings if settings is not None else app_globals
        self.store = store if store is not None else ServerProcessStore(kill_tree=self.settings.KILL_PROCESS_TREE)
        self.target = readiness.ReadinessTarget.from_settings(self.settings)
        # The backend is launched at most once per supervisor.
        self._start_lock = threading.Lock()
        self._started = False

    @property
    def server_url(self) -> str:
        return f"http://{self.target.host}:{self.target.port}"

    def start(self) -> bool:
        """
        Resolves, launches and waits for the backend.

        The call blocks until the server answers or the readiness probe gives up.
        Only the first call launches anything; later calls return False.

        :return: True if a managed server is up and reachable, False otherwise.
        """
        with self._start_lock:
            if self._started:
                log.warning("Server start already attempted. Ignoring repeated start.")
                return False
            self._started = True

        start_time = time.time()
        try:
            plan = resolver.resolve_launch_plan(
                shell_dir_name=self.settings.SHELL_DIR_NAME,
                server_artifact=self.settings.SERVER_ARTIFACT,
                production_command=self.settings.PRODUCTION_COMMAND,
                development_command=self.settings.DEVELOPMENT_COMMAND,
            )
        except LaunchEnvironmentError as e:
            log.warning(f"Could not start server ({e}) - assuming it's already running")
            return False

        process = process_utils.launch_process(
            plan, port=self.target.port, output_mode=self.settings.SERVER_OUTPUT
        )
        if process is None:
            log.warning("Could not start server - assuming it's already running")
            return False

        if not self.store.store(process):
            return False

        try:
            readiness.ensure_ready(self.target)
        except ReadinessTimeout as e:
            log.warning(f"Server may not be ready: {e}")
            return False

        log.info(f"Server is up at {self.server_url} ({time.time() - start_time:.2f} seconds).")
        return True

    def stop(self) -> None:
        """Stops the managed backend, if any. Safe to call more than once."""
        self.store.take_and_terminate()
