import psutil
import logging
import threading
from typing import Optional
from src.local.supervisor import shutdown
from src.local.supervisor.errors import TerminateError

log = logging.getLogger(__name__)


class ServerProcessStore:
    """
    Holds the one backend process the shell is responsible for.

    The store is filled at most once, right after a successful launch, and
    emptied at most once by the window-close hook. Both happen under the same
    lock, and the handle is always moved out of the store before it is killed,
    so a process can never be killed twice or slip through between a store and
    a take. Once taken, the store stays closed for the rest of the application.
    """

    def __init__(self, kill_tree: bool = False) -> None:
        self._lock = threading.Lock()
        self._process: Optional[psutil.Popen] = None
        self._closed = False
        self.kill_tree = kill_tree

    @property
    def is_holding(self) -> bool:
        with self._lock:
            return self._process is not None

    def store(self, process: psutil.Popen) -> bool:
        """
        Takes ownership of a freshly launched process.

        If the shell is already shutting down, or another process is already
        held, the new process is killed right away instead of being stored.

        :param process: The handle returned by the launcher.
        :return: True if the process is now held, False if it was rejected.
        """
        with self._lock:
            held = self._process
            if held is None and not self._closed:
                self._process = process
                log.debug(f"Managing server process with PID {process.pid}")
                return True

        if held is not None:
            log.error(f"A server process (PID {held.pid}) is already being managed, stopping extra process {process.pid}.")
        else:
            log.warning(f"Shutdown already requested, stopping late server process {process.pid}.")
        self._terminate(process)
        return False

    def take_and_terminate(self) -> Optional[psutil.Popen]:
        """
        Removes the held process from the store and kills it.

        Safe to call when nothing was ever stored and safe to call repeatedly;
        only the first call after a store does anything.

        :return: The process that was killed, or None.
        """
        with self._lock:
            process, self._process = self._process, None
            self._closed = True

        if process is None:
            log.debug("No managed server process to stop.")
            return None

        self._terminate(process)
        return process

    def _terminate(self, process: psutil.Popen) -> None:
        try:
            shutdown.terminate_process(process, kill_tree=self.kill_tree)
        except TerminateError as e:
            log.warning(f"{e}. Ignoring, the application is exiting.")
