import psutil
import logging
from src.local.supervisor.errors import TerminateError

log = logging.getLogger(__name__)


def _kill_children(proc: psutil.Popen) -> None:
    """Kills all descendants of `proc`, skipping the ones that already exited."""
    try:
        children = proc.children(recursive=True)
    except psutil.NoSuchProcess:
        log.warning(f"Process {proc.pid} no longer exists, skipping children retrieval.")
        return

    for child in children:
        try:
            log.debug(f"Killing child process {child.pid} of {proc.pid}")
            child.kill()
        except psutil.NoSuchProcess:
            continue


def terminate_process(proc: psutil.Popen, kill_tree: bool = False) -> None:
    """
    Sends a kill signal to the backend process.

    The signal is fire-and-forget: this does not wait for the process to exit
    and does not retry.

    :param proc: The process handle to kill.
    :param kill_tree: If True, descendants are killed before the process itself.
    :raises TerminateError: If the signal could not be delivered.
    """
    log.info(f"Stopping server (PID {proc.pid})...")
    try:
        if kill_tree:
            _kill_children(proc)
        proc.kill()
    except (psutil.Error, OSError) as e:
        raise TerminateError(f"Failed to kill server process {proc.pid}: {e}") from e
