import os
import sys
import logging
import threading
import subprocess
import psutil
from typing import Any, Dict, Optional
from src.local import app_globals
from src.local.supervisor.errors import SpawnError
from src.local.supervisor.resolver import LaunchPlan

log = logging.getLogger(__name__)

SERVER_PROCESS_NAME = "server"
OUTPUT_MODES = {"inherit", "log"}


#* --- Process Creation ---
def _get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific creation flags for psutil.Popen."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}

def _prepare_env(port: int) -> Dict[str, str]:
    """Copies os.environ and points the backend at the port the readiness probe checks."""
    env = os.environ.copy()
    env["PORT"] = str(port)
    return env

def _read_pipe(pipe, process_name: str, level: int) -> None:
    """Target function for reader threads. Reads and logs lines from a subprocess pipe."""
    proc_logger = logging.getLogger(f"proc.{process_name}")
    try:
        for line_bytes in iter(pipe.readline, b""):
            line = line_bytes.decode("utf-8", errors="replace").rstrip()
            if not line:
                continue
            proc_logger.log(level, line)
    except Exception as e:
        proc_logger.debug(f"Pipe reader for {process_name} stream exited: {e}")
    finally:
        pipe.close()

def log_process_output(process: subprocess.Popen, name: str) -> None:
    """Starts background threads to consume and log a process's stdout/stderr."""
    if process.stdout:
        threading.Thread(target=_read_pipe, args=(process.stdout, name, logging.INFO), daemon=True).start()
    if process.stderr:
        threading.Thread(target=_read_pipe, args=(process.stderr, name, logging.ERROR), daemon=True).start()

def _normalize_output_mode(output_mode: str) -> str:
    """Lowercases the output mode, falling back to 'inherit' for unknown values."""
    mode = str(output_mode).strip().lower()
    if mode not in OUTPUT_MODES:
        log.warning(f"Unknown server output mode '{output_mode}', expected one of {sorted(OUTPUT_MODES)}. Using 'inherit'.")
        return "inherit"
    return mode

def spawn_server(plan: LaunchPlan, port: Optional[int] = None, output_mode: Optional[str] = None) -> psutil.Popen:
    """
    Spawns the backend described by `plan` without waiting for it.

    :param plan: The resolved LaunchPlan.
    :param port: Port exported to the backend as PORT. Defaults to the configured server port.
    :param output_mode: 'inherit' to share this console, 'log' to pipe output into logging.
    :return: The psutil.Popen handle of the child process.
    :raises SpawnError: If the command cannot be started.
    """
    port = port if port is not None else app_globals.SERVER_PORT
    output_mode = _normalize_output_mode(output_mode or app_globals.SERVER_OUTPUT)

    popen_kwargs = _get_popen_creation_flags()
    if output_mode == "log":
        popen_kwargs.update(stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    log.info(f"Starting AgentOS server ({plan.mode}): {' '.join(plan.argv)}")
    log.info(f"Working dir: {plan.working_directory}")
    try:
        p = psutil.Popen(
            plan.argv,
            cwd=str(plan.working_directory),
            env=_prepare_env(port),
            stdin=subprocess.DEVNULL,
            **popen_kwargs,
        )
    except OSError as e:
        raise SpawnError(f"Failed to start '{plan.command}': {e}") from e

    if output_mode == "log":
        log_process_output(p, SERVER_PROCESS_NAME)
    log.info(f"Server started with PID: {p.pid}")
    return p

def launch_process(plan: LaunchPlan, port: Optional[int] = None, output_mode: Optional[str] = None) -> Optional[psutil.Popen]:
    """Spawns the backend, returning None instead of raising when the spawn fails."""
    try:
        return spawn_server(plan, port=port, output_mode=output_mode)
    except SpawnError as e:
        log.warning(str(e))
        return None
