"""
AgentOS desktop shell: native window around the AgentOS web UI.

The window itself is a thin host. The only work done here is calling the
backend supervisor at the two points of the window's life: before the window
opens (start the server and wait for it) and when it closes (kill the server).
"""

import atexit
import logging
from typing import Any, Optional

import webview

from src.local import app_globals as config
from src.local.supervisor import ServerSupervisor

log = logging.getLogger(__name__)


def create_main_window(supervisor: ServerSupervisor, settings: Any = None):
    """
    Creates the main window and wires its close event to the supervisor.

    :param supervisor: The supervisor owning the backend process.
    :param settings: Settings object, defaults to the merged application settings.
    :return: The pywebview window.
    """
    settings = settings if settings is not None else config

    window = webview.create_window(
        title=settings.APP_NAME,
        url=supervisor.server_url,
        width=settings.WINDOW_WIDTH,
        height=settings.WINDOW_HEIGHT,
    )

    def _on_closing():
        log.info("Window close requested.")
        supervisor.stop()

    window.events.closing += _on_closing
    return window


def run_desktop(supervisor: Optional[ServerSupervisor] = None) -> None:
    """Starts the backend, opens the window and blocks until the GUI loop ends."""
    supervisor = supervisor or ServerSupervisor()

    if not supervisor.start():
        log.warning("Opening the window without a confirmed backend.")

    create_main_window(supervisor)
    # Safety net for exits that never deliver a close event.
    atexit.register(supervisor.stop)

    try:
        webview.start()
    finally:
        supervisor.stop()
