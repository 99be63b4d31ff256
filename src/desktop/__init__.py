"""
Desktop package for the AgentOS shell.
Hosts the web UI in a native pywebview window.
"""

from .window import create_main_window, run_desktop

__all__ = ["create_main_window", "run_desktop"]
