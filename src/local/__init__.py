"""
Local package for the AgentOS desktop shell.

This package provides the application-level configuration through the
app_globals object and the backend supervisor.
"""

from .config import effective_settings as app_globals

__all__ = ["app_globals"]
