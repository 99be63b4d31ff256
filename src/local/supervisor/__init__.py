"""
The Supervisor package.
Manages the lifecycle of the AgentOS backend server process.

This package contains the ServerSupervisor class and its helper modules,
which together resolve how to launch the backend, start it, wait for it to
accept connections and kill it when the desktop window closes.
"""
from .lifecycle import ServerProcessStore
from .readiness import ReadinessTarget
from .resolver import LaunchPlan
from .supervisor import ServerSupervisor

__all__ = ['LaunchPlan', 'ReadinessTarget', 'ServerProcessStore', 'ServerSupervisor']
