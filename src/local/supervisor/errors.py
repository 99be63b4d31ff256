"""Exceptions raised while supervising the backend server process."""


class SupervisorError(Exception):
    """Base class for all supervisor failures. None of them are fatal to the shell."""


class LaunchEnvironmentError(SupervisorError):
    """The working directory or the project root could not be determined."""


class SpawnError(SupervisorError):
    """The backend command could not be started."""


class ReadinessTimeout(SupervisorError):
    """The backend did not accept a TCP connection within the allowed attempts."""


class TerminateError(SupervisorError):
    """The kill signal could not be delivered to the backend process."""
