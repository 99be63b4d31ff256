import time
import socket
import logging
from dataclasses import dataclass
from typing import Any
from src.local.supervisor.errors import ReadinessTimeout

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadinessTarget:
    """Where and how patiently to probe the backend."""
    host: str = "127.0.0.1"
    port: int = 3011
    max_attempts: int = 60
    retry_delay: float = 0.5  # seconds
    connect_timeout: float = 1.0  # seconds

    @classmethod
    def from_settings(cls, settings: Any) -> "ReadinessTarget":
        return cls(
            host=settings.SERVER_HOST,
            port=settings.SERVER_PORT,
            max_attempts=settings.READINESS_MAX_ATTEMPTS,
            retry_delay=settings.READINESS_RETRY_DELAY,
            connect_timeout=settings.READINESS_CONNECT_TIMEOUT,
        )


def _can_connect(host: str, port: int, timeout: float) -> bool:
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


def wait_for_server(target: ReadinessTarget) -> bool:
    """
    Waits for the backend to accept TCP connections on its port.

    Blocks the calling thread for at most `max_attempts` connection attempts,
    sleeping `retry_delay` between failed ones. There is no sleep after the
    last attempt.

    :param target: The ReadinessTarget to probe.
    :return: True on the first successful connect, False once all attempts fail.
    """
    log.info(f"Waiting for server at {target.host}:{target.port}...")
    for attempt in range(1, target.max_attempts + 1):
        if _can_connect(target.host, target.port, target.connect_timeout):
            log.info(f"Server ready after {attempt} attempts")
            return True
        log.debug(f"Waiting for server... attempt {attempt}/{target.max_attempts}")
        if attempt < target.max_attempts:
            time.sleep(target.retry_delay)
    return False


def ensure_ready(target: ReadinessTarget) -> None:
    """
    Like wait_for_server, but reports failure as an exception.

    :raises ReadinessTimeout: If the server never accepted a connection.
    """
    if not wait_for_server(target):
        raise ReadinessTimeout(
            f"Server at {target.host}:{target.port} did not accept connections "
            f"after {target.max_attempts} attempts."
        )
