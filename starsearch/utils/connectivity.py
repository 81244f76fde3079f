"""
Connectivity check.
Online means a TCP connection to a well-known host opens within the timeout.
"""
import logging
import socket
from typing import Protocol

from starsearch.config.settings import settings

logger = logging.getLogger(__name__)


class ConnectionChecker(Protocol):
    def is_online(self) -> bool: ...


class SocketConnectionChecker:
    def __init__(
        self,
        host: str = settings.CONNECTIVITY_HOST,
        port: int = settings.CONNECTIVITY_PORT,
        timeout: float = settings.CONNECTIVITY_TIMEOUT_SECONDS,
    ):
        self._host = host
        self._port = port
        self._timeout = timeout

    def is_online(self) -> bool:
        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout):
                return True
        except OSError as exc:
            logger.info(
                "Connectivity check failed",
                extra={"host": self._host, "port": self._port, "error": str(exc)},
            )
            return False
