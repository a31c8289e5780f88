"""
Socket Transport

Non-blocking TCP implementation of the transport collaborator.
"""

import logging
import selectors
import socket
import threading
from typing import Optional

from chat_core.shared.constants import DEFAULT_CONNECT_TIMEOUT
from chat_core.shared.exceptions import TransportError
from chat_core.shared.protocols import Transport

logger = logging.getLogger(__name__)


class SocketTransport(Transport):
    """
    TCP byte stream over a non-blocking socket.

    Connects with a blocking socket bounded by ``timeout``, then switches
    to non-blocking mode so reads and writes report would-block instead
    of stalling the caller.
    """

    def __init__(self, timeout: float = DEFAULT_CONNECT_TIMEOUT,
                 enable_keepalive: bool = True) -> None:
        self.timeout = timeout
        self.enable_keepalive = enable_keepalive
        self._socket: Optional[socket.socket] = None
        self._address: Optional[str] = None
        self._lock = threading.Lock()

    def open(self, host: str, port: int) -> None:
        self._address = f"{host}:{port}"
        try:
            sock = socket.create_connection((host, port), timeout=self.timeout)
        except (socket.gaierror, socket.timeout, OSError) as e:
            raise TransportError(
                f"Failed to connect to {self._address}: {e}",
                operation="connect",
                address=self._address
            ) from e

        if self.enable_keepalive:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        sock.setblocking(False)

        with self._lock:
            self._socket = sock
        logger.debug(f"Transport connected to {self._address}")

    def read_available(self, max_bytes: int) -> Optional[bytes]:
        sock = self._require_socket("read")
        try:
            return sock.recv(max_bytes)
        except BlockingIOError:
            return None
        except OSError as e:
            raise TransportError(
                f"Failed to receive data: {e}", operation="read", address=self._address
            ) from e

    def write(self, data: bytes) -> int:
        sock = self._require_socket("write")
        try:
            return sock.send(data)
        except BlockingIOError:
            return 0
        except OSError as e:
            raise TransportError(
                f"Failed to send data: {e}", operation="write", address=self._address
            ) from e

    def wait_readable(self, timeout: Optional[float]) -> bool:
        return self._wait(selectors.EVENT_READ, timeout)

    def wait_writable(self, timeout: Optional[float]) -> bool:
        return self._wait(selectors.EVENT_WRITE, timeout)

    def close(self) -> None:
        with self._lock:
            sock, self._socket = self._socket, None
        if sock is None:
            return

        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Peer already gone
        sock.close()
        logger.debug(f"Transport to {self._address} closed")

    def is_open(self) -> bool:
        return self._socket is not None

    def _wait(self, events: int, timeout: Optional[float]) -> bool:
        sock = self._require_socket("wait")
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(sock, events)
                return bool(selector.select(timeout))
        except (OSError, ValueError) as e:
            raise TransportError(
                f"Failed to poll socket: {e}", operation="wait", address=self._address
            ) from e

    def _require_socket(self, operation: str) -> socket.socket:
        sock = self._socket
        if sock is None:
            raise TransportError("Socket not available", operation=operation, address=self._address)
        return sock
