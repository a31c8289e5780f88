"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the test suite.
"""

import socket
import threading
from collections import deque
from typing import Deque, List, Optional, Tuple, Union

import pytest

from chat_core.client.network.connection import ConnectionConfig
from chat_core.shared.exceptions import ProtocolError, TransportError
from chat_core.shared.models import ConnectionState, Message


class FakeTransport:
    """Scripted in-memory transport.

    Queued items are returned by read_available in order: bytes are data,
    None means would-block, b"" means end of stream and an exception
    instance is raised.
    """

    def __init__(self) -> None:
        self.opened_with: Optional[Tuple[str, int]] = None
        self.open_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
        self.write_limit: Optional[int] = None
        self.written = bytearray()
        self.write_calls = 0
        self.closed = False
        self.close_calls = 0
        self._incoming: Deque[Union[bytes, None, Exception]] = deque()
        self._lock = threading.Lock()
        self._readable = threading.Event()

    def push(self, *items: Union[bytes, None, Exception]) -> None:
        with self._lock:
            self._incoming.extend(items)
            self._readable.set()

    def open(self, host: str, port: int) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened_with = (host, port)

    def read_available(self, max_bytes: int) -> Optional[bytes]:
        with self._lock:
            if self.closed:
                raise TransportError("Socket not available")
            if not self._incoming:
                self._readable.clear()
                return None
            item = self._incoming.popleft()
            if isinstance(item, Exception):
                raise item
            if item and len(item) > max_bytes:
                self._incoming.appendleft(item[max_bytes:])
                item = item[:max_bytes]
            return item

    def write(self, data: bytes) -> int:
        if self.write_error is not None:
            raise self.write_error
        count = len(data) if self.write_limit is None else min(len(data), self.write_limit)
        with self._lock:
            self.written.extend(data[:count])
            self.write_calls += 1
        return count

    def wait_readable(self, timeout: Optional[float]) -> bool:
        if self.closed:
            raise TransportError("Socket not available")
        return self._readable.wait(timeout)

    def wait_writable(self, timeout: Optional[float]) -> bool:
        return True

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1
        self._readable.set()


class RecordingListener:
    """Listener that records every callback."""

    def __init__(self) -> None:
        self.messages: List[Message] = []
        self.states: List[Tuple[ConnectionState, Optional[str]]] = []
        self.errors: List[ProtocolError] = []
        self.message_received = threading.Event()
        self.closed = threading.Event()

    def on_message(self, message: Message) -> None:
        self.messages.append(message)
        self.message_received.set()

    def on_state_change(self, state: ConnectionState, reason: Optional[str] = None) -> None:
        self.states.append((state, reason))
        if state.is_terminal:
            self.closed.set()

    def on_protocol_error(self, error: ProtocolError) -> None:
        self.errors.append(error)

    @property
    def state_names(self) -> List[ConnectionState]:
        return [state for state, _ in self.states]


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Provide a scripted transport."""
    return FakeTransport()


@pytest.fixture
def listener() -> RecordingListener:
    """Provide a listener that records callbacks."""
    return RecordingListener()


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """Provide a connection configuration driven manually by the test."""
    return ConnectionConfig(
        host="chat.example.com",
        port=8080,
        timeout=1.0,
        poll_interval=0.05,
        start_reader=False
    )


@pytest.fixture
def available_port() -> int:
    """Get an available port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def temp_log_file(tmp_path) -> str:
    """Provide a temporary log file path."""
    return str(tmp_path / "test.log")


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests."""
    import logging
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    yield

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
