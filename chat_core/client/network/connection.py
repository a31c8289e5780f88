"""
Chat Connection

Owns the transport lifecycle and drives the read/decode/dispatch and
encode/write paths for a single chat session.
"""

import logging
import threading
import weakref
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Any, Dict, List

from chat_core.shared.models import ConnectionState, ConnectionStats
from chat_core.shared.constants import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_WRITE_TIMEOUT,
    MESSAGE_DELIMITER,
    READER_JOIN_TIMEOUT,
)
from chat_core.shared.exceptions import (
    ConnectionStateError,
    DecodeError,
    FrameTooLargeError,
    NotConnectedError,
    TransportError,
)
from chat_core.shared.protocols import ConnectionListener, Transport
from .codec import Codec
from .frame_assembler import FrameAssembler
from .transport import SocketTransport

logger = logging.getLogger(__name__)


@dataclass
class ConnectionConfig:
    """Configuration for chat connections."""
    host: str
    port: int
    timeout: float = DEFAULT_CONNECT_TIMEOUT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_frame_size: int = DEFAULT_MAX_FRAME_SIZE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    enable_keepalive: bool = True
    start_reader: bool = True
    delimiter: bytes = MESSAGE_DELIMITER


class Connection:
    """
    A single client connection to a chat host.

    Reads are driven by readiness events, either from the built-in reader
    thread or from a caller invoking handle_readable(). Decoded messages and
    lifecycle transitions are reported to a listener that the connection
    references weakly; the caller keeps it alive.
    """

    def __init__(self, config: ConnectionConfig,
                 listener: Optional[ConnectionListener] = None,
                 transport: Optional[Transport] = None) -> None:
        """
        Initialize the connection.

        Args:
            config: Connection configuration.
            listener: Receiver of messages and state changes.
            transport: Byte stream to use; a SocketTransport by default.
        """
        self.config = config
        self._transport: Transport = transport or SocketTransport(
            timeout=config.timeout,
            enable_keepalive=config.enable_keepalive
        )
        self._codec = Codec(delimiter=config.delimiter)
        self._assembler = FrameAssembler(
            delimiter=config.delimiter,
            max_frame_size=config.max_frame_size
        )

        self._state = ConnectionState.IDLE
        self._last_error: Optional[str] = None
        self._host = config.host
        self._port = config.port
        self._stats = ConnectionStats()

        self._state_lock = threading.Lock()
        self._read_lock = threading.Lock()
        self._write_lock = threading.Lock()
        # Re-entrant so listeners may call back into the connection
        self._dispatch_lock = threading.RLock()

        self._stop_event = threading.Event()
        self._reader_thread: Optional[threading.Thread] = None

        self._listener_ref: Optional[weakref.ref] = None
        self.set_listener(listener)

    def set_listener(self, listener: Optional[ConnectionListener]) -> None:
        """
        Register the listener for messages and lifecycle events.

        Args:
            listener: The listener, or None to stop delivering events.
        """
        self._listener_ref = weakref.ref(listener) if listener is not None else None

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._state

    @property
    def last_error(self) -> Optional[str]:
        """Reason for the most recent failure, if any."""
        return self._last_error

    @property
    def local_identity(self) -> Optional[str]:
        """Username announced by the last join."""
        return self._codec.local_identity

    def is_open(self) -> bool:
        """Check if the connection can send and receive."""
        return self._state is ConnectionState.OPEN

    def open(self, host: Optional[str] = None, port: Optional[int] = None) -> bool:
        """
        Connect to the chat host.

        Args:
            host: Host to connect to; defaults to the configured host.
            port: Port to connect to; defaults to the configured port.

        Returns:
            True if the connection is open, False if it failed.

        Raises:
            ConnectionStateError: If the connection was already used.
        """
        with self._state_lock:
            if self._state is not ConnectionState.IDLE:
                raise ConnectionStateError(
                    f"Cannot open a connection that is {self._state.value}",
                    operation="open",
                    address=self._address
                )
            self._state = ConnectionState.CONNECTING
            self._host = host or self.config.host
            self._port = port or self.config.port
        self._notify_state(ConnectionState.CONNECTING)

        logger.info(f"Connecting to {self._address}")
        try:
            self._transport.open(self._host, self._port)
        except TransportError as e:
            self._fail(str(e))
            return False

        with self._state_lock:
            if self._state is not ConnectionState.CONNECTING:
                # Closed while the transport was connecting
                self._transport.close()
                return False
            self._state = ConnectionState.OPEN
            self._stats.connected_at = datetime.now()
        self._notify_state(ConnectionState.OPEN)

        if self.config.start_reader:
            self._start_reader()
        return True

    def join(self, username: str) -> None:
        """
        Announce the local username.

        Args:
            username: Name used for the session and for classifying our own messages.

        Raises:
            NotConnectedError: If the connection is not open.
            EncodingError: If the username cannot be sent.
            TransportError: If the write fails.
        """
        self._require_open("join")
        data = self._codec.encode_join(username)
        self._codec.local_identity = username
        logger.info(f"Joining as {username!r}")
        self._write_frame(data)

    def send(self, body: str) -> None:
        """
        Send a chat message.

        Args:
            body: Message text.

        Raises:
            NotConnectedError: If the connection is not open.
            EncodingError: If the body cannot be sent.
            TransportError: If the write fails.
        """
        self._require_open("send")
        data = self._codec.encode_message(body)
        self._write_frame(data)

    def close(self) -> None:
        """Close the connection. Safe to call repeatedly and from any thread."""
        with self._state_lock:
            if self._state not in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                return
            self._state = ConnectionState.CLOSING
        logger.info(f"Closing connection to {self._address}")
        self._notify_state(ConnectionState.CLOSING)

        self._stop_event.set()
        self._transport.close()
        self._join_reader()

        if self._read_lock.acquire(blocking=False):
            try:
                self._assembler.reset()
            finally:
                self._read_lock.release()

        with self._state_lock:
            self._state = ConnectionState.CLOSED
        self._notify_state(ConnectionState.CLOSED)

    def handle_readable(self) -> None:
        """
        Process a data-available notification.

        Reads until the transport would block, then decodes and delivers
        every complete frame in arrival order.
        """
        with self._read_lock:
            while self._state is ConnectionState.OPEN:
                try:
                    data = self._transport.read_available(self.config.buffer_size)
                except TransportError as e:
                    self._fail(str(e))
                    return

                if data is None:
                    return
                if not data:
                    logger.info(f"Peer at {self._address} closed the stream")
                    self.close()
                    return

                self._stats.bytes_received += len(data)
                self._assembler.feed(data)
                try:
                    frames = self._assembler.drain_frames()
                except FrameTooLargeError as e:
                    self._dispatch_frames(e.frames)
                    self._fail(str(e))
                    return

                self._dispatch_frames(frames)

    def get_stats(self) -> ConnectionStats:
        """
        Get traffic statistics.

        Returns:
            A snapshot of the connection counters.
        """
        return replace(self._stats)

    def get_connection_info(self) -> Dict[str, Any]:
        """
        Get connection information.

        Returns:
            Dictionary with connection details.
        """
        return {
            "host": self._host,
            "port": self._port,
            "state": self._state.value,
            "connected_at": self._stats.connected_at,
            "local_identity": self._codec.local_identity,
            "last_error": self._last_error
        }

    @property
    def _address(self) -> str:
        return f"{self._host}:{self._port}"

    def _require_open(self, operation: str) -> None:
        if self._state is not ConnectionState.OPEN:
            raise NotConnectedError(
                f"Cannot {operation}: connection is {self._state.value}",
                operation=operation,
                address=self._address
            )

    def _write_frame(self, data: bytes) -> None:
        with self._write_lock:
            total = 0
            while total < len(data):
                self._require_open("write")
                try:
                    written = self._transport.write(data[total:])
                    if not written and not self._transport.wait_writable(self.config.write_timeout):
                        raise TransportError(
                            f"Write timed out after {self.config.write_timeout}s",
                            operation="write",
                            address=self._address
                        )
                except TransportError as e:
                    self._fail(str(e))
                    raise
                total += written

            self._stats.bytes_sent += len(data)
            self._stats.frames_sent += 1
        logger.debug(f"Sent frame of {len(data)} bytes to {self._address}")

    def _dispatch_frames(self, frames: List[bytes]) -> None:
        for frame in frames:
            if self._state is not ConnectionState.OPEN:
                return
            self._dispatch_frame(frame)

    def _dispatch_frame(self, frame: bytes) -> None:
        self._stats.frames_received += 1
        if not frame:
            return

        try:
            message = self._codec.decode(frame)
        except DecodeError as e:
            self._stats.decode_errors += 1
            logger.warning(f"Dropping undecodable frame from {self._address}: {e}")
            self._notify("on_protocol_error", e)
            return

        self._stats.messages_delivered += 1
        self._stats.last_message_time = datetime.now()
        logger.debug(f"Received message from {message.origin_name!r} ({message.sender.value})")
        self._notify("on_message", message)

    def _fail(self, reason: str) -> None:
        with self._state_lock:
            if self._state not in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                return
            self._state = ConnectionState.FAILED
            self._last_error = reason

        logger.error(f"Connection to {self._address} failed: {reason}")
        self._stop_event.set()
        self._notify_state(ConnectionState.FAILED, reason)
        self._transport.close()

    def _start_reader(self) -> None:
        self._stop_event.clear()
        self._reader_thread = threading.Thread(
            target=self._read_loop,
            name=f"chat-reader-{self._address}",
            daemon=True
        )
        self._reader_thread.start()

    def _join_reader(self) -> None:
        thread = self._reader_thread
        if thread is not None and thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=READER_JOIN_TIMEOUT)

    def _read_loop(self) -> None:
        logger.debug(f"Reader for {self._address} started")
        while not self._stop_event.is_set() and self._state is ConnectionState.OPEN:
            try:
                ready = self._transport.wait_readable(self.config.poll_interval)
            except TransportError as e:
                self._fail(str(e))
                break
            if ready:
                self.handle_readable()
        logger.debug(f"Reader for {self._address} stopped")

    def _notify_state(self, state: ConnectionState, reason: Optional[str] = None) -> None:
        logger.debug(f"Connection to {self._address} is now {state.value}")
        self._notify("on_state_change", state, reason)

    def _notify(self, callback: str, *args: Any) -> None:
        listener = self._listener_ref() if self._listener_ref is not None else None
        if listener is None:
            return

        with self._dispatch_lock:
            try:
                getattr(listener, callback)(*args)
            except Exception:
                logger.exception(f"Listener {callback} callback raised")

    def __enter__(self) -> "Connection":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
