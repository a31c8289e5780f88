"""
Type Protocols and Interfaces

Defines protocol interfaces for the collaborators the chat core consumes.
"""

from typing import Protocol, Optional, runtime_checkable
from abc import abstractmethod

from .models import Message, ConnectionState
from .exceptions import ProtocolError


@runtime_checkable
class Transport(Protocol):
    """
    Protocol for a duplex byte stream.

    The core never implements TCP itself; it reads and writes through
    this interface.
    """

    @abstractmethod
    def open(self, host: str, port: int) -> None:
        """
        Connect the stream.

        Args:
            host: Remote host name or address.
            port: Remote port.

        Raises:
            TransportError: If the connection cannot be established.
        """
        ...

    @abstractmethod
    def read_available(self, max_bytes: int) -> Optional[bytes]:
        """
        Read whatever is immediately available.

        Args:
            max_bytes: Maximum number of bytes to return.

        Returns:
            Non-empty bytes with data, None if the read would block,
            or b"" at end of stream.

        Raises:
            TransportError: If the read fails.
        """
        ...

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write as much of data as the stream accepts.

        Args:
            data: Bytes to write.

        Returns:
            Number of bytes written, 0 if the write would block.

        Raises:
            TransportError: If the write fails.
        """
        ...

    @abstractmethod
    def wait_readable(self, timeout: Optional[float]) -> bool:
        """Block until data is readable or timeout elapses."""
        ...

    @abstractmethod
    def wait_writable(self, timeout: Optional[float]) -> bool:
        """Block until the stream accepts writes or timeout elapses."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close both directions of the stream."""
        ...


@runtime_checkable
class ConnectionListener(Protocol):
    """Protocol for consumers of decoded messages and lifecycle events."""

    @abstractmethod
    def on_message(self, message: Message) -> None:
        """
        Handle a decoded message.

        Args:
            message: The message, in arrival order.
        """
        ...

    @abstractmethod
    def on_state_change(self, state: ConnectionState, reason: Optional[str] = None) -> None:
        """
        Handle a lifecycle transition.

        Args:
            state: The new connection state.
            reason: Failure description when state is FAILED.
        """
        ...

    @abstractmethod
    def on_protocol_error(self, error: ProtocolError) -> None:
        """Handle a non-fatal protocol error such as an undecodable frame."""
        ...
