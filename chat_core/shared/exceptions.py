"""
Custom Exceptions

Defines custom exception classes for the chat core.
"""

from enum import Enum
from typing import List, Optional


class ChatCoreError(Exception):
    """Base exception class for all chat core errors."""
    pass


class NetworkError(ChatCoreError):
    """Raised when network-related errors occur."""

    def __init__(self, message: str, operation: Optional[str] = None, address: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.address = address


class TransportError(NetworkError):
    """Raised when the transport fails to connect, read or write."""
    pass


class NotConnectedError(NetworkError):
    """Raised when an action is attempted while the connection is not open."""
    pass


class ConnectionStateError(NetworkError):
    """Raised when a lifecycle operation is invalid for the current state."""
    pass


class DecodeFailure(Enum):
    """Reasons a received frame could not be decoded."""
    MALFORMED = "malformed"
    INVALID_TEXT = "invalid_text"


class ProtocolError(ChatCoreError):
    """Raised when protocol-related errors occur."""

    def __init__(self, message: str, message_data: Optional[bytes] = None, expected_format: Optional[str] = None):
        super().__init__(message)
        self.message_data = message_data
        self.expected_format = expected_format


class DecodeError(ProtocolError):
    """Raised when a received frame cannot be turned into a message."""

    def __init__(self, message: str, reason: DecodeFailure = DecodeFailure.MALFORMED,
                 frame: Optional[bytes] = None):
        super().__init__(message, message_data=frame, expected_format="<name>:<body>")
        self.reason = reason
        self.frame = frame


class EncodingError(ProtocolError):
    """Raised when an outgoing action cannot be represented on the wire."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, expected_format="<tag>:<payload>")
        self.field = field


class FrameTooLargeError(ProtocolError):
    """
    Raised when a frame, or bytes still waiting for a delimiter, exceed the
    frame size limit.

    ``frames`` holds the complete frames that preceded the oversized one in
    the same drain, so callers can still deliver them.
    """

    def __init__(self, message: str, size: int = 0, limit: int = 0,
                 frames: Optional[List[bytes]] = None):
        super().__init__(message)
        self.size = size
        self.limit = limit
        self.frames = frames or []


class ConfigurationError(ChatCoreError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details
