"""
Data Models

Defines data classes and models used throughout the chat core.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .constants import JOIN_TAG, MESSAGE_TAG


class ActionType(Enum):
    """Enumeration of outgoing actions, valued by their wire tag."""
    JOIN = JOIN_TAG
    MESSAGE = MESSAGE_TAG


class MessageSender(Enum):
    """Who originated a received message."""
    SELF = "self"
    OTHER = "other"


class ConnectionState(Enum):
    """Enumeration of connection lifecycle states."""
    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transitions can happen from this state."""
        return self in (ConnectionState.CLOSED, ConnectionState.FAILED)


@dataclass(frozen=True)
class Message:
    """A chat message decoded from one received frame."""
    body: str
    sender: MessageSender
    origin_name: str

    @property
    def is_own(self) -> bool:
        """Whether the local user sent this message."""
        return self.sender is MessageSender.SELF


@dataclass(frozen=True)
class ChatAction:
    """An outgoing user action awaiting encoding."""
    action_type: ActionType
    payload: str

    @classmethod
    def join(cls, username: str) -> "ChatAction":
        """Create a join action announcing a username."""
        return cls(ActionType.JOIN, username)

    @classmethod
    def message(cls, body: str) -> "ChatAction":
        """Create a chat message action."""
        return cls(ActionType.MESSAGE, body)


@dataclass
class ConnectionStats:
    """Traffic counters for a single connection."""
    bytes_sent: int = 0
    bytes_received: int = 0
    frames_sent: int = 0
    frames_received: int = 0
    messages_delivered: int = 0
    decode_errors: int = 0
    connected_at: Optional[datetime] = None
    last_message_time: Optional[datetime] = None

    @property
    def session_duration(self) -> float:
        """Get the session duration in seconds."""
        if self.connected_at is None:
            return 0.0
        return (datetime.now() - self.connected_at).total_seconds()
