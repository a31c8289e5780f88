"""
Display Manager

Renders chat traffic and connection events to a Rich console.
"""

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, List, Optional

from rich.console import Console
from rich.text import Text

from chat_core.shared.models import ConnectionState, Message
from chat_core.shared.constants import MAX_MESSAGE_HISTORY
from chat_core.shared.exceptions import ProtocolError


@dataclass
class DisplayStats:
    """Statistics for display management."""
    total_messages: int = 0
    own_messages: int = 0
    system_messages: int = 0
    protocol_errors: int = 0
    last_message_time: Optional[datetime] = None


class DisplayManager:
    """
    Connection listener that prints chat traffic to the console.

    Keeps a bounded history of rendered lines so a front end can redraw.
    """

    _STATE_STYLES = {
        ConnectionState.CONNECTING: "yellow",
        ConnectionState.OPEN: "green",
        ConnectionState.CLOSING: "yellow",
        ConnectionState.CLOSED: "yellow italic",
        ConnectionState.FAILED: "bold red",
    }

    def __init__(self, console: Optional[Console] = None,
                 max_history: int = MAX_MESSAGE_HISTORY) -> None:
        """
        Initialize the display manager.

        Args:
            console: Rich console to print to.
            max_history: Maximum number of lines to keep in history.
        """
        self.console = console or Console()
        self.max_history = max_history
        self.chat_history: Deque[Text] = deque(maxlen=max_history)
        self._lock = threading.Lock()
        self._stats = DisplayStats()

    def on_message(self, message: Message) -> None:
        """Render a received chat message."""
        style = "bright_blue" if message.is_own else "cyan"
        self.add_line(Text.assemble((message.origin_name, f"bold {style}"), ": ", (message.body, style)))
        with self._lock:
            self._stats.total_messages += 1
            if message.is_own:
                self._stats.own_messages += 1

    def on_state_change(self, state: ConnectionState, reason: Optional[str] = None) -> None:
        """Show a connection lifecycle change."""
        text = f"=> Connection {state.value}"
        if reason:
            text += f": {reason}"
        self.add_system_message(text, self._STATE_STYLES.get(state, "dim"))

    def on_protocol_error(self, error: ProtocolError) -> None:
        """Show a frame that could not be decoded."""
        self.add_system_message(f"=> Ignored bad frame: {error}", "red")
        with self._lock:
            self._stats.protocol_errors += 1

    def add_system_message(self, message: str, style: str = "green") -> None:
        """
        Add a system message (like connection status, errors).

        Args:
            message: The system message text.
            style: Rich style for the message.
        """
        self.add_line(Text(message, style))
        with self._lock:
            self._stats.system_messages += 1

    def add_line(self, line: Text) -> None:
        """Record a rendered line and print it."""
        with self._lock:
            self.chat_history.append(line)
            self._stats.last_message_time = datetime.now()
        self.console.print(line)

    def get_chat_history(self) -> List[Text]:
        """
        Get the current chat history.

        Returns:
            List of Text objects, oldest first.
        """
        with self._lock:
            return list(self.chat_history)

    def get_stats(self) -> DisplayStats:
        """Get a snapshot of the display statistics."""
        with self._lock:
            return DisplayStats(**vars(self._stats))

    def clear_history(self) -> None:
        """Clear all chat history."""
        with self._lock:
            self.chat_history.clear()
            self._stats = DisplayStats()
