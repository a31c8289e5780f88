"""
Client Network Layer

Provides the wire codec, frame reassembly and connection management
for the chat client.
"""

from .codec import Codec
from .frame_assembler import FrameAssembler
from .connection import Connection, ConnectionConfig
from .transport import SocketTransport

__all__ = ["Codec", "FrameAssembler", "Connection", "ConnectionConfig", "SocketTransport"]
