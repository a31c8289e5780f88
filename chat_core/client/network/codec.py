"""
Wire Codec

Translates between chat actions/messages and the line-delimited wire format.
"""

import logging
from typing import Optional

from chat_core.shared.models import ActionType, ChatAction, Message, MessageSender
from chat_core.shared.constants import (
    MESSAGE_DELIMITER,
    PROTOCOL_SEPARATOR,
    PROTOCOL_ENCODING,
)
from chat_core.shared.exceptions import DecodeError, DecodeFailure, EncodingError

logger = logging.getLogger(__name__)


class Codec:
    """
    Encodes outgoing actions and decodes received frames.

    Each frame on the wire is ``<tag>:<payload>`` followed by a single
    delimiter byte. Received frames carry ``<name>:<body>`` and are split
    on the first separator only, so bodies may contain further colons.
    """

    def __init__(self, local_identity: Optional[str] = None,
                 delimiter: bytes = MESSAGE_DELIMITER) -> None:
        """
        Initialize the codec.

        Args:
            local_identity: Username used to classify messages as our own.
            delimiter: Single byte terminating every frame.
        """
        if len(delimiter) != 1:
            raise ValueError("delimiter must be exactly one byte")
        self.delimiter = delimiter
        self._delimiter_char = delimiter.decode(PROTOCOL_ENCODING)
        self._local_identity = local_identity

    @property
    def local_identity(self) -> Optional[str]:
        """The username messages are compared against."""
        return self._local_identity

    @local_identity.setter
    def local_identity(self, username: Optional[str]) -> None:
        self._local_identity = username

    def encode(self, action: ChatAction) -> bytes:
        """
        Encode an action into a delimited frame.

        Args:
            action: The action to encode.

        Returns:
            Frame bytes including the trailing delimiter.

        Raises:
            EncodingError: If the payload cannot be represented on the wire.
        """
        payload = action.payload
        field = "username" if action.action_type is ActionType.JOIN else "body"

        if not isinstance(payload, str):
            raise EncodingError(f"{field} must be text, got {type(payload).__name__}", field=field)

        if self._delimiter_char in payload:
            raise EncodingError(f"{field} must not contain the frame delimiter", field=field)

        if action.action_type is ActionType.JOIN:
            if not payload:
                raise EncodingError("username must not be empty", field=field)
            if PROTOCOL_SEPARATOR in payload:
                raise EncodingError(
                    f"username must not contain '{PROTOCOL_SEPARATOR}'", field=field
                )

        text = f"{action.action_type.value}{PROTOCOL_SEPARATOR}{payload}"
        try:
            return text.encode(PROTOCOL_ENCODING) + self.delimiter
        except UnicodeEncodeError as e:
            raise EncodingError(f"{field} is not valid text: {e}", field=field) from e

    def encode_join(self, username: str) -> bytes:
        """Encode a join action announcing username."""
        return self.encode(ChatAction.join(username))

    def encode_message(self, body: str) -> bytes:
        """Encode a chat message action."""
        return self.encode(ChatAction.message(body))

    def decode(self, frame: bytes) -> Message:
        """
        Decode one frame (without delimiter) into a Message.

        Args:
            frame: Raw frame bytes.

        Returns:
            The decoded message.

        Raises:
            DecodeError: If the frame is not text or has no separator.
        """
        try:
            text = bytes(frame).decode(PROTOCOL_ENCODING)
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Frame is not valid {PROTOCOL_ENCODING}: {e}",
                reason=DecodeFailure.INVALID_TEXT,
                frame=bytes(frame)
            ) from e

        name, separator, body = text.partition(PROTOCOL_SEPARATOR)
        if not separator:
            raise DecodeError(
                f"Frame has no '{PROTOCOL_SEPARATOR}' separator",
                reason=DecodeFailure.MALFORMED,
                frame=bytes(frame)
            )

        if self._local_identity is not None and name == self._local_identity:
            sender = MessageSender.SELF
        else:
            sender = MessageSender.OTHER

        return Message(body=body, sender=sender, origin_name=name)
