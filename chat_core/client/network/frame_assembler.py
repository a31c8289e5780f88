"""
Frame Assembler

Reassembles delimited frames from an arbitrarily chunked byte stream.
"""

from typing import List, Optional

from chat_core.shared.constants import MESSAGE_DELIMITER, DEFAULT_MAX_FRAME_SIZE
from chat_core.shared.exceptions import FrameTooLargeError


class FrameAssembler:
    """
    Buffers raw bytes and yields complete frames in arrival order.

    Partial frames stay buffered until their delimiter arrives. Not safe
    for concurrent use; the owning connection serialises access.
    """

    def __init__(self, delimiter: bytes = MESSAGE_DELIMITER,
                 max_frame_size: int = DEFAULT_MAX_FRAME_SIZE) -> None:
        """
        Initialize the assembler.

        Args:
            delimiter: Single byte separating frames.
            max_frame_size: Largest frame, or undelimited remainder, accepted.
        """
        if len(delimiter) != 1:
            raise ValueError("delimiter must be exactly one byte")
        if max_frame_size < 1:
            raise ValueError("max_frame_size must be positive")
        self.delimiter = delimiter
        self.max_frame_size = max_frame_size
        self._buffer = bytearray()

    def feed(self, data: bytes) -> None:
        """Append received bytes to the buffer."""
        self._buffer.extend(data)

    def drain_frames(self) -> List[bytes]:
        """
        Extract every complete frame currently buffered.

        Returns:
            Frames without their delimiters, oldest first.

        Raises:
            FrameTooLargeError: If a frame or the pending remainder exceeds
                max_frame_size. Frames completed before the oversized one
                are carried on the error and removed from the buffer.
        """
        frames: List[bytes] = []
        start = 0
        error: Optional[FrameTooLargeError] = None
        while True:
            index = self._buffer.find(self.delimiter, start)
            if index < 0:
                break
            if index - start > self.max_frame_size:
                error = FrameTooLargeError(
                    f"Frame of {index - start} bytes exceeds limit of {self.max_frame_size}",
                    size=index - start,
                    limit=self.max_frame_size
                )
                break
            frames.append(bytes(self._buffer[start:index]))
            start = index + 1

        if start:
            del self._buffer[:start]

        if error is None and len(self._buffer) > self.max_frame_size:
            error = FrameTooLargeError(
                f"{len(self._buffer)} bytes buffered without a delimiter "
                f"(limit {self.max_frame_size})",
                size=len(self._buffer),
                limit=self.max_frame_size
            )

        if error is not None:
            error.frames = frames
            raise error
        return frames

    @property
    def buffered_size(self) -> int:
        """Number of bytes waiting for a delimiter."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard all buffered bytes."""
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)
