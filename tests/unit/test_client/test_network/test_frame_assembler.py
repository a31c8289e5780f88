"""
Unit tests for the FrameAssembler class.
"""

import pytest

from chat_core.client.network.frame_assembler import FrameAssembler
from chat_core.shared.exceptions import FrameTooLargeError


class TestFrameAssembler:
    """Test frame extraction from chunked input."""

    def setup_method(self):
        """Set up test fixtures."""
        self.assembler = FrameAssembler()

    def test_single_frame(self):
        """Test one complete frame."""
        self.assembler.feed(b"bob:hi\n")

        assert self.assembler.drain_frames() == [b"bob:hi"]
        assert self.assembler.buffered_size == 0

    def test_multiple_frames_in_one_chunk(self):
        """Test coalesced frames come out in order."""
        self.assembler.feed(b"a:1\nb:2\nc:3\n")

        assert self.assembler.drain_frames() == [b"a:1", b"b:2", b"c:3"]

    def test_partial_frame_is_buffered(self):
        """Test an undelimited tail waits for more data."""
        self.assembler.feed(b"bob:hel")

        assert self.assembler.drain_frames() == []
        assert self.assembler.buffered_size == 7
        assert len(self.assembler) == 7

    def test_frame_split_across_feeds(self):
        """Test a split frame is emitted once its delimiter arrives."""
        self.assembler.feed(b"bob:hel")
        assert self.assembler.drain_frames() == []

        self.assembler.feed(b"lo\nal")
        assert self.assembler.drain_frames() == [b"bob:hello"]

        self.assembler.feed(b"ice:x\n")
        assert self.assembler.drain_frames() == [b"alice:x"]

    def test_byte_at_a_time(self):
        """Test one-byte deliveries."""
        frames = []
        for byte in b"a:1\nb:2\n":
            self.assembler.feed(bytes([byte]))
            frames.extend(self.assembler.drain_frames())

        assert frames == [b"a:1", b"b:2"]

    def test_frames_are_not_emitted_twice(self):
        """Test draining again yields nothing new."""
        self.assembler.feed(b"a:1\n")
        self.assembler.drain_frames()

        assert self.assembler.drain_frames() == []

    def test_empty_frames(self):
        """Test consecutive delimiters produce empty frames."""
        self.assembler.feed(b"\n\na:1\n")

        assert self.assembler.drain_frames() == [b"", b"", b"a:1"]

    def test_feed_without_drain_accumulates(self):
        """Test several feeds before a drain."""
        self.assembler.feed(b"a:")
        self.assembler.feed(b"1\nb")
        self.assembler.feed(b":2\n")

        assert self.assembler.drain_frames() == [b"a:1", b"b:2"]

    def test_reset(self):
        """Test reset discards buffered bytes."""
        self.assembler.feed(b"partial")
        self.assembler.reset()

        assert self.assembler.buffered_size == 0
        self.assembler.feed(b"a:1\n")
        assert self.assembler.drain_frames() == [b"a:1"]

    def test_custom_delimiter(self):
        """Test a non-newline delimiter."""
        assembler = FrameAssembler(delimiter=b"\x00")
        assembler.feed(b"a:line\nstill\x00b:2\x00")

        assert assembler.drain_frames() == [b"a:line\nstill", b"b:2"]

    def test_invalid_arguments(self):
        """Test constructor validation."""
        with pytest.raises(ValueError):
            FrameAssembler(delimiter=b"")
        with pytest.raises(ValueError):
            FrameAssembler(max_frame_size=0)


class TestFrameSizeLimit:
    """Test the buffered-bytes cap."""

    def test_undelimited_overflow(self):
        """Test too many bytes without a delimiter fail."""
        assembler = FrameAssembler(max_frame_size=8)
        assembler.feed(b"x" * 9)

        with pytest.raises(FrameTooLargeError) as exc_info:
            assembler.drain_frames()

        assert exc_info.value.size == 9
        assert exc_info.value.limit == 8

    def test_oversized_complete_frame(self):
        """Test a delimited frame above the limit fails too."""
        assembler = FrameAssembler(max_frame_size=4)
        assembler.feed(b"abcdefgh\n")

        with pytest.raises(FrameTooLargeError):
            assembler.drain_frames()

    def test_frame_at_limit(self):
        """Test frames exactly at the limit are accepted."""
        assembler = FrameAssembler(max_frame_size=4)
        assembler.feed(b"abcd\nabcd")

        assert assembler.drain_frames() == [b"abcd"]
        assert assembler.buffered_size == 4

    def test_many_small_frames_exceeding_limit_in_total(self):
        """Test the limit applies per frame, not per chunk."""
        assembler = FrameAssembler(max_frame_size=4)
        assembler.feed(b"a:1\n" * 100)

        assert len(assembler.drain_frames()) == 100

    def test_complete_frames_survive_remainder_overflow(self):
        """Test frames completed before an undelimited overflow are kept."""
        assembler = FrameAssembler(max_frame_size=8)
        assembler.feed(b"a:1\n" + b"x" * 20)

        with pytest.raises(FrameTooLargeError) as exc_info:
            assembler.drain_frames()

        assert exc_info.value.frames == [b"a:1"]
        assert exc_info.value.size == 20
        assert assembler.buffered_size == 20

    def test_complete_frames_survive_oversized_frame(self):
        """Test frames before an oversized delimited frame are kept in order."""
        assembler = FrameAssembler(max_frame_size=8)
        assembler.feed(b"a:1\nb:2\n" + b"y" * 12 + b"\nc:3\n")

        with pytest.raises(FrameTooLargeError) as exc_info:
            assembler.drain_frames()

        assert exc_info.value.frames == [b"a:1", b"b:2"]
        assert exc_info.value.size == 12
        assert assembler.buffered_size == 12 + len(b"\nc:3\n")

    def test_chunking_does_not_change_frames_before_overflow(self):
        """Test the frames delivered before an overflow match across chunkings."""
        stream = b"bob:hi\n" + b"x" * 20

        whole = FrameAssembler(max_frame_size=8)
        whole.feed(stream)
        with pytest.raises(FrameTooLargeError) as exc_info:
            whole.drain_frames()

        split = FrameAssembler(max_frame_size=8)
        split.feed(stream[:7])
        delivered = split.drain_frames()
        split.feed(stream[7:])
        with pytest.raises(FrameTooLargeError) as split_info:
            split.drain_frames()

        assert delivered + split_info.value.frames == exc_info.value.frames
        assert exc_info.value.frames == [b"bob:hi"]
