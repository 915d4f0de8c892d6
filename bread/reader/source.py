"""
bread.reader.source - Byte source with pushback

ByteSource hands the reader one byte at a time from a binary stream and
lets it push back up to PUSHBACK_CAPACITY bytes it has consumed but not
used. One slot serves ordinary one-byte lookahead; the second is needed
when the reader backs out of a speculative dotted-tail decision and
re-queues both the byte it looked at and the `.` before it.

Input is pulled in chunks with read1() when the stream offers it, so only
bytes that are already available are taken. has_pending() reports whether
any of those are still unread, which the REPL uses to decide whether to
show a prompt.
"""

import io
from typing import BinaryIO, Optional

from bread.reader.errors import ErrorKind, PushbackOverflowError, ReadError

PUSHBACK_CAPACITY = 2
CHUNK_SIZE = 8192

SPACE = 0x20
NEWLINE = 0x0A


class ByteSource:
    """A pull-based byte stream with a small pushback buffer."""

    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE):
        """
        Initialize the source.

        Args:
            stream: Binary stream to read from (e.g. sys.stdin.buffer)
            chunk_size: Maximum number of bytes taken from the stream at once
        """
        self.stream = stream
        self.chunk_size = chunk_size
        self._buffer = b""
        self._pos = 0
        # Most recently pushed byte is last
        self._pushback: list[int] = []

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteSource":
        """Create a source over an in-memory buffer."""
        return cls(io.BytesIO(data))

    def _fill(self) -> bool:
        """Refill the chunk buffer. Returns False at end of stream."""
        read1 = getattr(self.stream, "read1", None)
        try:
            if read1 is not None:
                chunk = read1(self.chunk_size)
            else:
                chunk = self.stream.read(1)
        except OSError as e:
            raise ReadError(ErrorKind.UNDERLYING_IO_FAILURE, f"input error: {e}") from e
        if not chunk:
            return False
        self._buffer = chunk
        self._pos = 0
        return True

    def next_byte(self) -> Optional[int]:
        """Return the next byte, or None at end of stream."""
        if self._pushback:
            return self._pushback.pop()
        if self._pos >= len(self._buffer) and not self._fill():
            return None
        byte = self._buffer[self._pos]
        self._pos += 1
        return byte

    def push_back(self, byte: int) -> None:
        """Make byte the next value next_byte() returns."""
        if len(self._pushback) >= PUSHBACK_CAPACITY:
            raise PushbackOverflowError(byte, PUSHBACK_CAPACITY)
        self._pushback.append(byte)

    def has_pending(self) -> bool:
        """True if bytes are available without reading from the stream."""
        return bool(self._pushback) or self._pos < len(self._buffer)

    def skip_trailing_space(self) -> None:
        """
        Drop pending spaces up to and including the first newline.

        Stops early at any other byte, which is pushed back. Only bytes that
        are already pending are looked at, so this never blocks.
        """
        while self.has_pending():
            byte = self.next_byte()
            if byte == SPACE:
                continue
            if byte is not None and byte != NEWLINE:
                self.push_back(byte)
            return

    def discard_line(self) -> int:
        """
        Drop bytes up to and including the next newline.

        Reads from the stream when the newline is not pending yet, so a line
        split across chunks is dropped whole and the next read starts at the
        beginning of a line. Stops at end of stream. Returns how many bytes
        were dropped.
        """
        dropped = 0
        while True:
            byte = self.next_byte()
            if byte is None:
                return dropped
            dropped += 1
            if byte == NEWLINE:
                return dropped

    def discard_pending(self) -> int:
        """Drop every pending byte without blocking. Returns how many were dropped."""
        dropped = len(self._pushback) + len(self._buffer) - self._pos
        self._pushback.clear()
        self._buffer = b""
        self._pos = 0
        return dropped


__all__ = ["ByteSource", "PUSHBACK_CAPACITY", "CHUNK_SIZE"]
