"""
bread.reader.errors - Read error kinds

Every malformed input aborts the read in progress with a ReadError. There
is no resynchronisation inside a token; callers decide what to do next
(the REPL drops the rest of the line, the file commands stop).

Clean end of input between values is not an error: the reader returns an
EndOfInput value instead.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """The reasons a read can fail."""

    UNEXPECTED_CLOSE_PAREN = "UnexpectedCloseParen"
    EXPECTED_CLOSE_PAREN = "ExpectedCloseParen"
    UNTERMINATED_LIST = "UnterminatedList"
    UNTERMINATED_STRING = "UnterminatedString"
    INVALID_DOT_USAGE = "InvalidDotUsage"
    INVALID_TEXT_ENCODING = "InvalidTextEncoding"
    INTEGER_OUT_OF_RANGE = "IntegerOutOfRange"
    UNEXPECTED_BYTE = "UnexpectedByte"
    UNEXPECTED_END_OF_INPUT = "UnexpectedEndOfInput"
    UNDERLYING_IO_FAILURE = "UnderlyingIoFailure"

    # Internal contract violation, not caused by the input text
    PUSHBACK_OVERFLOW = "PushbackOverflow"


class ReadError(Exception):
    """Exception raised when the current value cannot be read."""

    def __init__(self, kind: ErrorKind, message: str, byte: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.byte = byte

    def __str__(self):
        return f"{self.kind.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for diagnostics output."""
        error: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.byte is not None:
            error["byte"] = self.byte
        return error


class PushbackOverflowError(ReadError):
    """Raised when more bytes are pushed back than the buffer can hold."""

    def __init__(self, byte: int, capacity: int):
        super().__init__(
            ErrorKind.PUSHBACK_OVERFLOW,
            f"cannot push back {describe_byte(byte)}: buffer already holds {capacity} bytes",
            byte,
        )
        self.capacity = capacity


def describe_byte(byte: int) -> str:
    """Render a byte for an error message, e.g. `)` or `\\xff`."""
    return "`" + repr(bytes([byte]))[2:-1] + "`"


__all__ = ["ErrorKind", "ReadError", "PushbackOverflowError", "describe_byte"]
