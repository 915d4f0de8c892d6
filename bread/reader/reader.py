"""
bread.reader.reader - Streaming S-expression reader

The Reader turns bytes from a ByteSource into Handles, one complete value
per read() call. It is a single-pass state machine over bytes; nested
lists and quoted values are read by calling read() recursively on the same
source.

Grammar summary:
- ( ... )        list, Nil when empty
- ( a b . c )    dotted list; the dot must be followed by a space byte
- 'x             shorthand for (quote x)
- "..."          text; a backslash makes the next byte literal
- [+-]digits     integer; any other symbol byte turns it into a symbol (1+)
- other          symbol made of letters, digits and ! $ % & * + - . / : < = > ? @ ^ _ ~

There is no nesting limit. Very deep input ends in RecursionError.
"""

from enum import Enum, auto
from typing import Iterator, Union

from bread.reader.errors import ErrorKind, ReadError, describe_byte
from bread.reader.source import ByteSource
from bread.runtime.types import (
    INT64_MAX,
    INT64_MIN,
    Handle,
    make_eof,
    make_integer,
    make_list,
    make_nil,
    make_symbol,
    make_text,
)

# =============================================================================
# Byte Classes
# =============================================================================

SPACE_BYTES = frozenset(b" \t\n")
DELIMITERS = SPACE_BYTES | frozenset(b"()")
DIGITS = frozenset(b"0123456789")
SIGNS = frozenset(b"+-")
SYMBOL_BYTES = (
    frozenset(b"abcdefghijklmnopqrstuvwxyz")
    | frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZ")
    | DIGITS
    | frozenset(b"!$%&*+-./:<=>?@^_~")
)

OPEN_PAREN = ord("(")
CLOSE_PAREN = ord(")")
DOUBLE_QUOTE = ord('"')
QUOTE = ord("'")
BACKSLASH = ord("\\")
DOT = ord(".")


class _State(Enum):
    START = auto()
    LIST = auto()
    MAYBE_DOT = auto()
    LIST_END = auto()
    INT = auto()
    SYMBOL = auto()
    STRING = auto()


# =============================================================================
# Reader
# =============================================================================


class Reader:
    """
    Reads values from a ByteSource.

    The source is held by reference and shared by every recursive call, so
    bytes pushed back by an inner read are seen by the outer one.
    """

    def __init__(self, source: ByteSource):
        self.source = source

    def read(self) -> Handle:
        """
        Read the next value.

        Returns:
            A Handle to the value, or to EndOfInput if the source ran out
            before any part of a value was seen.

        Raises:
            ReadError: If the input is malformed or the stream fails.
        """
        source = self.source
        state = _State.START
        items: list[Handle] = []
        buf = bytearray()

        while True:
            byte = source.next_byte()

            if state is _State.START:
                if byte is None:
                    return make_eof()
                if byte in SPACE_BYTES:
                    continue
                if byte == OPEN_PAREN:
                    state = _State.LIST
                elif byte == CLOSE_PAREN:
                    raise ReadError(
                        ErrorKind.UNEXPECTED_CLOSE_PAREN, "unexpected `)`", byte
                    )
                elif byte == DOUBLE_QUOTE:
                    state = _State.STRING
                elif byte == QUOTE:
                    return self._read_quoted()
                elif byte in DIGITS or byte in SIGNS:
                    buf.append(byte)
                    state = _State.INT
                elif byte in SYMBOL_BYTES:
                    buf.append(byte)
                    state = _State.SYMBOL
                else:
                    raise _unexpected(byte)

            elif state is _State.LIST:
                if byte is None:
                    raise _unterminated_list()
                if byte in SPACE_BYTES:
                    continue
                if byte == CLOSE_PAREN:
                    items.append(make_nil())
                    return _build_list(items)
                if byte == DOT:
                    state = _State.MAYBE_DOT
                    continue
                source.push_back(byte)
                items.append(self.read())

            elif state is _State.MAYBE_DOT:
                if byte is None:
                    raise _unterminated_list()
                if byte in SPACE_BYTES:
                    if not items:
                        # Leave the newline for the REPL to resync on
                        source.push_back(byte)
                        raise ReadError(
                            ErrorKind.INVALID_DOT_USAGE,
                            "`.` must follow at least one list element",
                            DOT,
                        )
                    tail = self.read()
                    if tail.is_eof():
                        raise _unterminated_list()
                    items.append(tail)
                    state = _State.LIST_END
                else:
                    # Not a dotted tail: re-read `.` and this byte as a value
                    source.push_back(byte)
                    source.push_back(DOT)
                    items.append(self.read())
                    state = _State.LIST

            elif state is _State.LIST_END:
                if byte is None:
                    raise _unterminated_list()
                if byte in SPACE_BYTES:
                    continue
                if byte != CLOSE_PAREN:
                    raise ReadError(
                        ErrorKind.EXPECTED_CLOSE_PAREN,
                        f"expected `)` after dotted tail, got {describe_byte(byte)}",
                        byte,
                    )
                return _build_list(items)

            elif state is _State.INT:
                if byte is None:
                    return _make_integer(buf)
                if byte in DELIMITERS:
                    source.push_back(byte)
                    return _make_integer(buf)
                if byte in DIGITS:
                    buf.append(byte)
                elif byte in SYMBOL_BYTES:
                    buf.append(byte)
                    state = _State.SYMBOL
                else:
                    raise _unexpected(byte)

            elif state is _State.SYMBOL:
                if byte is None:
                    return _make_symbol(buf)
                if byte in DELIMITERS:
                    source.push_back(byte)
                    return _make_symbol(buf)
                if byte in SYMBOL_BYTES:
                    buf.append(byte)
                else:
                    raise _unexpected(byte)

            else:  # _State.STRING
                if byte is None:
                    raise _unterminated_string()
                if byte == DOUBLE_QUOTE:
                    return _make_text(buf)
                if byte == BACKSLASH:
                    byte = source.next_byte()
                    if byte is None:
                        raise _unterminated_string()
                buf.append(byte)

    def _read_quoted(self) -> Handle:
        value = self.read()
        if value.is_eof():
            raise ReadError(
                ErrorKind.UNEXPECTED_END_OF_INPUT, "expected a value after `'`"
            )
        return make_list([make_symbol("quote"), value])

    def read_all(self) -> Iterator[Handle]:
        """Yield values until the source is exhausted."""
        while True:
            value = self.read()
            if value.is_eof():
                return
            yield value


# =============================================================================
# Value Construction
# =============================================================================


def _build_list(items: list[Handle]) -> Handle:
    """Build a list whose last accumulated item is the tail."""
    return make_list(items[:-1], items[-1])


def _make_integer(buf: bytearray) -> Handle:
    if len(buf) == 1 and buf[0] in SIGNS:
        # A lone + or - is a symbol
        return make_symbol(chr(buf[0]))
    value = int(buf.decode("ascii"))
    if not INT64_MIN <= value <= INT64_MAX:
        raise ReadError(
            ErrorKind.INTEGER_OUT_OF_RANGE,
            f"integer {buf.decode('ascii')} does not fit in 64 bits",
        )
    return make_integer(value)


def _make_symbol(buf: bytearray) -> Handle:
    if buf == b".":
        raise ReadError(ErrorKind.INVALID_DOT_USAGE, "`.` is not a valid symbol", DOT)
    return make_symbol(_decode(buf, "symbol"))


def _make_text(buf: bytearray) -> Handle:
    return make_text(_decode(buf, "string"))


def _decode(buf: bytearray, what: str) -> str:
    try:
        return buf.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ReadError(
            ErrorKind.INVALID_TEXT_ENCODING, f"{what} is not valid UTF-8: {e}"
        ) from e


def _unexpected(byte: int) -> ReadError:
    return ReadError(
        ErrorKind.UNEXPECTED_BYTE, f"unexpected {describe_byte(byte)}", byte
    )


def _unterminated_list() -> ReadError:
    return ReadError(ErrorKind.UNTERMINATED_LIST, "unexpected end of input in list")


def _unterminated_string() -> ReadError:
    return ReadError(
        ErrorKind.UNTERMINATED_STRING, "unexpected end of input in string"
    )


# =============================================================================
# Convenience Functions
# =============================================================================


def _source_for(data: Union[str, bytes]) -> ByteSource:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return ByteSource.from_bytes(data)


def read(data: Union[str, bytes]) -> Handle:
    """Read the first value of data (EndOfInput if there is none)."""
    return Reader(_source_for(data)).read()


def read_all(data: Union[str, bytes]) -> list[Handle]:
    """Read every value of data."""
    return list(Reader(_source_for(data)).read_all())


__all__ = [
    "Reader",
    "read",
    "read_all",
    "SPACE_BYTES",
    "DELIMITERS",
    "SYMBOL_BYTES",
]
