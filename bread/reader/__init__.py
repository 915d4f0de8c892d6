"""
bread.reader - Byte stream to value reader

Modules:
- source.py: ByteSource, a byte stream with a two-byte pushback buffer
- reader.py: Reader, the state machine producing one value per read()
- errors.py: ErrorKind and the ReadError exceptions
"""

from bread.reader.errors import ErrorKind, PushbackOverflowError, ReadError
from bread.reader.reader import Reader, read, read_all
from bread.reader.source import PUSHBACK_CAPACITY, ByteSource

__all__ = [
    "ByteSource",
    "PUSHBACK_CAPACITY",
    "Reader",
    "read",
    "read_all",
    "ErrorKind",
    "ReadError",
    "PushbackOverflowError",
]
