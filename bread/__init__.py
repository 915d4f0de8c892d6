"""
bread - A streaming S-expression reader

Packages:
- reader: ByteSource and the Reader state machine
- runtime: Object model (Handle, Pair, Symbol, ...) and the printer
- repl: Identity-evaluating read/print loop
"""

from bread.reader import ReadError, Reader, read, read_all
from bread.runtime import Handle, to_string

__version__ = "0.1.0"

__all__ = ["Reader", "ReadError", "read", "read_all", "Handle", "to_string"]
