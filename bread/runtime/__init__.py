"""
bread.runtime - Values shared by the reader, printer and REPL

Modules:
- types.py: Object kinds, Handle and the make_* constructors
- printer.py: Text rendering of Handles
"""

from bread.runtime.printer import to_string, write
from bread.runtime.types import (
    EOF,
    INT64_MAX,
    INT64_MIN,
    NIL,
    EndOfInput,
    Handle,
    Integer,
    Nil,
    Object,
    Pair,
    Symbol,
    Text,
    make_eof,
    make_integer,
    make_list,
    make_nil,
    make_pair,
    make_symbol,
    make_text,
)

__all__ = [
    # Object model
    "Object",
    "Nil",
    "Pair",
    "Symbol",
    "Integer",
    "Text",
    "EndOfInput",
    "Handle",
    "NIL",
    "EOF",
    "INT64_MIN",
    "INT64_MAX",
    # Constructors
    "make_nil",
    "make_eof",
    "make_pair",
    "make_symbol",
    "make_integer",
    "make_text",
    "make_list",
    # Printer
    "write",
    "to_string",
]
