"""
bread.runtime.printer - Render Bread values as text

The printer is the reader's dual. Output rules:
- Nil prints as ()
- Integer prints in decimal, Symbol verbatim
- Text prints between double quotes with no re-escaping, so a string
  holding " or \\ will not read back to the same value
- EndOfInput prints nothing
- Pairs print as (a b c), or (a b . c) when the chain ends in an atom
"""

import io
from typing import TextIO

from bread.runtime.types import (
    EndOfInput,
    Handle,
    Integer,
    Nil,
    Object,
    Pair,
    Symbol,
    Text,
)


def write(handle: Handle, out: TextIO) -> None:
    """Write the text form of handle to out."""
    _write_object(handle.get(), out)


def _write_object(obj: Object, out: TextIO) -> None:
    if isinstance(obj, Pair):
        _write_pair(obj, out)
    elif isinstance(obj, Nil):
        out.write("()")
    elif isinstance(obj, Integer):
        out.write(str(obj.value))
    elif isinstance(obj, Symbol):
        out.write(obj.text)
    elif isinstance(obj, Text):
        out.write(f'"{obj.value}"')
    elif isinstance(obj, EndOfInput):
        pass
    else:
        raise TypeError(f"cannot print {type(obj).__name__}")


def _write_pair(pair: Pair, out: TextIO) -> None:
    out.write("(")
    write(pair.first, out)
    rest = pair.rest.get()
    while isinstance(rest, Pair):
        out.write(" ")
        write(rest.first, out)
        rest = rest.rest.get()
    if not isinstance(rest, Nil):
        out.write(" . ")
        _write_object(rest, out)
    out.write(")")


def to_string(handle: Handle) -> str:
    """Return the text form of handle."""
    out = io.StringIO()
    write(handle, out)
    return out.getvalue()


__all__ = ["write", "to_string"]
