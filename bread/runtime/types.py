"""
bread.runtime.types - Object model for Bread

This module contains the values produced by the reader and consumed by the
printer and REPL:
- Object: Base class of the closed set of value kinds
- Nil, Pair, Symbol, Integer, Text, EndOfInput: The value kinds
- Handle: A shared, mutable reference to an Object
- make_*: Constructors returning fresh Handles
- make_list: Builds a proper or dotted list from a sequence of Handles

Handles compare structurally: two Handles are equal when the Objects they
reference are equal, recursively. Several Handles may alias one Object
(see Handle.share), and a change made through one alias is visible
through all of them.

Reference cycles are possible (set_rest can point a list back at itself).
Nothing here detects or breaks cycles, and printing or comparing a cyclic
graph does not terminate.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Object:
    """Base class for every value kind."""

    __slots__ = ()


@dataclass(frozen=True)
class Nil(Object):
    """The empty list, also the terminator of a proper list."""


@dataclass(frozen=True)
class EndOfInput(Object):
    """Returned by the reader when the source is exhausted between values."""


@dataclass(frozen=True)
class Symbol(Object):
    """An identifier, stored as its literal spelling."""

    text: str


@dataclass(frozen=True)
class Integer(Object):
    """A signed 64-bit integer."""

    value: int

    def __post_init__(self):
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise OverflowError(f"{self.value} does not fit in a signed 64-bit integer")


@dataclass(frozen=True)
class Text(Object):
    """A string literal with its escapes already removed."""

    value: str


@dataclass(eq=False)
class Pair(Object):
    """
    A cons cell.

    Both slots hold Handles, so a pair's elements can be shared with other
    structure and replaced in place.

    Attributes:
        first: Handle to the first element (the car)
        rest: Handle to the remainder of the chain (the cdr)
    """

    first: "Handle"
    rest: "Handle"

    def __eq__(self, other):
        if not isinstance(other, Pair):
            return NotImplemented
        return _objects_equal(self, other)

    __hash__ = None  # type: ignore[assignment]


NIL = Nil()
EOF = EndOfInput()


def _objects_equal(a: Object, b: Object) -> bool:
    # Walk the rest chain in a loop so long lists do not recurse per element.
    while isinstance(a, Pair) and isinstance(b, Pair):
        if a is b:
            return True
        if a.first != b.first:
            return False
        a = a.rest.get()
        b = b.rest.get()
    return a == b


class _Cell:
    __slots__ = ("obj",)

    def __init__(self, obj: Object):
        self.obj = obj


class Handle:
    """
    A shared reference to an Object.

    A Handle is cheap to copy with share(); the copy points at the same
    cell, so set() through either one is seen by both.
    """

    __slots__ = ("_cell",)

    def __init__(self, obj: Object):
        if not isinstance(obj, Object):
            raise TypeError(f"Handle requires an Object, got {type(obj).__name__}")
        self._cell = _Cell(obj)

    def get(self) -> Object:
        """Return the referenced Object."""
        return self._cell.obj

    def set(self, obj: Object) -> None:
        """Replace the referenced Object for every alias of this Handle."""
        if not isinstance(obj, Object):
            raise TypeError(f"Handle requires an Object, got {type(obj).__name__}")
        self._cell.obj = obj

    def share(self) -> "Handle":
        """Return a new Handle aliasing the same Object."""
        alias = Handle.__new__(Handle)
        alias._cell = self._cell
        return alias

    def same(self, other: "Handle") -> bool:
        """True if both Handles alias the same cell (identity, not structure)."""
        return self._cell is other._cell

    # -- kind predicates ------------------------------------------------------

    def is_nil(self) -> bool:
        return isinstance(self._cell.obj, Nil)

    def is_pair(self) -> bool:
        return isinstance(self._cell.obj, Pair)

    def is_eof(self) -> bool:
        return isinstance(self._cell.obj, EndOfInput)

    # -- pair access ----------------------------------------------------------

    def _pair(self) -> Pair:
        obj = self._cell.obj
        if not isinstance(obj, Pair):
            raise TypeError(f"expected a pair, got {type(obj).__name__}")
        return obj

    @property
    def first(self) -> "Handle":
        return self._pair().first

    @property
    def rest(self) -> "Handle":
        return self._pair().rest

    def set_first(self, value: "Handle") -> None:
        self._pair().first = value

    def set_rest(self, value: "Handle") -> None:
        self._pair().rest = value

    def iter_list(self) -> Iterator["Handle"]:
        """
        Iterate over the elements of a list.

        Works for proper and dotted lists; the atom terminating a dotted
        list is not yielded (see tail()). A non-list Handle yields nothing.
        """
        obj = self._cell.obj
        while isinstance(obj, Pair):
            yield obj.first
            obj = obj.rest.get()

    def tail(self) -> "Handle":
        """Return the Handle that terminates the pair chain starting here."""
        node = self
        while isinstance(node._cell.obj, Pair):
            node = node._cell.obj.rest
        return node

    # -- comparison and display -----------------------------------------------

    def __eq__(self, other):
        if not isinstance(other, Handle):
            return NotImplemented
        return _objects_equal(self._cell.obj, other._cell.obj)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self):
        from bread.runtime.printer import to_string

        return to_string(self)

    def __repr__(self):
        if self.is_eof():
            return "Handle(#<eof>)"
        return f"Handle({self})"


# =============================================================================
# Constructors
# =============================================================================


def make_nil() -> Handle:
    return Handle(NIL)


def make_eof() -> Handle:
    return Handle(EOF)


def make_pair(first: Handle, rest: Handle) -> Handle:
    return Handle(Pair(first, rest))


def make_symbol(text: str) -> Handle:
    return Handle(Symbol(text))


def make_integer(value: int) -> Handle:
    return Handle(Integer(value))


def make_text(value: str) -> Handle:
    return Handle(Text(value))


def make_list(items: Iterable[Handle], tail: Optional[Handle] = None) -> Handle:
    """
    Build a list from items, back to front.

    With no tail the list is proper (ends in Nil). Any other tail makes a
    dotted list. An empty items sequence returns the tail itself.
    """
    result = tail if tail is not None else make_nil()
    for item in reversed(list(items)):
        result = make_pair(item, result)
    return result


__all__ = [
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
    "make_nil",
    "make_eof",
    "make_pair",
    "make_symbol",
    "make_integer",
    "make_text",
    "make_list",
]
