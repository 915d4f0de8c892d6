#!/usr/bin/env python3
"""Fuzz testing for the reader and printer.

RoundTripFuzzer builds random value graphs, prints them, reads the text
back and checks the result is structurally equal. It also mutates shared
structure to check that aliases observe the change.

GarbageFuzzer feeds random byte strings to the reader and checks that it
either returns values or raises ReadError, never anything else.
"""

import random
import string
from typing import Any

from bread.reader import ByteSource, ErrorKind, Reader, ReadError, read_all
from bread.runtime import (
    Handle,
    Symbol,
    make_integer,
    make_list,
    make_nil,
    make_symbol,
    make_text,
    to_string,
)

from .fuzz import Fuzzer, pick_weighted

SYMBOL_START = string.ascii_letters + "!$%&*/:<=>?@^_~"
SYMBOL_REST = SYMBOL_START + string.digits + "+-."
# No " or \ since the printer does not escape them
TEXT_CHARS = string.ascii_letters + string.digits + " ()'.;#\t\n" + "λé"
GARBAGE_BYTES = b"()'\" .\\\t\n+-0123456789abcXYZ#;[]\xff\xc3"


def random_symbol() -> str:
    return random.choice(SYMBOL_START) + "".join(
        random.choices(SYMBOL_REST, k=random.randint(0, 8))
    )


def random_atom() -> Handle:
    choice = random.randint(0, 4)
    if choice == 0:
        return make_integer(random.randint(-(2**63), 2**63 - 1))
    elif choice == 1:
        return make_integer(random.randint(-100, 100))
    elif choice == 2:
        return make_symbol(random_symbol())
    elif choice == 3:
        return make_text("".join(random.choices(TEXT_CHARS, k=random.randint(0, 12))))
    else:
        return make_nil()


def random_value(depth: int = 0) -> Handle:
    """Generate a random value, nesting lists up to a few levels deep."""
    if depth > 4 or random.random() < 0.4:
        return random_atom()
    items = [random_value(depth + 1) for _ in range(random.randint(0, 6))]
    if items and random.random() < 0.2:
        tail = random_atom()
        if not tail.is_nil():
            return make_list(items, tail)
    return make_list(items)


class RoundTripFuzzer(Fuzzer):
    """Checks print/read round trips and aliasing."""

    name = "RoundTrip"

    def __init__(self):
        super().__init__()
        self.values: list[Handle] = []
        self.max_length = 0

    def reset(self):
        self.values = []

    def get_stats(self) -> dict[str, Any]:
        return {"Longest printed value": self.max_length}

    def do_round_trip(self):
        value = random_value()
        text = to_string(value)
        self.max_length = max(self.max_length, len(text))
        forms = read_all(text)
        assert len(forms) == 1, f"{text!r} read as {len(forms)} values"
        assert forms[0] == value, f"round trip changed {text!r} to {to_string(forms[0])!r}"
        self.values.append(value)
        self.record_op("round_trip")

    def do_read_sequence(self):
        values = [random_value() for _ in range(random.randint(1, 5))]
        sep = random.choice([" ", "\n", "\t", "  \n "])
        text = sep.join(to_string(v) for v in values)
        assert read_all(text) == values, f"sequence mismatch for {text!r}"
        self.record_op("sequence")

    def do_alias(self):
        shared = make_symbol(random_symbol())
        holder = make_list([random_value(), shared, random_value()])
        alias = shared.share()
        new_name = random_symbol()
        alias.set(Symbol(new_name))
        middle = list(holder.iter_list())[1]
        assert middle.same(shared), "list element lost its identity"
        assert to_string(middle) == new_name, "mutation not visible through alias"
        self.record_op("alias")

    def do_random_operation(self):
        pick_weighted(
            [
                (self.do_round_trip, 60),
                (self.do_read_sequence, 25),
                (self.do_alias, 15),
            ]
        )()

    def check_invariants(self):
        for value in self.values[-3:]:
            assert read_all(to_string(value)) == [value], "stored value changed"


class GarbageFuzzer(Fuzzer):
    """Feeds random bytes to the reader."""

    name = "Garbage"

    def __init__(self):
        super().__init__()
        self.last_error: ReadError | None = None

    def reset(self):
        self.last_error = None

    def do_random_operation(self):
        data = bytes(random.choices(GARBAGE_BYTES, k=random.randint(0, 30)))
        reader = Reader(ByteSource.from_bytes(data))
        try:
            for value in reader.read_all():
                # Whatever was read must print and read back cleanly
                # unless it contains text with quote or backslash bytes
                text = to_string(value)
                if '"' not in text:
                    assert read_all(text) == [value], f"{data!r} gave {text!r}"
            self.record_op("ok")
        except ReadError as e:
            self.last_error = e
            self.record_op(e.kind.value)

    def check_invariants(self):
        if self.last_error is not None:
            assert self.last_error.message, "error without a message"
            assert self.last_error.kind is not ErrorKind.PUSHBACK_OVERFLOW, (
                "reader overflowed its pushback buffer"
            )
