"""
Test suite for the Bread REPL.

This module tests:
- The identity read/eval step
- Prompting only when no input is pending
- Error reporting and recovery after malformed input
"""

import io
import unittest

from bread.config import ReplConfig
from bread.reader import ByteSource
from bread.repl import ReplBackend, ReplState, ResultType, TerminalRepl, create_repl


class FailingStream(io.RawIOBase):
    """A stream whose reads always fail."""

    def readable(self):
        return True

    def readinto(self, buffer):
        raise OSError("device unplugged")


def run_repl(data: bytes, **config):
    stdout = io.StringIO()
    stderr = io.StringIO()
    repl = TerminalRepl(
        config=ReplConfig(**config),
        stdin=io.BytesIO(data),
        stdout=stdout,
        stderr=stderr,
    )
    code = repl.run()
    return code, stdout.getvalue(), stderr.getvalue()


class TestReplBackend(unittest.TestCase):
    """Test the frontend-agnostic step."""

    def test_value(self):
        backend = ReplBackend()
        result = backend.step(ByteSource.from_bytes(b"(1 2)"))
        self.assertTrue(result.is_success())
        self.assertEqual(str(result.value), "(1 2)")
        self.assertEqual(backend.state.counter, 1)
        self.assertEqual(backend.state, ReplState(counter=1, errors=0))

    def test_eval_is_identity(self):
        backend = ReplBackend()
        source = ByteSource.from_bytes(b"'x")
        result = backend.step(source)
        self.assertIs(backend.eval(result.value), result.value)

    def test_end(self):
        result = ReplBackend().step(ByteSource.from_bytes(b"  "))
        self.assertEqual(result.type, ResultType.END)
        self.assertTrue(result.is_end())

    def test_error(self):
        backend = ReplBackend()
        result = backend.step(ByteSource.from_bytes(b")"))
        self.assertTrue(result.is_error())
        self.assertEqual(result.error_type, "UnexpectedCloseParen")
        self.assertIn("ReadError", result.traceback)
        self.assertEqual(backend.state.errors, 1)
        self.assertEqual(backend.state.counter, 0)


class TestTerminalRepl(unittest.TestCase):
    """Test the terminal frontend with in-memory streams."""

    def test_session(self):
        code, out, err = run_repl(b"(1 2)\n3\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, "Welcome to Bread Scheme!\n>>> (1 2)\n3\n>>> \n")
        self.assertEqual(err, "")

    def test_several_values_on_one_line(self):
        code, out, _ = run_repl(b"a b 'c\n", show_banner=False)
        self.assertEqual(out, ">>> a\nb\n(quote c)\n>>> \n")

    def test_custom_prompt(self):
        _, out, _ = run_repl(b"x\n", prompt="bread> ", banner="hi")
        self.assertEqual(out, "hi\nbread> x\nbread> \n")

    def test_error_drops_rest_of_line(self):
        code, out, err = run_repl(b") ignored\n(1)\n", show_banner=False)
        self.assertEqual(code, 0)
        self.assertEqual(err, "Error: UnexpectedCloseParen: unexpected `)`\n")
        # The next line is already pending, so no prompt is printed before it
        self.assertEqual(out, ">>> (1)\n>>> \n")

    def test_error_resync_across_chunks(self):
        # The list straddles the first 8192-byte chunk boundary
        data = b")\n" + b"x\n" * 4094 + b"(hello world)\n"
        stdout = io.StringIO()
        stderr = io.StringIO()
        repl = TerminalRepl(
            config=ReplConfig(show_banner=False),
            stdin=io.BufferedReader(io.BytesIO(data)),
            stdout=stdout,
            stderr=stderr,
        )
        self.assertEqual(repl.run(), 0)
        self.assertEqual(stderr.getvalue().count("Error:"), 1)
        self.assertEqual(
            stdout.getvalue().replace(">>> ", ""),
            "x\n" * 4094 + "(hello world)\n\n",
        )

    def test_error_line_split_across_chunks(self):
        data = b"(a #" + b"b" * 20 + b" c)\n7\n"
        stdout = io.StringIO()
        repl = TerminalRepl(
            config=ReplConfig(show_banner=False),
            stdin=io.BytesIO(data),
            stdout=stdout,
            stderr=io.StringIO(),
        )
        repl.source = ByteSource(repl.stdin, chunk_size=4)
        self.assertEqual(repl.run(), 0)
        self.assertEqual(stdout.getvalue().replace(">>> ", ""), "7\n\n")

    def test_dot_error_keeps_next_line(self):
        _, out, err = run_repl(b"( .\n(2)\n", show_banner=False)
        self.assertIn("InvalidDotUsage", err)
        self.assertEqual(out, ">>> (2)\n>>> \n")

    def test_io_failure_ends_session(self):
        stderr = io.StringIO()
        repl = TerminalRepl(
            config=ReplConfig(show_banner=False),
            stdin=FailingStream(),
            stdout=io.StringIO(),
            stderr=stderr,
        )
        self.assertEqual(repl.run(), 1)
        self.assertEqual(
            stderr.getvalue(), "Error: UnderlyingIoFailure: input error: device unplugged\n"
        )

    def test_error_with_traceback(self):
        _, _, err = run_repl(b"(1 .", show_banner=False, show_traceback=True)
        self.assertIn("Error: UnterminatedList", err)
        self.assertIn("Traceback", err)

    def test_without_tidy_input(self):
        _, out, _ = run_repl(b"1 \n2\n", show_banner=False, tidy_input=False)
        # The newline after 2 is still pending, so no second prompt appears
        self.assertEqual(out, ">>> 1\n2\n\n")

    def test_create_repl(self):
        repl = create_repl(stdin=io.BytesIO(b""), stdout=io.StringIO())
        self.assertIsInstance(repl, TerminalRepl)
        with self.assertRaises(ValueError):
            create_repl(mode="network")


if __name__ == "__main__":
    unittest.main()
