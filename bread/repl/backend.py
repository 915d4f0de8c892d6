"""
Bread REPL - Read/print loop over a byte stream.

The backend reads one value at a time from a ByteSource and evaluates it.
Evaluation is the identity: the REPL echoes the reader's output through
the printer, which makes it a convenient way to inspect what the reader
produces. A real evaluator would replace ReplBackend.eval.
"""

import sys
import traceback
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, TextIO

from bread.config import ReplConfig
from bread.reader import ByteSource, ErrorKind, Reader, ReadError
from bread.runtime import Handle, to_string


class ResultType(Enum):
    """Type of result returned from a read/eval step."""

    VALUE = "value"
    ERROR = "error"
    END = "end"


@dataclass
class EvalResult:
    """Result of reading and evaluating one value."""

    type: ResultType
    value: Optional[Handle] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    traceback: Optional[str] = None

    def is_success(self) -> bool:
        return self.type == ResultType.VALUE

    def is_error(self) -> bool:
        return self.type == ResultType.ERROR

    def is_end(self) -> bool:
        return self.type == ResultType.END


@dataclass
class ReplState:
    """Maintains the state of a REPL session."""

    counter: int = 0
    errors: int = 0


class ReplBackend:
    """
    Frontend-agnostic read/eval step.

    Handles reading and evaluation; frontends own prompting and output.
    """

    def __init__(self, state: Optional[ReplState] = None):
        self.state = state or ReplState()

    def eval(self, form: Handle) -> Handle:
        """Evaluate a form. Identity: every value evaluates to itself."""
        return form

    def step(self, source: ByteSource) -> EvalResult:
        """Read one value from source and evaluate it."""
        try:
            form = Reader(source).read()
        except ReadError as e:
            self.state.errors += 1
            return EvalResult(
                type=ResultType.ERROR,
                error=e.message,
                error_type=e.kind.value,
                traceback=traceback.format_exc(),
            )

        if form.is_eof():
            return EvalResult(type=ResultType.END)

        value = self.eval(form)
        self.state.counter += 1
        return EvalResult(type=ResultType.VALUE, value=value)


class ReplFrontend(ABC):
    """
    Abstract base class for REPL frontends.

    Subclasses should implement the run method to provide
    specific input/output behavior.
    """

    def __init__(self, backend: Optional[ReplBackend] = None):
        self.backend = backend or ReplBackend()

    @abstractmethod
    def run(self) -> int:
        """Run the REPL frontend, returning an exit code."""
        pass


class TerminalRepl(ReplFrontend):
    """
    Terminal REPL reading bytes straight from stdin.

    A prompt is printed only when no input is already pending, so pasting
    several values on one line prints one prompt and several results.
    """

    def __init__(
        self,
        backend: Optional[ReplBackend] = None,
        config: Optional[ReplConfig] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        """
        Initialize the terminal REPL.

        Args:
            backend: Optional ReplBackend to use.
            config: Prompt, banner and error display settings.
            stdin: Binary input stream (default: sys.stdin.buffer).
            stdout: Text output stream (default: sys.stdout).
            stderr: Text error stream (default: sys.stderr).
        """
        super().__init__(backend)
        self.config = config or ReplConfig()
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.source = ByteSource(self.stdin)

    def print_result(self, result: EvalResult):
        """Print an evaluation result."""
        if result.is_error():
            print(f"Error: {result.error_type}: {result.error}", file=self.stderr)
            if result.traceback and self.config.show_traceback:
                print(result.traceback, file=self.stderr)
        elif result.value is not None:
            print(to_string(result.value), file=self.stdout)

    def run(self) -> int:
        """Run the terminal REPL."""
        if self.config.show_banner:
            print(self.config.banner, file=self.stdout)

        while True:
            if not self.source.has_pending():
                self.stdout.write(self.config.prompt)
                self.stdout.flush()

            try:
                result = self.backend.step(self.source)
            except KeyboardInterrupt:
                print(file=self.stdout)
                self.source.discard_pending()
                continue

            if result.is_end():
                print(file=self.stdout)
                return 0

            self.print_result(result)
            if result.error_type == ErrorKind.UNDERLYING_IO_FAILURE.value:
                return 1
            if result.is_error():
                # No recovery inside a token: resume at the next line
                self.source.discard_line()
            elif self.config.tidy_input:
                self.source.skip_trailing_space()


def create_repl(mode: str = "terminal", **kwargs) -> ReplFrontend:
    """
    Factory function to create a REPL frontend.

    Args:
        mode: The mode of REPL to create (only "terminal" is available).
        **kwargs: Additional arguments to pass to the frontend.
    """
    if mode == "terminal":
        return TerminalRepl(**kwargs)
    else:
        raise ValueError(f"Unknown REPL mode: {mode}")
