"""
bread.repl - Interactive read/print loop

Modules:
- backend.py: Read/eval step (identity evaluation) and the terminal frontend
"""

from bread.repl.backend import (
    EvalResult,
    ReplBackend,
    ReplFrontend,
    ReplState,
    ResultType,
    TerminalRepl,
    create_repl,
)

__all__ = [
    "ReplBackend",
    "ReplFrontend",
    "ReplState",
    "TerminalRepl",
    "EvalResult",
    "ResultType",
    "create_repl",
]
