"""
bread.cli - Bread Command Line Interface

This module provides the main CLI entry point for Bread with subcommand support:

- bread                Start the interactive REPL
- bread repl           Start the interactive REPL
- bread read FILE...   Read every value in each file and print it back
- bread check FILE...  Report whether each file reads cleanly
- bread -c CODE        Read and print every value in CODE

Global options go before the subcommand:
- --config FILE        Use this .breadrc instead of searching for one
- --prompt TEXT        Override the REPL prompt
- --no-banner          Do not print the REPL banner
- --verbose            Print tracebacks along with error messages
"""

import argparse
import sys
import traceback
from typing import BinaryIO, Optional


def _report_error(e: Exception, verbose: bool, prefix: str = "") -> None:
    from bread.reader import ReadError

    if isinstance(e, ReadError):
        print(f"Error: {prefix}{e.kind.value}: {e.message}", file=sys.stderr)
    else:
        print(f"Error: {prefix}{e}", file=sys.stderr)
    if verbose:
        traceback.print_exc()


def _load_config(args: argparse.Namespace):
    """Load the REPL config and apply command line overrides."""
    from bread.config import load_config

    config = load_config(args.config)
    if args.prompt is not None:
        config.prompt = args.prompt
    if args.no_banner:
        config.show_banner = False
    if args.verbose:
        config.show_traceback = True
    return config


def _open_input(path: str) -> BinaryIO:
    if path == "-":
        return sys.stdin.buffer
    return open(path, "rb")


def cmd_repl(args: argparse.Namespace) -> int:
    """Start the interactive REPL."""
    from bread.repl import create_repl

    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError) as e:
        _report_error(e, args.verbose)
        return 1

    repl_instance = create_repl(mode="terminal", config=config)
    return repl_instance.run()


def cmd_read(args: argparse.Namespace) -> int:
    """Read every value in each file and print it on its own line."""
    from bread.reader import ByteSource, Reader, ReadError
    from bread.runtime import to_string

    for path in args.files:
        try:
            stream = _open_input(path)
        except OSError as e:
            _report_error(e, args.verbose)
            return 1
        try:
            for value in Reader(ByteSource(stream)).read_all():
                print(to_string(value))
        except ReadError as e:
            _report_error(e, args.verbose, prefix=f"{path}: ")
            return 1
        finally:
            if stream is not sys.stdin.buffer:
                stream.close()
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Read every value in each file and report the outcome per file."""
    from bread.reader import ByteSource, Reader, ReadError

    failed = 0
    for path in args.files:
        try:
            stream = _open_input(path)
        except OSError as e:
            _report_error(e, args.verbose)
            failed += 1
            continue
        try:
            count = sum(1 for _ in Reader(ByteSource(stream)).read_all())
            print(f"{path}: ok ({count} values)")
        except ReadError as e:
            _report_error(e, args.verbose, prefix=f"{path}: ")
            failed += 1
        finally:
            if stream is not sys.stdin.buffer:
                stream.close()
    return 1 if failed else 0


def cmd_exec_code(code: str, verbose: bool = False) -> int:
    """Read and print every value in code."""
    from bread.reader import ReadError, read_all
    from bread.runtime import to_string

    try:
        values = read_all(code)
    except ReadError as e:
        _report_error(e, verbose)
        return 1
    for value in values:
        print(to_string(value))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bread",
        description="Bread - a streaming S-expression reader and REPL",
    )
    parser.add_argument(
        "-c",
        "--command",
        metavar="CODE",
        help="Read and print every value in CODE",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Path to a .breadrc file (default: search upward from cwd)",
    )
    parser.add_argument("--prompt", help="REPL prompt, overrides .breadrc")
    parser.add_argument(
        "--no-banner", action="store_true", help="Do not print the REPL banner"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print tracebacks on errors"
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    subparsers.add_parser("repl", help="Start the interactive REPL")

    read_parser = subparsers.add_parser(
        "read", help="Read every value in FILES and print it back"
    )
    read_parser.add_argument("files", nargs="+", metavar="FILE", help="Input files, - for stdin")

    check_parser = subparsers.add_parser(
        "check", help="Report whether each file reads without errors"
    )
    check_parser.add_argument("files", nargs="+", metavar="FILE", help="Input files, - for stdin")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the Bread CLI. Calls sys.exit with return code."""
    sys.exit(_main(argv))


def _main(argv: Optional[list[str]] = None) -> int:
    """Internal main that returns exit code."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.subcommand == "repl":
        return cmd_repl(args)
    elif args.subcommand == "read":
        return cmd_read(args)
    elif args.subcommand == "check":
        return cmd_check(args)

    if args.command is not None:
        return cmd_exec_code(args.command, args.verbose)

    # No arguments - start REPL
    return cmd_repl(args)


if __name__ == "__main__":
    main()
