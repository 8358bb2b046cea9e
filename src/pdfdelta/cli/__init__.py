"""Command-line interface for pdfdelta.

Usage::

    pdfdelta compare baseline.pdf revised.pdf [--format unified|html|json] [-o FILE]
    pdfdelta render baseline.pdf revised.pdf --output-dir previews/ [--zoom 1.5]

Run ``pdfdelta <command> --help`` for the options of each command.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import sys

from pdfdelta.cli.builder import EXIT_SUCCESS, EXIT_VALIDATION_ERROR
from pdfdelta.cli.commands import COMMANDS, dispatch_command


def create_parser() -> argparse.ArgumentParser:
    """Create the top-level parser used for help, version and unknown commands."""
    from pdfdelta import __version__

    epilog = "commands:\n" + "\n".join(f"  {name:<10}{help_text}" for name, help_text in COMMANDS.items())
    parser = argparse.ArgumentParser(
        prog="pdfdelta",
        description="Position-aware comparison of PDF documents",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", choices=list(COMMANDS), help="Command to run")
    parser.add_argument("--version", action="version", version=f"pdfdelta {__version__}")
    return parser


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return an exit code."""
    if args is None:
        args = sys.argv[1:]

    result = dispatch_command(args)
    if result is not None:
        return result

    parser = create_parser()
    try:
        parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_SUCCESS

    parser.print_help(sys.stderr)
    return EXIT_VALIDATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
