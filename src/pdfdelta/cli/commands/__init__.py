#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdfdelta/cli/commands/__init__.py
"""Subcommand dispatch for the pdfdelta CLI."""

import sys

COMMANDS = {
    "compare": "Compare two PDF files and print the text diff",
    "render": "Render page previews with differences highlighted",
}


def dispatch_command(args: list[str] | None = None) -> int | None:
    """Route ``args`` to a subcommand handler.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments, defaults to ``sys.argv[1:]``

    Returns
    -------
    int or None
        Exit code if a subcommand handled the arguments, None otherwise

    """
    if args is None:
        args = sys.argv[1:]

    if not args:
        return None

    if args[0] == "compare":
        from pdfdelta.cli.commands.compare import handle_compare_command

        return handle_compare_command(args[1:])

    if args[0] == "render":
        from pdfdelta.cli.commands.render import handle_render_command

        return handle_render_command(args[1:])

    return None
