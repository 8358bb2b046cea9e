#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdfdelta/cli/commands/compare.py
"""PDF comparison command.

Compares two PDF files and writes the text diff as inline word-diff text,
a standalone HTML page, or JSON including per-page highlight rectangles.
The comparison runs through a ``JobCoordinator``, so the diff itself is
computed in a separate worker process unless ``--worker thread`` is given.
"""

import argparse
import logging
import sys
from pathlib import Path

from pdfdelta.cli.builder import (
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    add_common_arguments,
    build_options,
    get_exit_code_for_exception,
    load_cli_config,
    setup_logging,
)
from pdfdelta.cli.output import print_comparison_summary, should_use_rich_output
from pdfdelta.diff.renderers.html import HtmlDiffRenderer
from pdfdelta.diff.renderers.json import JsonDiffRenderer
from pdfdelta.diff.renderers.unified import UnifiedDiffRenderer
from pdfdelta.jobs import JobCoordinator
from pdfdelta.models import ComparisonResult

logger = logging.getLogger(__name__)


def _create_compare_parser() -> argparse.ArgumentParser:
    """Create argparse parser for the compare command."""
    parser = argparse.ArgumentParser(
        prog="pdfdelta compare",
        description="Compare two PDF files and report added and removed text",
        add_help=True,
    )
    add_common_arguments(parser)

    output = parser.add_argument_group("output options")
    output.add_argument(
        "--format",
        "-f",
        choices=["unified", "html", "json"],
        default="unified",
        help="Output format: unified (default, inline word diff), html (visual), json (structured)",
    )
    output.add_argument("--output", "-o", help="Write diff to file (default: stdout)")
    output.add_argument(
        "--color",
        dest="color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Colorize unified output: auto (default, if terminal), always, never",
    )
    output.add_argument(
        "--no-context",
        dest="show_context",
        action="store_false",
        default=True,
        help="Collapse long unchanged runs in HTML output",
    )

    parser.add_argument(
        "--worker",
        choices=["process", "thread"],
        default=None,
        help="Where the diff is computed: a worker process (default) or a worker thread",
    )
    return parser


def _render(result: ComparisonResult, parsed: argparse.Namespace) -> str:
    if parsed.format == "html":
        return HtmlDiffRenderer(show_context=parsed.show_context).render(result)
    if parsed.format == "json":
        return JsonDiffRenderer().render(result)

    use_colors = False
    if parsed.color == "always":
        use_colors = True
    elif parsed.color == "auto" and not parsed.output:
        use_colors = sys.stdout.isatty()
    renderer = UnifiedDiffRenderer(use_color=use_colors, old_label=parsed.baseline, new_label=parsed.revised)
    return "\n".join(renderer.render(result))


def handle_compare_command(args: list[str] | None = None) -> int:
    """Handle the compare command.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments (beyond 'compare')

    Returns
    -------
    int
        Exit code (0 for success, with or without differences)

    """
    parser = _create_compare_parser()
    try:
        parsed = parser.parse_args(args or [])
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0

    setup_logging(parsed)

    for path in (parsed.baseline, parsed.revised):
        if not Path(path).is_file():
            print(f"Error: Source file not found: {path}", file=sys.stderr)
            return EXIT_FILE_ERROR

    try:
        config = load_cli_config(parsed)
        compare_options, extraction_a, extraction_b, _ = build_options(parsed, config)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    print(f"Comparing {parsed.baseline} and {parsed.revised}...", file=sys.stderr)
    with JobCoordinator(compare_options) as jobs:
        jobs.submit(parsed.baseline, parsed.revised, extraction_a, extraction_b)
        outcome = jobs.wait()

    if outcome.error is not None:
        print(f"Error: {outcome.message}", file=sys.stderr)
        return get_exit_code_for_exception(outcome.error)

    result = outcome.result
    assert result is not None

    if result.note:
        print(f"Note: {result.note}", file=sys.stderr)
    if should_use_rich_output(parsed):
        print_comparison_summary(result, parsed.baseline, parsed.revised)
    if not result.has_changes:
        print("No differences found.", file=sys.stderr)

    output = _render(result, parsed)
    if parsed.output:
        output_path = Path(parsed.output)
        output_path.write_text(output, encoding="utf-8")
        print(f"Diff written to: {output_path}", file=sys.stderr)
    else:
        print(output)

    return EXIT_SUCCESS
