#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/pdfdelta/cli/commands/render.py
"""Highlighted page preview command.

Compares two PDF files and writes one PNG per page: baseline pages with
removed text highlighted and revised pages with added text highlighted.
"""

import argparse
import sys
import threading
from pathlib import Path

from pdfdelta.api import compare_extractions, extract_document
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
from pdfdelta.exceptions import PdfDeltaError, user_message
from pdfdelta.preview import CancellationToken, render_previews, save_previews


def _positive_float(value: str) -> float:
    """Validate a strictly positive float argument.

    Raises
    ------
    argparse.ArgumentTypeError
        If ``value`` is not a positive number

    """
    try:
        fvalue = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected a number, got '{value}'") from e
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {fvalue}")
    return fvalue


def _create_render_parser() -> argparse.ArgumentParser:
    """Create argparse parser for the render command."""
    parser = argparse.ArgumentParser(
        prog="pdfdelta render",
        description="Render page previews of two PDF files with their differences highlighted",
        add_help=True,
    )
    add_common_arguments(parser)
    parser.add_argument("--output-dir", "-d", required=True, help="Directory for the PNG files")
    parser.add_argument("--zoom", type=_positive_float, default=None, help="Zoom factor (default: 1.0)")
    parser.add_argument(
        "--width", type=_positive_float, default=None, help="Fit pages to this width in points before zooming"
    )
    parser.add_argument(
        "--side",
        choices=["both", "baseline", "revised"],
        default="both",
        help="Which document to render (default: both)",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Cancel rendering after this many seconds",
    )
    return parser


def handle_render_command(args: list[str] | None = None) -> int:
    """Handle the render command.

    Parameters
    ----------
    args : list[str], optional
        Command line arguments (beyond 'render')

    Returns
    -------
    int
        Exit code (0 for success)

    """
    parser = _create_render_parser()
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
        _, extraction_a_options, extraction_b_options, preview_options = build_options(parsed, config)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    cancel_token = CancellationToken()
    timer = threading.Timer(parsed.timeout, cancel_token.cancel) if parsed.timeout else None

    try:
        extraction_a = extract_document(parsed.baseline, extraction_a_options)
        extraction_b = extract_document(parsed.revised, extraction_b_options)
        result = compare_extractions(extraction_a, extraction_b)
        if result.note:
            print(f"Note: {result.note}", file=sys.stderr)
        if should_use_rich_output(parsed):
            print_comparison_summary(result, parsed.baseline, parsed.revised)

        sides = [
            ("baseline", parsed.baseline, extraction_a, result.change_set.removed, "removed", extraction_a_options),
            ("revised", parsed.revised, extraction_b, result.change_set.added, "added", extraction_b_options),
        ]
        if timer is not None:
            timer.start()
        for side, document, extraction, indexes, kind, options in sides:
            if parsed.side not in ("both", side):
                continue
            previews = render_previews(
                document,
                extraction,
                indexes,
                kind=kind,
                options=preview_options,
                cancel_token=cancel_token,
                password=options.password,
            )
            written = save_previews(previews, parsed.output_dir, prefix=side)
            print(f"Wrote {len(written)} {side} page(s) to {parsed.output_dir}", file=sys.stderr)
    except PdfDeltaError as e:
        print(f"Error: {user_message(e)}", file=sys.stderr)
        return get_exit_code_for_exception(e)
    finally:
        if timer is not None:
            timer.cancel()

    return EXIT_SUCCESS
