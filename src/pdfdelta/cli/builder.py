#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/cli/builder.py
"""Shared argument definitions, option assembly and exit codes for CLI commands."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any, Dict

from pdfdelta.cli.config import load_config_with_priority
from pdfdelta.constants import CONFIG_ENV_VAR
from pdfdelta.exceptions import (
    DependencyError,
    DiffComputationError,
    ExtractionError,
    FileError,
    PasswordRequiredError,
    RenderingError,
    TooLargeError,
    ValidationError,
    WorkerFault,
)
from pdfdelta.logging_utils import configure_logging
from pdfdelta.options import CompareOptions, ExtractionOptions, PreviewOptions, options_from_config

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_DEPENDENCY_ERROR = 2
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_EXTRACTION_ERROR = 6
EXIT_RENDERING_ERROR = 7
EXIT_PASSWORD_ERROR = 9
EXIT_INPUT_ERROR = 10
EXIT_WORKER_ERROR = 11


def get_exit_code_for_exception(exception: BaseException) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : BaseException
        The exception that ended the command

    Returns
    -------
    int
        Exit code

    """
    # Password errors are extraction errors; check them first
    if isinstance(exception, PasswordRequiredError):
        return EXIT_PASSWORD_ERROR

    if isinstance(exception, (DependencyError, ImportError)):
        return EXIT_DEPENDENCY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, FileError):
        return EXIT_FILE_ERROR

    if isinstance(exception, ExtractionError):
        return EXIT_EXTRACTION_ERROR

    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR

    if isinstance(exception, TooLargeError):
        return EXIT_INPUT_ERROR

    if isinstance(exception, (WorkerFault, DiffComputationError)):
        return EXIT_WORKER_ERROR

    return EXIT_ERROR


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the inputs plus logging, config and extraction options shared by all commands."""
    parser.add_argument("baseline", help="Baseline PDF (document A)")
    parser.add_argument("revised", help="Revised PDF (document B)")

    extraction = parser.add_argument_group("extraction options")
    extraction.add_argument(
        "--granularity",
        choices=["span", "word"],
        default=None,
        help="Text run granularity used for highlights: span (default) or word",
    )
    extraction.add_argument("--password-a", default=None, help="Password for the baseline PDF")
    extraction.add_argument("--password-b", default=None, help="Password for the revised PDF")

    general = parser.add_argument_group("general options")
    general.add_argument("--config", default=None, help=f"Configuration file (default: ${CONFIG_ENV_VAR} or discovery)")
    general.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    general.add_argument("--log-file", default=None, help="Also write log output to this file")
    general.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps, thread and logger names"
    )
    general.add_argument("--rich", action="store_true", help="Print a rich summary table to stderr")


def setup_logging(parsed_args: argparse.Namespace) -> None:
    """Set up logging from ``--log-level``, ``--log-file`` and ``--trace``."""
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def load_cli_config(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    """Load the configuration file selected by ``--config``, the environment or discovery.

    Raises
    ------
    argparse.ArgumentTypeError
        If a configuration file is found but cannot be loaded

    """
    return load_config_with_priority(explicit_path=parsed_args.config, env_var_path=os.environ.get(CONFIG_ENV_VAR))


def build_options(
    parsed_args: argparse.Namespace, config: Dict[str, Any]
) -> tuple[CompareOptions, ExtractionOptions, ExtractionOptions, PreviewOptions]:
    """Combine configuration and command-line flags into option objects.

    Command-line flags take precedence over configuration values. Passwords
    differ per document, so one ``ExtractionOptions`` is returned per side.

    Returns
    -------
    tuple
        ``(compare_options, extraction_a, extraction_b, preview_options)``

    Raises
    ------
    argparse.ArgumentTypeError
        If a configured or given value is invalid

    """
    try:
        compare, preview = options_from_config(config)
        extraction = compare.extraction
        if parsed_args.granularity:
            extraction = extraction.create_updated(run_granularity=parsed_args.granularity)

        worker = getattr(parsed_args, "worker", None)
        if worker:
            compare = compare.create_updated(worker_mode=worker)

        zoom = getattr(parsed_args, "zoom", None)
        if zoom is not None:
            preview = preview.create_updated(zoom=zoom)
        width = getattr(parsed_args, "width", None)
        if width is not None:
            preview = preview.create_updated(available_width=width)
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"Invalid option: {e}") from e

    compare = compare.create_updated(extraction=extraction)
    extraction_a = extraction.create_updated(password=parsed_args.password_a or extraction.password)
    extraction_b = extraction.create_updated(password=parsed_args.password_b or extraction.password)
    return compare, extraction_a, extraction_b, preview
