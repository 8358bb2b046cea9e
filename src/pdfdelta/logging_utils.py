#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/logging_utils.py
"""Root logging setup for the pdfdelta command line.

Library modules only create module loggers; handlers are installed here, once
per CLI invocation. Trace mode adds thread names because extraction, job
driving and the thread diff worker log from different threads.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(threadName)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_log_level(log_level: int | str) -> int:
    """Translate a level name or number into a logging level, defaulting to INFO."""
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Install stderr (and optionally file) handlers on the root logger.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or level name such as "DEBUG"
    log_file : str, optional
        Append log records to this file as well
    trace_mode : bool, default False
        Use the timestamped format with thread and logger names

    Returns
    -------
    logging.Logger
        The root logger

    """
    level = resolve_log_level(log_level)
    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), level, formatter))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            root_logger.warning(f"Could not open log file {log_file}: {e}")
        else:
            root_logger.addHandler(_make_handler(file_handler, level, formatter))
            root_logger.debug(f"Logging to file: {log_file}")

    return root_logger
