#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/utils/decorators.py
"""Decorators and context managers shared by the extraction and preview stages."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Optional, Tuple

from pdfdelta.exceptions import DependencyError
from pdfdelta.utils.packages import check_version_requirement

PackageSpec = Tuple[str, str, str]

# Package lists that already passed; PyMuPDF is checked once per process, not once per page render
_satisfied: set[tuple[PackageSpec, ...]] = set()


def find_dependency_problems(
    packages: List[PackageSpec],
) -> tuple[list[tuple[str, str]], list[tuple[str, str, str]], Optional[ImportError]]:
    """Return ``(missing, version_mismatches, first_import_error)`` for ``packages``."""
    missing: list[tuple[str, str]] = []
    mismatches: list[tuple[str, str, str]] = []
    first_error: Optional[ImportError] = None

    for install_name, import_name, version_spec in packages:
        try:
            # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
            importlib.import_module(import_name)
        except ImportError as e:
            missing.append((install_name, version_spec))
            first_error = first_error or e
            continue
        if not version_spec:
            continue
        ok, installed = check_version_requirement(install_name, version_spec)
        if not ok:
            mismatches.append((install_name, version_spec, installed or "unknown"))

    return missing, mismatches, first_error


def requires_dependencies(component_name: str, packages: List[PackageSpec]) -> Callable:
    """Check required dependencies and versions before calling the wrapped function.

    Parameters
    ----------
    component_name : str
        Name of the component (e.g. "pdf"), used in error messages
    packages : list of tuple
        Required packages as ``(install_name, import_name, version_spec)``:

        - install_name: distribution name for pip (e.g. "pymupdf")
        - import_name: module name for import (e.g. "fitz")
        - version_spec: version requirement (e.g. ">=1.26.4" or "" for any)

    Returns
    -------
    Callable
        Decorator that validates dependencies until they are first satisfied

    Raises
    ------
    DependencyError
        If any package is missing or has an incompatible version. All
        problems are collected before raising.

    Examples
    --------
        >>> @requires_dependencies("pdf", [("pymupdf", "fitz", ">=1.26.4")])
        ... def open_pdf(path):
        ...     import fitz
        ...     return fitz.open(path)

    """
    key = tuple(packages)

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if key not in _satisfied:
                missing, mismatches, first_error = find_dependency_problems(packages)
                if missing or mismatches:
                    raise DependencyError(
                        converter_name=component_name,
                        missing_packages=missing,
                        version_mismatches=mismatches,
                        original_import_error=first_error,
                    ) from first_error
                _satisfied.add(key)
            return func(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Time a block and log the elapsed time at DEBUG level.

    No timing happens when the logger is not enabled for DEBUG.

    Examples
    --------
        >>> with debug_timer(logger, "Extraction of report.pdf"):
        ...     extraction = extract(source)
        ... # Logs: "Extraction of report.pdf completed in 1.23s"

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug(f"{operation} completed in {time.perf_counter() - start:.2f}s")
