#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the pdfdelta library.

This module defines specialized exception classes for the error conditions
that can occur while extracting, comparing, and rendering documents. Every
terminal outcome of a comparison job that is not a result is one of these.

Exception Hierarchy
-------------------
- PdfDeltaError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)

  - ExtractionError (no usable text recovered from a document)
    - PasswordRequiredError (encrypted document without a valid password)
    - ExtractionCancelledError (extraction of a superseded job stopped early)

  - TooLargeError (combined text exceeds the absolute diff limit)

  - DiffComputationError (structured failure reported by the diff worker)

  - WorkerFault (the execution context itself failed)

  - RenderingError (preview generation failures)
    - RenderCancelledError (preview rendering was cancelled)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any

from pdfdelta.constants import (
    ABSOLUTE_LIMIT,
    GENERIC_COMPARE_FAILURE,
    INVALID_PAGE_REQUEST,
    INVALID_PAGE_REQUEST_GUIDANCE,
    NO_TEXT_FOUND_MESSAGE,
    WORKER_FAULT_MESSAGE,
)


class PdfDeltaError(Exception):
    """Base exception class for all pdfdelta-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any
    retryable : bool
        Whether retrying the same inputs unchanged could succeed

    """

    retryable = False

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(PdfDeltaError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(PdfDeltaError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when an input document cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file not found error."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ExtractionError(PdfDeltaError):
    """Exception raised when a document yields zero usable text tokens.

    Per-page failures are recovered locally by the extractor; this error is
    only raised when the whole document comes up empty, or when it cannot be
    opened at all. Likely causes are scanned/image-only content, encryption,
    or corruption.

    Parameters
    ----------
    message : str, optional
        Description of the failure. Defaults to the standard "no searchable
        text" guidance.
    page_count : int, optional
        Number of pages that were examined
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str | None = None,
        page_count: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the extraction error."""
        super().__init__(message or NO_TEXT_FOUND_MESSAGE, original_error=original_error)
        self.page_count = page_count


class PasswordRequiredError(ExtractionError):
    """Exception raised when an encrypted document cannot be authenticated."""

    def __init__(self, message: str | None = None, file_path: str | None = None):
        """Initialize the password error."""
        if message is None:
            message = "PDF document is password-protected. Please provide a password."
        super().__init__(message)
        self.file_path = file_path


class ExtractionCancelledError(ExtractionError):
    """Exception raised when extraction stops early because its job was superseded."""

    def __init__(self, page_index: int | None = None):
        """Initialize the cancellation error."""
        super().__init__("Extraction cancelled")
        self.page_index = page_index


class TooLargeError(PdfDeltaError):
    """Exception raised when the combined text exceeds the absolute diff limit.

    Parameters
    ----------
    combined_length : int
        Combined character count of both documents' text
    limit : int, default ABSOLUTE_LIMIT
        The limit that was exceeded

    """

    def __init__(self, combined_length: int, limit: int = ABSOLUTE_LIMIT):
        """Initialize the size error with the offending length."""
        message = (
            f"Documents are too large for comparison (combined text length {combined_length:,} characters). "
            "Try comparing smaller sections."
        )
        super().__init__(message)
        self.combined_length = combined_length
        self.limit = limit


class DiffComputationError(PdfDeltaError):
    """Exception raised when the diff worker reports a structured error."""

    def __init__(self, message: str, job_id: int | None = None):
        """Initialize the diff computation error."""
        super().__init__(message)
        self.job_id = job_id


class WorkerFault(PdfDeltaError):
    """Exception raised when the worker execution context itself failed.

    Unlike the algorithmic errors this may be transient, so callers can
    decide whether retrying is sensible.
    """

    retryable = True

    def __init__(
        self,
        message: str = WORKER_FAULT_MESSAGE,
        job_id: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the worker fault."""
        super().__init__(message, original_error=original_error)
        self.job_id = job_id


class RenderingError(PdfDeltaError):
    """Exception raised when preview rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    page_index : int, optional
        Zero-based page that was being rendered
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, page_index: int | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error=original_error)
        self.page_index = page_index


class RenderCancelledError(RenderingError):
    """Exception raised when preview rendering is cancelled mid-document."""

    def __init__(self, page_index: int | None = None):
        """Initialize the cancellation error."""
        super().__init__("Rendering cancelled", page_index=page_index)


class DependencyError(PdfDeltaError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name.upper()} support requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_details = []
                for name, required, installed in version_mismatches:
                    mismatch_details.append(f"'{name}' (requires {required}, but {installed} is installed)")
                mismatch_str = ", ".join(mismatch_details)
                message_parts.append(f"{converter_name.upper()} support has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command


def user_message(error: BaseException) -> str:
    """Return the user-facing message for a terminal job error.

    Parser messages that are meaningless to end users are replaced with
    guidance; anything else falls back to the error text, or a generic
    failure message when the error carries none.

    Parameters
    ----------
    error : BaseException
        The terminal error of a comparison

    Returns
    -------
    str
        Message suitable for display

    """
    message = error.message if isinstance(error, PdfDeltaError) else str(error)
    if message == INVALID_PAGE_REQUEST:
        return INVALID_PAGE_REQUEST_GUIDANCE
    return message or GENERIC_COMPARE_FAILURE
