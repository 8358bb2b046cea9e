"""Uniform handling of document inputs.

Documents may be given as a filesystem path, raw bytes or a binary stream.
``normalize_document_input`` turns each of these into either a path string
or a bytes payload that the PDF backend can open.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/utils/inputs.py
import os
from io import BytesIO
from pathlib import Path
from typing import Any, BinaryIO, Literal, Union

from pdfdelta.exceptions import FileNotFoundError as PdfDeltaFileNotFoundError
from pdfdelta.exceptions import ValidationError

PathLike = Union[str, Path]
DocumentInput = Union[PathLike, bytes, bytearray, BinaryIO, BytesIO]
InputKind = Literal["path", "bytes"]


def is_path_like(obj: Any) -> bool:
    """Check if an object is path-like (string or pathlib.Path).

    Examples
    --------
    >>> is_path_like("document.pdf")
    True
    >>> is_path_like(BytesIO(b"data"))
    False

    """
    return isinstance(obj, (str, Path))


def is_file_like(obj: Any) -> bool:
    """Check if an object is file-like (has a callable ``read``)."""
    return hasattr(obj, "read") and callable(obj.read)


def describe_input(input_data: Any) -> str:
    """Return a short label for log and error messages."""
    if is_path_like(input_data):
        return str(input_data)
    name = getattr(input_data, "name", None)
    if isinstance(name, str):
        return name
    return f"<{type(input_data).__name__}>"


def normalize_document_input(input_data: DocumentInput) -> tuple[str | bytes, InputKind]:
    """Validate a document input and convert it for opening.

    Parameters
    ----------
    input_data : str, Path, bytes or binary stream
        Document to open. Streams are read from their current position.

    Returns
    -------
    tuple
        ``(payload, kind)`` where ``kind`` is ``"path"`` (payload is a path
        string) or ``"bytes"`` (payload is the document content)

    Raises
    ------
    FileNotFoundError
        If a path does not exist
    ValidationError
        If a path is not a regular file, a stream is in text mode, or the
        input type is unsupported

    """
    if is_path_like(input_data):
        path_str = str(input_data)
        if not os.path.exists(path_str):
            raise PdfDeltaFileNotFoundError(file_path=path_str)
        if not os.path.isfile(path_str):
            raise ValidationError(
                f"Path is not a file: {path_str}", parameter_name="input_data", parameter_value=input_data
            )
        return path_str, "path"

    if isinstance(input_data, (bytes, bytearray)):
        return bytes(input_data), "bytes"

    if is_file_like(input_data):
        data = input_data.read()
        if isinstance(data, str):
            raise ValidationError(
                "Document streams must be opened in binary mode",
                parameter_name="input_data",
                parameter_value=input_data,
            )
        return bytes(data), "bytes"

    raise ValidationError(
        f"Unsupported input type: {type(input_data).__name__}. Supported types: path-like, bytes, binary stream",
        parameter_name="input_data",
        parameter_value=input_data,
    )
