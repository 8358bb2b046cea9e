#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/worker.py
"""Message protocol between the job coordinator and the diff worker.

The worker shares no state with its caller. A request carries both full
texts, both token lists and the selected mode as plain data; the worker
answers with exactly one message, either a result or an error, echoing the
job id it was given. ``handle_request`` is a module-level function so it can
be shipped to a ``ProcessPoolExecutor``.

Request::

    {"jobId": 3, "text_a": "...", "text_b": "...",
     "tokens_a": [Token.to_dict(), ...], "tokens_b": [...], "mode": "word"}

Responses::

    {"type": "result", "jobId": 3, "textDiff": [{"value": ..., "kind": ...}],
     "removedIndexes": [...], "addedIndexes": [...]}
    {"type": "error", "jobId": 3, "message": "..."}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from pdfdelta.constants import DIFF_FAILURE_MESSAGE
from pdfdelta.diff.text_diff import diff_text
from pdfdelta.diff.token_diff import changed_indexes
from pdfdelta.exceptions import ValidationError
from pdfdelta.models import DiffMode, DiffSegment, Extraction, Token, TokenChangeSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffRequest:
    """Work item sent to the diff worker."""

    job_id: int
    text_a: str
    text_b: str
    tokens_a: Sequence[Token]
    tokens_b: Sequence[Token]
    mode: DiffMode

    @classmethod
    def from_extractions(
        cls, job_id: int, extraction_a: Extraction, extraction_b: Extraction, mode: DiffMode
    ) -> DiffRequest:
        return cls(
            job_id=job_id,
            text_a=extraction_a.full_text,
            text_b=extraction_b.full_text,
            tokens_a=extraction_a.tokens,
            tokens_b=extraction_b.tokens,
            mode=mode,
        )

    def to_message(self) -> dict[str, Any]:
        """Serialize to the plain-data request message."""
        return {
            "jobId": self.job_id,
            "text_a": self.text_a,
            "text_b": self.text_b,
            "tokens_a": [token.to_dict() for token in self.tokens_a],
            "tokens_b": [token.to_dict() for token in self.tokens_b],
            "mode": DiffMode(self.mode).value,
        }


@dataclass(frozen=True)
class DiffResponse:
    """Decoded worker response.

    Exactly one of ``text_diff``/``change_set`` (for results) or
    ``error_message`` (for errors) is meaningful, as given by ``is_error``.
    """

    job_id: int
    text_diff: tuple[DiffSegment, ...] = ()
    change_set: TokenChangeSet = field(default_factory=TokenChangeSet)
    error_message: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error_message is not None


def handle_request(message: Mapping[str, Any]) -> dict[str, Any]:
    """Run both diff engines for one request message.

    Never raises for failures inside the diff: any exception becomes an
    ``error`` response carrying the exception text.

    Parameters
    ----------
    message : Mapping[str, Any]
        Request produced by ``DiffRequest.to_message``

    Returns
    -------
    dict
        A ``result`` or ``error`` response message

    """
    job_id = message.get("jobId")
    try:
        mode = DiffMode(message["mode"])
        segments = diff_text(message["text_a"], message["text_b"], mode)
        tokens_a = [Token.from_dict(item) for item in message["tokens_a"]]
        tokens_b = [Token.from_dict(item) for item in message["tokens_b"]]
        removed, added = changed_indexes(tokens_a, tokens_b)
    except Exception as e:
        logger.debug(f"Diff for job {job_id} failed: {e!r}")
        return {"type": "error", "jobId": job_id, "message": str(e) or DIFF_FAILURE_MESSAGE}

    return {
        "type": "result",
        "jobId": job_id,
        "textDiff": [segment.to_dict() for segment in segments],
        "removedIndexes": removed,
        "addedIndexes": added,
    }


def decode_response(message: Mapping[str, Any]) -> DiffResponse:
    """Validate a worker response and convert it into a ``DiffResponse``.

    Raises
    ------
    ValidationError
        If the message is not a well-formed ``result`` or ``error`` response

    """
    if not isinstance(message, Mapping):
        raise ValidationError(
            f"Worker response must be a mapping, got {type(message).__name__}",
            parameter_name="message",
            parameter_value=message,
        )

    message_type = message.get("type")
    job_id = message.get("jobId")
    if not isinstance(job_id, int):
        raise ValidationError("Worker response is missing its job id", parameter_name="jobId", parameter_value=job_id)

    if message_type == "error":
        return DiffResponse(job_id=job_id, error_message=str(message.get("message") or DIFF_FAILURE_MESSAGE))

    if message_type == "result":
        try:
            text_diff = tuple(DiffSegment.from_dict(item) for item in message["textDiff"])
            change_set = TokenChangeSet(
                removed=frozenset(int(i) for i in message["removedIndexes"]),
                added=frozenset(int(i) for i in message["addedIndexes"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(
                f"Malformed worker result: {e}", parameter_name="message", original_error=e
            ) from e
        return DiffResponse(job_id=job_id, text_diff=text_diff, change_set=change_set)

    raise ValidationError(
        f"Unknown worker response type: {message_type!r}", parameter_name="type", parameter_value=message_type
    )
