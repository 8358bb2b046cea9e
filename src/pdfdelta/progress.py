#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/progress.py
"""Progress callback system for document extraction.

Extraction of large documents can take a while; embedders pass a callback to
receive one event per processed page.

Examples
--------
    >>> from pdfdelta import extract_document
    >>> from pdfdelta.progress import ProgressEvent
    >>>
    >>> def on_progress(event: ProgressEvent):
    ...     print(f"{event.event_type}: {event.message} ({event.current}/{event.total})")
    >>>
    >>> extraction = extract_document("report.pdf", progress_callback=on_progress)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Optional

logger = logging.getLogger(__name__)

EventType = Literal["started", "item_done", "finished", "error"]


@dataclass
class ProgressEvent:
    """Progress event emitted during extraction.

    Parameters
    ----------
    event_type : EventType
        Type of progress event:

        - "started": extraction has begun; ``total`` is the page count
        - "item_done": a page has been processed; ``metadata["item_type"] == "page"``
        - "finished": extraction completed; ``current == total``
        - "error": a page failed and contributed zero tokens;
          ``metadata`` carries ``error`` and ``page``

    message : str
        Human-readable description of the event
    current : int, default 0
        Current progress position (pages completed)
    total : int, default 0
        Total pages to process. Set to 0 if unknown.
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable string representation."""
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


ProgressCallback = Callable[[ProgressEvent], None]
"""Type alias for progress callback functions.

Callbacks should not raise; an exception raised by a callback is logged and
otherwise ignored so it cannot interrupt extraction.
"""


def emit_progress(
    callback: Optional[ProgressCallback],
    event_type: EventType,
    message: str,
    current: int = 0,
    total: int = 0,
    **metadata: Any,
) -> None:
    """Send a progress event to ``callback`` if one is registered."""
    if callback is None:
        return
    event = ProgressEvent(event_type=event_type, message=message, current=current, total=total, metadata=metadata)
    try:
        callback(event)
    except Exception as e:
        logger.warning(f"Progress callback failed: {e}")
