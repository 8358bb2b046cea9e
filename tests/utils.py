"""Test utilities for the pdfdelta test suite.

This module provides in-memory document sources, token builders and a
manually driven executor for exercising the extractor and the job
coordinator without a PDF parser or background processes.
"""

import shutil
import tempfile
import threading
import time
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Callable, Sequence

from pdfdelta.extraction.sources import RawPage, RawTextRun, Viewport
from pdfdelta.models import Extraction, NormalizedRect, PageMetrics, Token

# Flips y so a content-space baseline at y maps to height - y in the viewport
PAGE_HEIGHT = 800.0
PAGE_WIDTH = 600.0
FLIP_TRANSFORM = (1.0, 0.0, 0.0, -1.0, 0.0, PAGE_HEIGHT)


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def make_run(text: str, x: float = 72.0, y: float = 700.0, width: float = 60.0, size: float = 12.0) -> RawTextRun:
    """Create a horizontal text run with its baseline starting at ``(x, y)`` in content space."""
    return RawTextRun(text=text, width=width, height=size, transform=(size, 0.0, 0.0, size, x, y))


def make_page(texts: Sequence[str], width: float = PAGE_WIDTH, height: float = PAGE_HEIGHT) -> RawPage:
    """Create a page holding one run per text, stacked top to bottom."""
    viewport = Viewport(width=width, height=height, transform=(1.0, 0.0, 0.0, -1.0, 0.0, height))
    runs = tuple(make_run(text, y=height - 100.0 - index * 20.0) for index, text in enumerate(texts))
    return RawPage(viewport=viewport, runs=runs)


def make_tokens(texts: Sequence[str], page_index: int = 0, start: int = 0) -> list[Token]:
    """Create tokens with dense absolute indexes and a simple row layout."""
    tokens = []
    for offset, text in enumerate(texts):
        row = offset % 40
        tokens.append(
            Token(
                text=text,
                page_index=page_index,
                item_index=offset,
                absolute_index=start + offset,
                rect=NormalizedRect(x=0.1, y=0.02 + row * 0.024, width=0.2, height=0.02),
            )
        )
    return tokens


def make_extraction(*pages: Sequence[str]) -> Extraction:
    """Create an extraction with one page per argument."""
    tokens: list[Token] = []
    for page_index, texts in enumerate(pages):
        tokens.extend(make_tokens(texts, page_index=page_index, start=len(tokens)))
    return Extraction.from_tokens(tokens, [PageMetrics(PAGE_WIDTH, PAGE_HEIGHT) for _ in pages])


class FakeDocumentSource:
    """In-memory ``DocumentSource``.

    Parameters
    ----------
    pages : sequence
        ``RawPage`` objects, or exceptions raised when that page is loaded
    delay : float, default 0.0
        Seconds to sleep before returning each page

    """

    def __init__(self, pages: Sequence[Any], delay: float = 0.0):
        self.pages = list(pages)
        self.delay = delay
        self.closed = False
        self.loaded: list[int] = []

    @classmethod
    def from_texts(cls, *pages: Sequence[str], delay: float = 0.0) -> "FakeDocumentSource":
        return cls([make_page(texts) for texts in pages], delay=delay)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def load_page(self, index: int) -> RawPage:
        if self.delay:
            time.sleep(self.delay)
        self.loaded.append(index)
        page = self.pages[index]
        if isinstance(page, BaseException):
            raise page
        return page

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeDocumentSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class ManualExecutor(Executor):
    """Executor whose work items run only when the test says so.

    Submitted calls are recorded; ``run(n)`` executes the n-th submission
    (in the calling thread) and resolves its future, so tests can finish
    jobs in any order.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self.submissions: list[tuple[Future, Callable, tuple, dict]] = []
        self.shutdown_called = False
        self.started: set[int] = set()

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        with self._condition:
            if self.shutdown_called:
                raise RuntimeError("cannot schedule new futures after shutdown")
            self.submissions.append((future, fn, args, kwargs))
            self._condition.notify_all()
        return future

    def wait_for_submissions(self, count: int, timeout: float = 10.0) -> bool:
        """Block until at least ``count`` calls were submitted."""
        with self._condition:
            return self._condition.wait_for(lambda: len(self.submissions) >= count, timeout)

    def start(self, index: int) -> bool:
        """Mark submission ``index`` as running, as a worker that picked it up would.

        A running future can no longer be cancelled. Returns False if the
        future was cancelled first.
        """
        if index in self.started:
            return True
        if not self.submissions[index][0].set_running_or_notify_cancel():
            return False
        self.started.add(index)
        return True

    def run(self, index: int) -> None:
        """Execute submission ``index`` and resolve its future."""
        future, fn, args, kwargs = self.submissions[index]
        if not self.start(index):
            return
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)

    def resolve(self, index: int, value: Any) -> None:
        """Resolve submission ``index`` with ``value`` without running it."""
        if self.start(index):
            self.submissions[index][0].set_result(value)

    def fail(self, index: int, error: BaseException) -> None:
        """Resolve submission ``index`` with ``error`` without running it."""
        if self.start(index):
            self.submissions[index][0].set_exception(error)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        with self._condition:
            self.shutdown_called = True
            pending = [item[0] for item in self.submissions] if cancel_futures else []
        for future in pending:
            future.cancel()


class FailingExecutor(Executor):
    """Executor that refuses every submission with ``error``."""

    def __init__(self, error: BaseException):
        self.error = error
        self.submit_count = 0

    def submit(self, fn, /, *args, **kwargs) -> Future:
        self.submit_count += 1
        raise self.error
