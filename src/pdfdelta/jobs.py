#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/jobs.py
"""Comparison job coordination.

A ``JobCoordinator`` owns the lifecycle of comparison jobs::

    IDLE -> EXTRACTING -> DIFFING -> SETTLED
      ^                                 |
      +------------- clear() -----------+

``submit`` returns immediately with a new job id; extraction of both
documents, mode selection and the diff itself run in the background. The
diff is computed by ``pdfdelta.diff.worker.handle_request`` in a separate
execution context (a single-process pool by default) that shares no state
with the coordinator.

Submitting a new job (or calling ``clear``) supersedes the pending one. Each
job runs on its own driver thread with its own extraction pool, so stale work
never holds up a newer job. A superseded job stops extracting before its next
page, a queued diff is cancelled, and a diff already running in an owned
worker gets that worker discarded and replaced. Whatever stale work still
produces is dropped: an outcome is accepted only when its job id equals the
pending id, and accepting it clears the pending id, so each job settles at
most once and a late result can never overwrite a newer one.

Examples
--------
    >>> with JobCoordinator() as jobs:
    ...     jobs.submit("v1.pdf", "v2.pdf")
    ...     outcome = jobs.wait(timeout=60)
    ...     if outcome.result is not None:
    ...         print(outcome.result.stats)

"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import BrokenExecutor, Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from pdfdelta.diff.modes import select_mode_for
from pdfdelta.diff.text_diff import count_changed_words
from pdfdelta.diff.worker import DiffRequest, decode_response, handle_request
from pdfdelta.exceptions import (
    DiffComputationError,
    ExtractionCancelledError,
    ExtractionError,
    PdfDeltaError,
    ValidationError,
    WorkerFault,
    user_message,
)
from pdfdelta.extraction.extractor import ExtractInput, extract
from pdfdelta.models import ComparisonResult, Extraction, ModeSelection
from pdfdelta.options import CompareOptions, ExtractionOptions

logger = logging.getLogger(__name__)


class JobState(str, Enum):
    """Lifecycle state of the coordinator's current job."""

    IDLE = "idle"
    EXTRACTING = "extracting"
    DIFFING = "diffing"
    SETTLED = "settled"


@dataclass(frozen=True)
class JobOutcome:
    """Snapshot of the coordinator's observable state.

    Delivered to the listener for each accepted outcome, and returned by
    ``JobCoordinator.wait``.
    """

    job_id: Optional[int]
    state: JobState
    result: Optional[ComparisonResult] = None
    error: Optional[PdfDeltaError] = None
    note: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is JobState.SETTLED and self.result is not None

    @property
    def message(self) -> Optional[str]:
        """User-facing error message, if the job failed."""
        return user_message(self.error) if self.error is not None else None


JobListener = Callable[[JobOutcome], None]


class _Job:
    """Work in flight for one job id, kept so a superseded job can be stopped."""

    def __init__(self, job_id: int):
        self.job_id = job_id
        self.cancelled = threading.Event()
        self.extractions: list[Future] = []
        self.diff: Optional[tuple[Executor, Future]] = None


class JobCoordinator:
    """Run comparison jobs in the background and keep only the latest outcome.

    Parameters
    ----------
    options : CompareOptions, optional
        Extraction options, worker mode and extraction concurrency
    executor : concurrent.futures.Executor, optional
        Executor used for the diff worker. When omitted, one is created from
        ``options.worker_mode`` and owned (and replaced when broken) by the
        coordinator.
    listener : callable, optional
        Called with a ``JobOutcome`` each time a job settles. Runs on a
        background thread.

    """

    def __init__(
        self,
        options: CompareOptions | None = None,
        executor: Executor | None = None,
        listener: JobListener | None = None,
    ):
        self.options = options or CompareOptions()
        self.listener = listener

        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)
        self._job_counter = 0
        self._current_job_id: Optional[int] = None
        self._pending_job_id: Optional[int] = None
        self._state = JobState.IDLE
        self._result: Optional[ComparisonResult] = None
        self._error: Optional[PdfDeltaError] = None
        self._note: Optional[str] = None
        self._closed = False

        self._active_job: Optional[_Job] = None
        self._threads: list[threading.Thread] = []
        self._worker_lock = threading.Lock()
        self._owns_worker = executor is None
        self._worker: Optional[Executor] = executor

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> JobState:
        with self._lock:
            return self._state

    @property
    def result(self) -> Optional[ComparisonResult]:
        with self._lock:
            return self._result

    @property
    def error(self) -> Optional[PdfDeltaError]:
        with self._lock:
            return self._error

    @property
    def note(self) -> Optional[str]:
        with self._lock:
            return self._note

    @property
    def pending_job_id(self) -> Optional[int]:
        with self._lock:
            return self._pending_job_id

    @property
    def is_busy(self) -> bool:
        return self.pending_job_id is not None

    def _snapshot(self) -> JobOutcome:
        return JobOutcome(
            job_id=self._current_job_id,
            state=self._state,
            result=self._result,
            error=self._error,
            note=self._note,
        )

    def outcome(self) -> JobOutcome:
        """Return a snapshot of the current state."""
        with self._lock:
            return self._snapshot()

    # ------------------------------------------------------------------
    # Job control
    # ------------------------------------------------------------------

    def submit(
        self,
        source_a: ExtractInput,
        source_b: ExtractInput,
        extraction_a: ExtractionOptions | None = None,
        extraction_b: ExtractionOptions | None = None,
    ) -> int:
        """Start comparing two documents and return the new job id.

        Any pending job is superseded. Returns without waiting for the job.

        Parameters
        ----------
        source_a, source_b : DocumentSource, str, Path, bytes or binary stream
            Baseline and revised documents
        extraction_a, extraction_b : ExtractionOptions, optional
            Per-document extraction options (e.g. different passwords).
            Default to ``options.extraction``.

        Raises
        ------
        RuntimeError
            If the coordinator has been closed

        """
        with self._lock:
            if self._closed:
                raise RuntimeError("JobCoordinator is closed")
            self._job_counter += 1
            job_id = self._job_counter
            superseded = self._pending_job_id
            self._current_job_id = job_id
            self._pending_job_id = job_id
            self._result = None
            self._error = None
            self._note = None
            self._state = JobState.EXTRACTING

            job = _Job(job_id)
            previous, self._active_job = self._active_job, job
            if previous is not None:
                previous.cancelled.set()
            # one driver thread per job, so a superseded job never delays a newer one
            thread = threading.Thread(
                target=self._run,
                args=(
                    job,
                    previous,
                    source_a,
                    source_b,
                    extraction_a or self.options.extraction,
                    extraction_b or self.options.extraction,
                ),
                name=f"pdfdelta-job-{job_id}",
                daemon=True,
            )
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
            thread.start()

        if superseded is not None:
            logger.debug(f"Job {job_id} supersedes job {superseded}")
        logger.info(f"Job {job_id} submitted")
        return job_id

    def wait(self, timeout: float | None = None) -> JobOutcome:
        """Block until no job is pending, or ``timeout`` seconds pass.

        Returns
        -------
        JobOutcome
            Snapshot taken when waiting ended; its state is still
            ``EXTRACTING`` or ``DIFFING`` if the timeout expired first.

        """
        with self._settled:
            self._settled.wait_for(lambda: self._pending_job_id is None, timeout)
            return self._snapshot()

    def clear(self) -> None:
        """Return to ``IDLE``, dropping any result, error, note and pending job."""
        with self._lock:
            dropped = self._pending_job_id
            self._current_job_id = None
            self._pending_job_id = None
            self._result = None
            self._error = None
            self._note = None
            self._state = JobState.IDLE
            previous, self._active_job = self._active_job, None
            self._settled.notify_all()
        if previous is not None:
            self._cancel(previous)
        if dropped is not None:
            logger.debug(f"Cleared pending job {dropped}")

    def close(self) -> None:
        """Wait for job threads to finish, then shut down an owned diff worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            threads, self._threads = self._threads, []
        for thread in threads:
            thread.join()
        with self._worker_lock:
            worker, self._worker = self._worker, None
        if worker is not None and self._owns_worker:
            worker.shutdown(wait=True, cancel_futures=True)

    def __enter__(self) -> JobCoordinator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _is_pending(self, job_id: int) -> bool:
        with self._lock:
            return self._pending_job_id == job_id

    def _run(
        self,
        job: _Job,
        previous: Optional[_Job],
        source_a: ExtractInput,
        source_b: ExtractInput,
        extraction_a: ExtractionOptions,
        extraction_b: ExtractionOptions,
    ) -> None:
        if previous is not None:
            # before this job can reach the diff worker
            self._cancel(previous)
        try:
            self._pipeline(job, source_a, source_b, extraction_a, extraction_b)
        except PdfDeltaError as e:
            logger.exception(f"Job {job.job_id} failed unexpectedly")
            self._settle(job.job_id, error=e)
        except Exception as e:
            logger.exception(f"Job {job.job_id} failed unexpectedly")
            self._settle(job.job_id, error=WorkerFault(job_id=job.job_id, original_error=e))

    def _extract_both(
        self,
        job: _Job,
        source_a: ExtractInput,
        source_b: ExtractInput,
        options_a: ExtractionOptions,
        options_b: ExtractionOptions,
    ) -> tuple[Extraction, Extraction]:
        pool = ThreadPoolExecutor(
            max_workers=self.options.extraction_workers, thread_name_prefix=f"pdfdelta-extract-{job.job_id}"
        )
        try:
            job.extractions = [
                pool.submit(extract, source, options, None, job.cancelled.is_set)
                for source, options in ((source_a, options_a), (source_b, options_b))
            ]
            return job.extractions[0].result(), job.extractions[1].result()
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

    def _pipeline(
        self,
        job: _Job,
        source_a: ExtractInput,
        source_b: ExtractInput,
        options_a: ExtractionOptions,
        options_b: ExtractionOptions,
    ) -> None:
        job_id = job.job_id
        try:
            extraction_a, extraction_b = self._extract_both(job, source_a, source_b, options_a, options_b)
        except ExtractionCancelledError:
            logger.debug(f"Job {job_id} superseded during extraction, stopping")
            return
        except PdfDeltaError as e:
            self._settle(job_id, error=e)
            return
        except Exception as e:
            self._settle(job_id, error=ExtractionError(user_message(e), original_error=e))
            return

        if not self._is_pending(job_id):
            logger.debug(f"Job {job_id} superseded after extraction, stopping")
            return

        try:
            selection = select_mode_for(extraction_a, extraction_b)
        except PdfDeltaError as e:
            self._settle(job_id, error=e)
            return

        with self._lock:
            if self._pending_job_id != job_id:
                return
            self._state = JobState.DIFFING
            self._note = selection.note
        logger.debug(f"Job {job_id} diffing in {selection.mode.value} mode")

        request = DiffRequest.from_extractions(job_id, extraction_a, extraction_b, selection.mode)
        executor = self._ensure_worker()
        try:
            # under the lock, so a job superseded from here on always finds its diff to abandon
            with self._lock:
                if self._pending_job_id != job_id:
                    return
                future = executor.submit(handle_request, request.to_message())
                job.diff = (executor, future)
        except Exception as e:
            if isinstance(e, BrokenExecutor):
                self._discard_worker(executor, "is broken")
            self._settle(job_id, error=WorkerFault(job_id=job_id, original_error=e))
            return

        future.add_done_callback(
            partial(self._on_worker_done, job_id, selection, extraction_a, extraction_b, executor)
        )

    def _on_worker_done(
        self,
        job_id: int,
        selection: ModeSelection,
        extraction_a: Extraction,
        extraction_b: Extraction,
        executor: Executor,
        future: Future,
    ) -> None:
        if not self._is_pending(job_id):
            logger.debug(f"Ignoring diff outcome of superseded job {job_id}")
            return
        try:
            message = future.result()
        except Exception as e:
            if isinstance(e, BrokenExecutor):
                self._discard_worker(executor, "is broken")
            logger.warning(f"Diff worker failed for job {job_id}: {e!r}")
            self._settle(job_id, error=WorkerFault(job_id=job_id, original_error=e))
            return

        try:
            response = decode_response(message)
        except ValidationError as e:
            self._settle(job_id, error=WorkerFault(job_id=job_id, original_error=e))
            return

        if response.is_error:
            self._settle(
                response.job_id,
                error=DiffComputationError(response.error_message or "", job_id=response.job_id),
            )
            return

        result = ComparisonResult(
            text_diff=response.text_diff,
            change_set=response.change_set,
            mode=selection.mode,
            note=selection.note,
            extraction_a=extraction_a,
            extraction_b=extraction_b,
            stats=count_changed_words(response.text_diff),
        )
        self._settle(response.job_id, result=result)

    def _settle(
        self,
        job_id: int,
        result: Optional[ComparisonResult] = None,
        error: Optional[PdfDeltaError] = None,
    ) -> bool:
        """Accept a terminal outcome if ``job_id`` is still pending.

        Returns
        -------
        bool
            True if the outcome was accepted, False if it was stale

        """
        with self._lock:
            if job_id is None or job_id != self._pending_job_id:
                logger.debug(f"Discarding stale outcome of job {job_id} (pending: {self._pending_job_id})")
                return False
            self._pending_job_id = None
            self._state = JobState.SETTLED
            self._result = result
            self._error = error
            outcome = self._snapshot()
            self._settled.notify_all()

        if error is not None:
            logger.info(f"Job {job_id} failed: {error.message}")
        else:
            logger.info(f"Job {job_id} completed")

        if self.listener is not None:
            try:
                self.listener(outcome)
            except Exception as e:
                logger.warning(f"Job listener failed: {e}")
        return True

    # ------------------------------------------------------------------
    # Worker executor
    # ------------------------------------------------------------------

    def _create_worker(self) -> Executor:
        if self.options.worker_mode == "thread":
            return ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdfdelta-diff")
        return ProcessPoolExecutor(max_workers=1)

    def _ensure_worker(self) -> Executor:
        with self._worker_lock:
            if self._worker is None:
                if not self._owns_worker:
                    raise WorkerFault("Diff worker executor is no longer available.")
                self._worker = self._create_worker()
                logger.debug(f"Started {self.options.worker_mode} diff worker")
            return self._worker

    def _discard_worker(self, executor: Executor, reason: str) -> None:
        with self._worker_lock:
            if self._worker is not executor or not self._owns_worker:
                return
            self._worker = None
        logger.warning(f"Diff worker {reason}; a new one will be started for the next job")
        # process pools on Python 3.14+ can also stop a busy worker; both shut the pool down
        terminate = getattr(executor, "terminate_workers", None)
        if terminate is not None:
            terminate()
        else:
            executor.shutdown(wait=False, cancel_futures=True)

    def _cancel(self, job: _Job) -> None:
        """Stop a superseded job's extraction and diff as early as possible."""
        job.cancelled.set()
        for future in job.extractions:
            future.cancel()
        self._abandon_diff(job)

    def _abandon_diff(self, job: _Job) -> None:
        with self._lock:
            diff, job.diff = job.diff, None
        if diff is None:
            return
        executor, future = diff
        if future.done() or future.cancel():
            return
        # already running: an owned worker is replaced so the next job does not queue behind it
        self._discard_worker(executor, f"is still computing superseded job {job.job_id}")
