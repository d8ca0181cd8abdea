"""Page extraction pipeline.

:class:`SplitPipeline` turns a source document and a page selection into one
single-page PDF per selected page. A run is a finite sequence of
:class:`~page_splitter.types.ProgressEvent` values followed by exactly one
outcome, :class:`~page_splitter.types.SplitSuccess` or
:class:`~page_splitter.types.SplitFailure`. Pages are written strictly one
after another; each output is opened, written and closed before the next
page starts.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional

from .backends.base import SourceDocument
from .destinations import DestinationAllocator
from .exceptions import (
    DestinationAllocationError,
    PageCopyError,
    PageSplitterException,
    SplitCancelledError,
)
from .ranges import SelectionLike, resolve_working_set
from .types import (
    ExtractionArtifact,
    Outcome,
    ProgressEvent,
    SplitEvent,
    SplitFailure,
    SplitSuccess,
)
from .utils import time_block

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


def output_file_name(page_number: int) -> str:
    """Return the output name for ``page_number``."""
    return f"page_{page_number}.pdf"


class CancellationToken:
    """Cooperative cancellation flag checked between pages."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SplitCancelledError()


class SplitPipeline:
    """Extract selected pages of a source document into separate PDFs."""

    def __init__(
        self,
        allocator: DestinationAllocator,
        *,
        rollback_on_failure: bool = False,
    ) -> None:
        self.allocator = allocator
        self.rollback_on_failure = rollback_on_failure

    def _write_page(self, source: SourceDocument, page_number: int, folder_name: str) -> ExtractionArtifact:
        file_name = output_file_name(page_number)
        handle = self.allocator.open(folder_name, file_name)
        try:
            source.copy_page(page_number, handle.stream)
        except PageCopyError:
            handle.abort()
            raise
        except Exception as exc:
            handle.abort()
            raise PageCopyError(
                f"Failed to extract page {page_number}: {exc}", page_number=page_number
            ) from exc
        handle.commit()
        return ExtractionArtifact(page_number=page_number, file_name=file_name, location=handle.location)

    def _rollback(self, artifacts: List[ExtractionArtifact]) -> None:
        for artifact in reversed(artifacts):
            try:
                self.allocator.discard(artifact.location)
            except OSError as exc:
                LOGGER.warning("Could not remove %s during rollback: %s", artifact.location, exc)

    def _failure(self, message: str, artifacts: List[ExtractionArtifact]) -> SplitFailure:
        if self.rollback_on_failure and artifacts:
            self._rollback(artifacts)
            LOGGER.info("Rolled back %s output file(s)", len(artifacts))
            return SplitFailure(error_message=message, artifacts=list(artifacts), rolled_back=True)
        if artifacts:
            LOGGER.warning("%s output file(s) left in storage after failure", len(artifacts))
        return SplitFailure(error_message=message, artifacts=list(artifacts))

    def iter_events(
        self,
        source: SourceDocument,
        selection: SelectionLike = None,
        *,
        folder_name: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Iterator[SplitEvent]:
        """Yield progress events for a run, then its single outcome.

        ``selection`` may be ``None`` or a blank expression (every page), a
        range expression, or an explicit page selection. An empty working set
        is not second-guessed: it produces ``SplitSuccess(0, ...)``.
        """

        artifacts: List[ExtractionArtifact] = []
        try:
            total_pages = source.page_count
        except PageSplitterException as exc:
            yield self._failure(exc.message, artifacts)
            return
        except Exception as exc:
            yield self._failure(f"Unable to read the source document: {exc}", artifacts)
            return
        working_set = resolve_working_set(selection, total_pages)
        total = len(working_set)

        LOGGER.info("Splitting %s page(s) into '%s'", total, folder_name)
        yield ProgressEvent(0, total, "")

        for index, page_number in enumerate(working_set, start=1):
            try:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                if page_number < 1 or page_number > total_pages:
                    raise PageCopyError(
                        f"Page {page_number} is out of bounds. PDF has {total_pages} pages.",
                        page_number=page_number,
                    )
            except PageSplitterException as exc:
                LOGGER.warning("Split aborted before page %s: %s", page_number, exc.message)
                yield self._failure(exc.message, artifacts)
                return

            yield ProgressEvent(index, total, output_file_name(page_number))

            try:
                artifact = self._write_page(source, page_number, folder_name)
            except (PageCopyError, DestinationAllocationError) as exc:
                LOGGER.warning("Split failed at page %s: %s", page_number, exc.message)
                yield self._failure(exc.message, artifacts)
                return

            LOGGER.debug("Wrote %s (%s/%s)", artifact.location, index, total)
            artifacts.append(artifact)

        try:
            location = self.allocator.location(folder_name)
        except PageSplitterException as exc:
            LOGGER.warning("Could not resolve output location for '%s': %s", folder_name, exc.message)
            yield self._failure(exc.message, artifacts)
            return

        LOGGER.info("Split %s page(s) to %s", total, location)
        yield SplitSuccess(page_count=total, output_location=location, artifacts=artifacts)

    def run(
        self,
        source: SourceDocument,
        selection: SelectionLike = None,
        *,
        folder_name: str,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Outcome:
        """Run the pipeline, reporting progress to ``progress_callback``."""

        outcome: Optional[Outcome] = None
        with time_block(LOGGER, f"Split of '{folder_name}'"):
            for event in self.iter_events(
                source, selection, folder_name=folder_name, cancel_token=cancel_token
            ):
                if isinstance(event, ProgressEvent):
                    if progress_callback:
                        progress_callback(event)
                else:
                    outcome = event
        if outcome is None:
            raise PageSplitterException("Split finished without reporting an outcome.")
        return outcome


class BackgroundSplitRunner:
    """Run a :class:`SplitPipeline` off the caller's thread, one run at a time."""

    def __init__(self, pipeline: SplitPipeline) -> None:
        self.pipeline = pipeline
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="page-splitter")
        self._current: Optional[Future] = None
        self._token: Optional[CancellationToken] = None
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.done()

    def submit(
        self,
        source: SourceDocument,
        selection: SelectionLike = None,
        *,
        folder_name: str,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> "Future[Outcome]":
        with self._lock:
            if self.busy:
                raise RuntimeError("A split is already running")
            self._token = CancellationToken()
            self._current = self._executor.submit(
                self.pipeline.run,
                source,
                selection,
                folder_name=folder_name,
                progress_callback=progress_callback,
                cancel_token=self._token,
            )
            return self._current

    def cancel(self) -> None:
        """Request the running split to stop before its next page."""
        if self._token is not None:
            self._token.cancel()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundSplitRunner":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


__all__ = [
    "SplitPipeline",
    "BackgroundSplitRunner",
    "CancellationToken",
    "ProgressCallback",
    "output_file_name",
]
