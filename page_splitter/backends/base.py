"""Backend protocol for source PDF documents."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol, Union

SourceInput = Union[str, Path, BinaryIO]


class SourceDocument(Protocol):
    """A source PDF borrowed by the pipeline for the duration of a run."""

    @property
    def page_count(self) -> int:
        """Total number of pages in the document."""

    def copy_page(self, page_number: int, destination: BinaryIO) -> None:
        """Write page ``page_number`` (1-based) as a standalone PDF to ``destination``.

        Raises :class:`~page_splitter.exceptions.PageCopyError` on failure.
        """


class PDFBackend(Protocol):
    """Protocol defining how source documents are opened."""

    def load(self, source: SourceInput, password: str | None = None) -> SourceDocument:
        """Open ``source`` (a path or binary stream) and return a document."""
