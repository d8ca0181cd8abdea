"""
Type definitions and dataclasses for Page Splitter.

This module defines data structures used throughout the library.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union


class PageSelection:
    """
    Ascending, duplicate-free set of 1-based page numbers.

    Iteration order is always ascending so output naming and progress
    reporting are deterministic.
    """

    __slots__ = ("_pages",)

    def __init__(self, pages: Iterable[int] = ()) -> None:
        self._pages: Tuple[int, ...] = tuple(sorted(set(int(page) for page in pages)))

    @classmethod
    def all_pages(cls, total_pages: int) -> "PageSelection":
        return cls(range(1, max(0, total_pages) + 1))

    @property
    def pages(self) -> Tuple[int, ...]:
        return self._pages

    def __iter__(self) -> Iterator[int]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page: object) -> bool:
        return page in self._pages

    def __bool__(self) -> bool:
        return bool(self._pages)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PageSelection):
            return self._pages == other._pages
        if isinstance(other, (set, frozenset)):
            return set(self._pages) == other
        if isinstance(other, (list, tuple)):
            return list(self._pages) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._pages)

    def __repr__(self) -> str:
        return f"PageSelection({list(self._pages)!r})"

    def is_within(self, total_pages: int) -> bool:
        """Return ``True`` when every member lies within ``[1, total_pages]``."""
        return all(1 <= page <= total_pages for page in self._pages)


@dataclass(frozen=True)
class ParseReport:
    """
    Result of parsing a range expression with token-level feedback.

    Attributes:
        selection: Pages that survived parsing
        dropped: Tokens that were malformed or out of range, in input order
    """
    selection: PageSelection
    dropped: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not self.dropped


@dataclass(frozen=True)
class ProgressEvent:
    """
    Progress notification emitted by the split pipeline.

    Attributes:
        current_index: 1-based position of the page now being written
            (0 for the initial event)
        total_selected: Number of pages in the working set
        current_file_name: Name of the output being written
    """
    current_index: int
    total_selected: int
    current_file_name: str

    @property
    def fraction(self) -> float:
        if self.total_selected == 0:
            return 1.0
        return self.current_index / self.total_selected


@dataclass(frozen=True)
class ExtractionArtifact:
    """One single-page PDF produced by a split run."""
    page_number: int
    file_name: str
    location: str


@dataclass
class SplitSuccess:
    """
    Terminal outcome of a run where every selected page was written.

    Attributes:
        page_count: Number of pages written
        output_location: Where the storage layer placed the outputs
        artifacts: Created outputs in page order
    """
    page_count: int
    output_location: str
    artifacts: List[ExtractionArtifact] = field(default_factory=list)

    success = True

    def __str__(self) -> str:
        return f"SplitSuccess(pages={self.page_count}, location='{self.output_location}')"


@dataclass
class SplitFailure:
    """
    Terminal outcome of an aborted run.

    Attributes:
        error_message: Human readable failure reason
        artifacts: Outputs already written before the failure; empty when
            they were rolled back
        rolled_back: Whether already-written outputs were removed
    """
    error_message: str
    artifacts: List[ExtractionArtifact] = field(default_factory=list)
    rolled_back: bool = False

    success = False

    def __str__(self) -> str:
        return f"SplitFailure(error='{self.error_message}')"


Outcome = Union[SplitSuccess, SplitFailure]
SplitEvent = Union[ProgressEvent, SplitSuccess, SplitFailure]


@dataclass
class PDFInfo:
    """
    PDF document information and metadata.

    Attributes:
        file_name: Display name of the source file
        num_pages: Number of pages in the PDF
        file_size: File size in bytes
        title: PDF title metadata
        author: PDF author metadata
        creator: PDF creator application
        producer: PDF producer application
        creation_date: Raw ``/CreationDate`` value
        modification_date: Raw ``/ModDate`` value
        is_encrypted: Whether the PDF is encrypted
    """
    file_name: str
    num_pages: int
    file_size: int
    title: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    is_encrypted: bool = False
