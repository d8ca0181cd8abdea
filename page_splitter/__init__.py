"""
Page Splitter - split a PDF into one standalone PDF per selected page.

Quick Start:
    >>> from page_splitter import SplitPipeline, DirectoryAllocator, open_source
    >>> pipeline = SplitPipeline(DirectoryAllocator('output/'))
    >>> with open_source('input.pdf') as document:
    ...     outcome = pipeline.run(document, '1-3,5', folder_name='input')

Main Classes:
    - SplitPipeline: Drives per-page extraction with progress events
    - BackgroundSplitRunner: Runs a pipeline on a background worker
    - DirectoryAllocator / ScopedStorageAllocator / MemoryAllocator: Output storage

Range Parsing:
    - parse_page_range: Lenient range expression parser
    - parse_page_range_report: Parser that also lists dropped tokens
    - is_valid_range: Whether an expression selects any page

Exceptions:
    - PageSplitterException: Base exception
    - SourceOpenError, PageCopyError, DestinationAllocationError
    - InvalidRangeError: Raised by strict range parsing
    - SplitCancelledError: Raised when a run is cancelled

For CLI usage, use the 'page-splitter' command after installation.
"""

__version__ = "1.0.0"
__author__ = "Page Splitter Contributors"
__license__ = "MIT"

# Data types
from page_splitter.types import (
    ExtractionArtifact,
    PageSelection,
    ParseReport,
    PDFInfo,
    ProgressEvent,
    SplitFailure,
    SplitSuccess,
)

# Exceptions
from page_splitter.exceptions import (
    DestinationAllocationError,
    InvalidRangeError,
    PageCopyError,
    PageSplitterException,
    SourceOpenError,
    SplitCancelledError,
)

# Range parsing
from page_splitter.ranges import (
    format_selection,
    is_valid_range,
    parse_page_range,
    parse_page_range_report,
    resolve_working_set,
)

# Storage and pipeline
from page_splitter.destinations import (
    DirectoryAllocator,
    MemoryAllocator,
    ScopedStorageAllocator,
    create_allocator,
    folder_name_for,
)
from page_splitter.pipeline import BackgroundSplitRunner, CancellationToken, SplitPipeline
from page_splitter.backends import PypdfBackend
from page_splitter.config import SplitterSettings

# Utility functions
from page_splitter.utils import (
    configure_logging,
    format_file_size,
    format_pdf_date,
    get_pdf_info,
    open_source,
    parse_pdf_date,
    validate_pdf,
)

__all__ = [
    # Data types
    "ExtractionArtifact",
    "PageSelection",
    "ParseReport",
    "PDFInfo",
    "ProgressEvent",
    "SplitFailure",
    "SplitSuccess",
    # Exceptions
    "DestinationAllocationError",
    "InvalidRangeError",
    "PageCopyError",
    "PageSplitterException",
    "SourceOpenError",
    "SplitCancelledError",
    # Range parsing
    "format_selection",
    "is_valid_range",
    "parse_page_range",
    "parse_page_range_report",
    "resolve_working_set",
    # Storage and pipeline
    "DirectoryAllocator",
    "MemoryAllocator",
    "ScopedStorageAllocator",
    "create_allocator",
    "folder_name_for",
    "BackgroundSplitRunner",
    "CancellationToken",
    "SplitPipeline",
    "PypdfBackend",
    "SplitterSettings",
    # Utility functions
    "configure_logging",
    "format_file_size",
    "format_pdf_date",
    "get_pdf_info",
    "open_source",
    "parse_pdf_date",
    "validate_pdf",
    # Version info
    "__version__",
]
