"""Backend abstractions for Page Splitter."""

from .base import PDFBackend, SourceDocument, SourceInput
from .pypdf_backend import PypdfBackend, PypdfSourceDocument

__all__ = [
    "PDFBackend",
    "SourceDocument",
    "SourceInput",
    "PypdfBackend",
    "PypdfSourceDocument",
]
