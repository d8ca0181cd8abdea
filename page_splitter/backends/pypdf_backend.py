"""pypdf backend implementation for Page Splitter."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..exceptions import PageCopyError, SourceOpenError
from .base import PDFBackend, SourceInput

LOGGER = logging.getLogger(__name__)

PRODUCER = "Page Splitter"


@dataclass
class PypdfSourceDocument:
    """Source document backed by a :class:`pypdf.PdfReader`."""

    reader: PdfReader
    file_size: int
    name: str = "document.pdf"

    @property
    def page_count(self) -> int:
        return len(self.reader.pages)

    @property
    def metadata(self) -> Any:
        return self.reader.metadata

    def _page_metadata(self, page_number: int) -> Dict[str, str]:
        metadata_dict: Dict[str, str] = {}
        metadata = self.reader.metadata

        if metadata and metadata.title:
            metadata_dict['/Title'] = f"{metadata.title} - Page {page_number}"
        if metadata and metadata.author:
            metadata_dict['/Author'] = metadata.author
        if metadata and metadata.subject:
            metadata_dict['/Subject'] = metadata.subject
        if metadata and metadata.creator:
            metadata_dict['/Creator'] = metadata.creator

        metadata_dict['/Producer'] = PRODUCER
        return metadata_dict

    def copy_page(self, page_number: int, destination: BinaryIO) -> None:
        if page_number < 1 or page_number > self.page_count:
            raise PageCopyError(
                f"Page {page_number} is out of bounds. PDF has {self.page_count} pages.",
                page_number=page_number,
            )

        try:
            writer = PdfWriter()
            writer.add_page(self.reader.pages[page_number - 1])
            writer.add_metadata(self._page_metadata(page_number))
            writer.write(destination)
        except PageCopyError:
            raise
        except Exception as exc:
            raise PageCopyError(
                f"Failed to extract page {page_number}: {exc}", page_number=page_number
            ) from exc
        LOGGER.debug("Copied page %s of %s", page_number, self.name)

    def close(self) -> None:
        stream = getattr(self.reader, "stream", None)
        if stream is not None and hasattr(stream, "close"):
            stream.close()


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, source: SourceInput, password: Optional[str] = None) -> PypdfSourceDocument:
        raw_bytes, name = self._read_source(source)

        try:
            reader = PdfReader(io.BytesIO(raw_bytes))
        except PdfReadError as exc:
            raise SourceOpenError(f"Corrupted or invalid PDF file: {name}. Error: {exc}") from exc
        except Exception as exc:
            raise SourceOpenError(f"Unexpected error reading PDF: {name}. Error: {exc}") from exc

        if reader.is_encrypted:
            if not password:
                raise SourceOpenError("PDF is encrypted. Supply a password to process this file.")
            try:
                decrypted = reader.decrypt(password)
            except Exception as exc:
                raise SourceOpenError(f"Failed to decrypt PDF: {exc}") from exc
            if decrypted == 0:
                raise SourceOpenError("Failed to decrypt PDF with supplied password.")

        LOGGER.debug("Loaded %s (%s bytes)", name, len(raw_bytes))
        return PypdfSourceDocument(reader=reader, file_size=len(raw_bytes), name=name)

    @staticmethod
    def _read_source(source: SourceInput) -> tuple[bytes, str]:
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists() or not path.is_file():
                raise SourceOpenError(f"PDF file not found: {source}")
            try:
                return path.read_bytes(), path.name
            except OSError as exc:
                raise SourceOpenError(f"Unable to read PDF file: {source}. Error: {exc}") from exc

        try:
            raw_bytes = source.read()
        except Exception as exc:
            raise SourceOpenError(f"Unable to read PDF stream. Error: {exc}") from exc
        name = Path(str(getattr(source, "name", "document.pdf"))).name
        return raw_bytes, name
