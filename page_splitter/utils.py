"""Utility functions for PDF operations."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from .backends import PDFBackend, PypdfBackend, PypdfSourceDocument, SourceInput
from .exceptions import PageSplitterException, SourceOpenError
from .types import PDFInfo

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN = "Unknown"


def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """Configure package-wide logging."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("page_splitter").setLevel(level)


@contextmanager
def time_block(logger: logging.Logger, message: str) -> Iterator[None]:
    """Context manager that logs the execution time of a code block."""
    start = datetime.now(tz=timezone.utc)
    logger.debug("Starting %s", message)
    try:
        yield
    finally:
        elapsed = (datetime.now(tz=timezone.utc) - start).total_seconds()
        logger.info("%s completed in %.2fs", message, elapsed)


@contextmanager
def open_source(
    source: SourceInput,
    password: Optional[str] = None,
    *,
    backend: Optional[PDFBackend] = None,
) -> Iterator[PypdfSourceDocument]:
    """Open a source document and close it when the block exits."""

    document = (backend or PypdfBackend()).load(source, password=password)
    try:
        yield document
    finally:
        close = getattr(document, "close", None)
        if close is not None:
            close()


def parse_pdf_date(raw: Optional[str]) -> Optional[datetime]:
    """Parse a PDF date string (``D:YYYYMMDDHHmmSSOHH'mm'``) into a :class:`datetime`."""
    if not raw:
        return None
    text = str(raw).strip()
    if text.startswith("D:"):
        text = text[2:]
    try:
        base = datetime.strptime(text[:14], "%Y%m%d%H%M%S")
    except ValueError:
        return None
    tz_sign = text[14:15]
    if tz_sign in {"+", "-"}:
        try:
            hours = int(text[15:17])
            minutes = int(text[18:20]) if len(text) >= 20 else 0
        except ValueError:
            hours = minutes = 0
        delta = timedelta(hours=hours, minutes=minutes)
        if tz_sign == "-":
            delta = -delta
        tz = timezone(delta)
    else:
        tz = timezone.utc
    return base.replace(tzinfo=tz)


def format_pdf_date(raw: Optional[str]) -> str:
    """Render a PDF date for display, or ``"Unknown"`` when it cannot be parsed."""
    parsed = parse_pdf_date(raw)
    if parsed is None:
        return UNKNOWN
    return parsed.strftime(DATE_DISPLAY_FORMAT)


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.50 MB", "500 bytes")
    """
    kb = size_bytes / 1024.0
    mb = kb / 1024.0
    if mb >= 1.0:
        return f"{mb:.2f} MB"
    if kb >= 1.0:
        return f"{kb:.2f} KB"
    return f"{size_bytes} bytes"


def _text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_pdf_info(pdf_path: Union[str, Path], password: Optional[str] = None) -> PDFInfo:
    """Return display information about a PDF document."""

    with open_source(pdf_path, password=password) as document:
        metadata = document.metadata or {}
        return PDFInfo(
            file_name=Path(pdf_path).name,
            num_pages=document.page_count,
            file_size=document.file_size,
            title=_text(metadata.get("/Title")),
            author=_text(metadata.get("/Author")),
            creator=_text(metadata.get("/Creator")),
            producer=_text(metadata.get("/Producer")),
            creation_date=_text(metadata.get("/CreationDate")),
            modification_date=_text(metadata.get("/ModDate")),
            is_encrypted=bool(document.reader.is_encrypted),
        )


def validate_pdf(pdf_path: str, password: Optional[str] = None) -> Tuple[bool, str]:
    """Perform lightweight validation of a PDF file."""

    if not os.path.exists(pdf_path):
        return False, f"File not found: {pdf_path}"

    if not os.path.isfile(pdf_path):
        return False, f"Path is not a file: {pdf_path}"

    if not os.access(pdf_path, os.R_OK):
        return False, f"Cannot read file (permission denied): {pdf_path}"

    try:
        with open_source(pdf_path, password=password):
            pass
        return True, ""
    except SourceOpenError as exc:
        return False, str(exc)
    except PageSplitterException as exc:
        return False, str(exc)
