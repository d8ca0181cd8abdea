from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def _write_pdf(path: Path, pages: int, metadata: dict | None = None) -> Path:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    if metadata:
        writer.add_metadata(metadata)
    with path.open("wb") as stream:
        writer.write(stream)
    return path


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def _create(filename: str, pages: int, metadata: dict | None = None) -> Path:
        return _write_pdf(tmp_path / filename, pages, metadata)

    return _create


@pytest.fixture()
def sample_pdf(pdf_factory: Callable[..., Path]) -> Path:
    return pdf_factory(
        "sample.pdf",
        4,
        {
            "/Title": "Sample",
            "/Author": "Test Author",
            "/Producer": "page-splitter-tests",
            "/CreationDate": "D:20240223141509+01'00'",
        },
    )


@pytest.fixture()
def ten_page_pdf(pdf_factory: Callable[..., Path]) -> Path:
    return pdf_factory("ten.pdf", 10)
