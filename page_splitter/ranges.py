"""Page-range expression parsing and validation.

A range expression is a comma-separated list of tokens, each either a single
page number (``"5"``) or an inclusive ``start-end`` pair (``"1-3"``). Parsing
is lenient: malformed or out-of-range tokens are dropped and the remaining
tokens still contribute pages. Use :func:`parse_page_range_report` or
``strict=True`` to find out which tokens were dropped.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple, Union

from .exceptions import InvalidRangeError
from .types import PageSelection, ParseReport

LOGGER = logging.getLogger(__name__)

_NUMBER = re.compile(r"[0-9]+", re.ASCII)

SelectionLike = Union[PageSelection, str, Iterable[int], None]


def _positive_int(text: str) -> Optional[int]:
    text = text.strip()
    if not _NUMBER.fullmatch(text):
        return None
    value = int(text)
    return value if value >= 1 else None


def _expand_token(token: str, total_pages: int) -> Optional[Tuple[int, int]]:
    """Return the inclusive bounds for ``token`` or ``None`` when it is dropped."""

    if "-" in token:
        start_str, end_str = token.split("-", 1)
        start = _positive_int(start_str)
        end = _positive_int(end_str)
        if start is None or end is None:
            return None
    else:
        start = end = _positive_int(token)
        if start is None:
            return None

    if start > end or end > total_pages:
        return None
    return start, end


def parse_page_range_report(expression: str, total_pages: int) -> ParseReport:
    """Parse ``expression`` and report which tokens were dropped.

    Args:
        expression: Range expression such as ``"1-3,5,7-9"``.
        total_pages: Page count of the source document.

    Returns:
        A :class:`ParseReport` with the ascending selection and the dropped
        tokens in the order they appeared.
    """

    pages: set[int] = set()
    dropped: List[str] = []

    for part in (expression or "").split(","):
        token = part.strip()
        if not token:
            continue
        bounds = _expand_token(token, total_pages)
        if bounds is None:
            dropped.append(token)
            continue
        pages.update(range(bounds[0], bounds[1] + 1))

    if dropped:
        LOGGER.warning(
            "Dropped page range token(s) %s for a %s-page document",
            ", ".join(dropped),
            total_pages,
        )
    return ParseReport(selection=PageSelection(pages), dropped=dropped)


def parse_page_range(
    expression: str,
    total_pages: int,
    *,
    strict: bool = False,
) -> PageSelection:
    """Parse a range expression into a :class:`PageSelection`.

    Lenient by default: a malformed or out-of-range token is dropped without
    affecting the other tokens, and nothing is raised. With ``strict=True``
    any dropped token raises :class:`InvalidRangeError`.

    An empty expression yields an empty selection; callers that want "all
    pages" for empty input should use :func:`resolve_working_set`.
    """

    report = parse_page_range_report(expression, total_pages)
    if strict and report.dropped:
        raise InvalidRangeError(report.dropped)
    return report.selection


def is_valid_range(expression: str, total_pages: int) -> bool:
    """Return ``True`` when ``expression`` selects at least one in-range page."""

    if not expression or not expression.strip():
        return False
    return bool(parse_page_range(expression, total_pages))


def format_selection(selection: Iterable[int]) -> str:
    """Render ``selection`` as its canonical ascending comma-joined form."""

    return ",".join(str(page) for page in PageSelection(selection))


def resolve_working_set(selection: SelectionLike, total_pages: int) -> PageSelection:
    """Return the pages a split run will process.

    ``None`` and blank expressions select every page. Strings are parsed
    leniently; other iterables are taken as-is.
    """

    if selection is None:
        return PageSelection.all_pages(total_pages)
    if isinstance(selection, str):
        if not selection.strip():
            return PageSelection.all_pages(total_pages)
        return parse_page_range(selection, total_pages)
    if isinstance(selection, PageSelection):
        return selection
    return PageSelection(selection)


__all__ = [
    "parse_page_range",
    "parse_page_range_report",
    "is_valid_range",
    "format_selection",
    "resolve_working_set",
]
