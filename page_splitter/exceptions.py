"""
Custom exceptions for Page Splitter.

This module defines all custom exceptions used throughout the library.
"""

from typing import Iterable, Optional


class PageSplitterException(Exception):
    """Base exception for all Page Splitter errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown page splitter error occurred."


class SourceOpenError(PageSplitterException):
    """Raised when the source PDF cannot be opened or read."""

    @property
    def default_message(self) -> str:
        return "Unable to open the source PDF document."


class PageCopyError(PageSplitterException):
    """Raised when a single page cannot be copied into its output."""

    def __init__(self, message: str = "", page_number: Optional[int] = None) -> None:
        self.page_number = page_number
        super().__init__(message)

    @property
    def default_message(self) -> str:
        if self.page_number is not None:
            return f"Failed to extract page {self.page_number}."
        return "Failed to extract page."


class DestinationAllocationError(PageSplitterException):
    """Raised when storage for an output file cannot be allocated."""

    @property
    def default_message(self) -> str:
        return "Unable to create output file in storage."


class InvalidRangeError(PageSplitterException):
    """Raised by strict range parsing when tokens had to be dropped."""

    def __init__(self, tokens: Iterable[str] = (), message: str = "") -> None:
        self.tokens = list(tokens)
        if not message and self.tokens:
            message = "Invalid page range token(s): " + ", ".join(
                repr(token) for token in self.tokens
            )
        super().__init__(message)

    @property
    def default_message(self) -> str:
        return "Invalid page range specification."


class SplitCancelledError(PageSplitterException):
    """Raised when a running split is cancelled between pages."""

    @property
    def default_message(self) -> str:
        return "Split cancelled before all pages were written."
