"""Exception hierarchy for html2gutenberg."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models.report import ConversionReport


class Html2GutenbergError(Exception):
    """Base exception for html2gutenberg."""


class DocumentParseError(Html2GutenbergError):
    """
    Raised when a document cannot be parsed at all.

    This is the only fatal tier: it aborts a conversion in both strict and
    relaxed mode. When raised from the policy pipeline, ``report`` holds the
    partial report finalized up to the failure.
    """

    def __init__(self, message: str, report: Optional["ConversionReport"] = None):
        super().__init__(message)
        self.report = report


class DocumentLoadError(Html2GutenbergError):
    """Raised when an HTML source cannot be read."""


class ConfigurationError(Html2GutenbergError):
    """Raised when a configuration file is unreadable or invalid."""


__all__ = [
    "Html2GutenbergError",
    "DocumentParseError",
    "DocumentLoadError",
    "ConfigurationError",
]
