"""Cleanup of exported HTML ahead of conversion."""

from .cleaner import (
    CleanerOptions,
    clean_document,
    clean_html,
    remove_google_docs_artifacts,
    remove_word_artifacts,
)

__all__ = [
    "CleanerOptions",
    "clean_document",
    "clean_html",
    "remove_google_docs_artifacts",
    "remove_word_artifacts",
]
