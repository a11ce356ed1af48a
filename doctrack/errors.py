#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error types and user feedback helpers.

Every failure the tool recognises derives from ``DoctrackError`` so the
command line can funnel them into a single ``[Error] ...`` line and exit
code 1.
"""

from __future__ import annotations

from typing import Iterable, List


# ==================== Exceptions ====================

class DoctrackError(Exception):
    """Base class for all doctrack failures."""
    pass


class ConfigurationError(DoctrackError):
    """A required argument is missing or a supplied file cannot be used."""
    pass


class UnsupportedDocumentKind(DoctrackError):
    """The declared type or the package structure is not a supported family."""
    pass


class MalformedPackage(DoctrackError):
    """The archive or one of its structural XML streams cannot be parsed."""
    pass


class InvalidTarget(DoctrackError):
    """An external relationship target is not an absolute URI."""
    pass


class UnhandledFailure(DoctrackError):
    """Any other I/O or parsing error, surfaced with its original message."""

    def __init__(self, error: BaseException):
        self.error = error
        super().__init__(str(error) or type(error).__name__)


class MetadataWarning(UserWarning):
    """A metadata value could not be converted and was left unchanged."""
    pass


# ==================== Formatting ====================

TYPE_MISMATCH_MESSAGE = "Document type mismatch."


def format_error(error: BaseException) -> str:
    """
    Render an exception as the single stderr line the CLI prints.

    Args:
        error: The exception caught at the top level

    Returns:
        str: ``[Error] <message>``
    """
    if isinstance(error, MalformedPackage):
        return f"[Error] {TYPE_MISMATCH_MESSAGE}"
    if not isinstance(error, DoctrackError):
        error = UnhandledFailure(error)
    return f"[Error] {error}"


def format_warnings(messages: Iterable[object]) -> List[str]:
    return [f"[Warning] {message}" for message in messages]
