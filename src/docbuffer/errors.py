"""Typed failures raised by document loaders, one per loading stage."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class LoaderError(Exception):
    """Domain error for parsing and routing failures."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


class ExtractionError(LoaderError):
    """PDF text extraction backend missing or failed."""


class ContainerParseError(LoaderError):
    """EPUB package structure could not be read."""


@dataclass(slots=True)
class ChapterRetrieveError(LoaderError):
    """At least one chapter body could not be retrieved."""

    chapter_id: str = ""


class PayloadKindError(LoaderError):
    """Parser received a payload in a representation it does not accept."""


class UnsupportedFormatError(LoaderError):
    """No registered loader claims the file extension."""
