"""Load PDF and EPUB sources into plain-text records with source metadata."""

from .config import LoaderSettings
from .errors import (
    ChapterRetrieveError,
    ContainerParseError,
    ExtractionError,
    LoaderError,
    PayloadKindError,
    UnsupportedFormatError,
)
from .models import Blob, LoadedDocument

__all__ = [
    "Blob",
    "ChapterRetrieveError",
    "ContainerParseError",
    "ExtractionError",
    "LoadedDocument",
    "LoaderError",
    "LoaderSettings",
    "PayloadKindError",
    "UnsupportedFormatError",
]
