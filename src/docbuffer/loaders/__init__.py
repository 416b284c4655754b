"""Document loader implementations and the format registry."""

from __future__ import annotations

import logging
import os

from docbuffer.config import LoaderSettings
from docbuffer.errors import UnsupportedFormatError
from docbuffer.models import DocumentFormat

from .base import BufferLoader, is_epub_file
from .pdf_loader import PDFLoader

logger = logging.getLogger(__name__)

try:
    from .epub_loader import EPUBLoader
except ImportError:
    EPUBLoader = None
    logger.warning("EPUB support unavailable: install 'EbookLib', 'beautifulsoup4' and 'lxml'")


def build_default_loaders() -> dict[str, type[BufferLoader]]:
    """Return the loader classes available in this environment, keyed by format name."""
    loaders: dict[str, type[BufferLoader]] = {"pdf": PDFLoader}
    if EPUBLoader is not None:
        loaders["epub"] = EPUBLoader
    return loaders


def loader_for_path(path: str | os.PathLike[str], settings: LoaderSettings | None = None) -> BufferLoader:
    """Build the loader whose format claims the file extension of *path*."""

    fmt = DocumentFormat.from_path(path)
    for loader_cls in build_default_loaders().values():
        if fmt is not None and loader_cls.format is fmt:
            return loader_cls(path, settings)
    raise UnsupportedFormatError(str(path), "No loader registered for file extension")


__all__ = [
    "BufferLoader",
    "PDFLoader",
    "EPUBLoader",
    "build_default_loaders",
    "is_epub_file",
    "loader_for_path",
]
