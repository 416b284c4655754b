"""PDF loader emitting the whole document text as a single record."""

from __future__ import annotations

import asyncio
import logging
from types import ModuleType

from docbuffer.errors import ExtractionError, PayloadKindError
from docbuffer.loaders.base import BufferLoader
from docbuffer.models import DocumentFormat, LoadedDocument, Metadata

logger = logging.getLogger(__name__)

_INSTALL_HINT = "Failed to load pymupdf. Please install it with eg. `pip install pymupdf`."


def _load_backend(source: str) -> ModuleType:
    try:
        import pymupdf
    except ImportError as exc:
        logger.error("PDF backend unavailable: %s", exc)
        raise ExtractionError(source, _INSTALL_HINT) from exc
    return pymupdf


def _extract_text(backend: ModuleType, data: bytes, separator: str) -> tuple[str, int]:
    with backend.open(stream=data, filetype="pdf") as doc:
        pages = [page.get_text() for page in doc]
        return separator.join(pages), doc.page_count


class PDFLoader(BufferLoader):
    """Extract text from every page of a PDF in page order."""

    format = DocumentFormat.PDF

    async def parse(self, raw: bytes | str, metadata: Metadata) -> list[LoadedDocument]:
        source = str(metadata["source"])
        if isinstance(raw, str):
            raise PayloadKindError(source, "PDF parser expects a binary payload")

        backend = _load_backend(source)
        try:
            text, numpages = await asyncio.to_thread(
                _extract_text, backend, bytes(raw), self.settings.pdf_page_separator
            )
        except (RuntimeError, ValueError) as exc:
            raise ExtractionError(source, f"PDF text extraction failed: {exc}") from exc

        return [LoadedDocument(page_content=text, metadata={**metadata, "pdf_numpages": numpages})]
