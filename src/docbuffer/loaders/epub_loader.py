"""EPUB loader joining chapter text in spine order."""

from __future__ import annotations

import asyncio
import contextlib
from io import BytesIO
import logging
import warnings
import zipfile

import ebooklib
from ebooklib import epub
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from lxml import etree

from docbuffer.errors import ChapterRetrieveError, ContainerParseError
from docbuffer.loaders.base import BufferLoader, payload_bytes
from docbuffer.models import ChapterRef, DocumentFormat, LoadedDocument, Metadata

logger = logging.getLogger(__name__)

_NON_CONTENT_TAGS = ["head", "script", "style", "noscript", "template"]
_CONTAINER_ERRORS = (
    epub.EpubException,
    zipfile.BadZipFile,
    etree.LxmlError,
    KeyError,
    ValueError,
)


def _read_container(source: str, data: bytes) -> epub.EpubBook:
    try:
        return epub.read_epub(BytesIO(data), {"ignore_ncx": True})
    except _CONTAINER_ERRORS as exc:
        raise ContainerParseError(source, f"EPUB container parse failed: {exc}") from exc
    except AttributeError as exc:
        # ebooklib dereferences the spine toc id without checking the manifest item exists
        raise ContainerParseError(source, f"EPUB container parse failed: {exc}") from exc


def reading_order(book: epub.EpubBook) -> list[ChapterRef]:
    """Return spine entries as chapter references, in declared order."""

    chapters: list[ChapterRef] = []
    for order, spine_entry in enumerate(book.spine):
        item_id = spine_entry[0] if isinstance(spine_entry, tuple) else spine_entry
        chapters.append(ChapterRef(id=item_id, order=order))
    return chapters


def chapter_text(html: bytes | str) -> str:
    """Reduce an (X)HTML document to the plain text of its body."""

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
        soup = BeautifulSoup(html, "lxml")
    for node in soup.find_all(_NON_CONTENT_TAGS):
        node.extract()
    body = soup.body or soup
    return body.get_text().strip()


class EPUBLoader(BufferLoader):
    """Extract text from every spine item of an EPUB container.

    Chapter bodies are fetched concurrently. When any fetch fails the
    remaining ones still run to completion, then the first failure in
    spine order is raised as :class:`ChapterRetrieveError`.
    """

    format = DocumentFormat.EPUB

    async def parse(self, raw: bytes | str, metadata: Metadata) -> list[LoadedDocument]:
        source = str(metadata["source"])
        logger.debug("Parsing EPUB with metadata %s", metadata)

        book = await asyncio.to_thread(_read_container, source, payload_bytes(raw))
        chapters = reading_order(book)
        logger.debug("EPUB %s declares %d spine item(s)", source, len(chapters))

        texts = await self._load_chapters(book, chapters, source)
        return [LoadedDocument(page_content="\n".join(texts), metadata=dict(metadata))]

    async def retrieve_chapter(self, book: epub.EpubBook, chapter: ChapterRef) -> bytes:
        """Fetch the raw markup of one spine item."""

        return await asyncio.to_thread(self._read_item, book, chapter)

    @staticmethod
    def _read_item(book: epub.EpubBook, chapter: ChapterRef) -> bytes:
        item = book.get_item_with_id(chapter.id)
        if item is None:
            raise LookupError(f"no manifest item with id {chapter.id!r}")
        if item.get_type() != ebooklib.ITEM_DOCUMENT:
            raise LookupError(f"item {chapter.id!r} is not an (X)HTML document")
        return item.content

    async def _load_chapters(self, book: epub.EpubBook, chapters: list[ChapterRef], source: str) -> list[str]:
        limit = self.settings.max_concurrent_chapters
        gate = asyncio.Semaphore(limit) if limit else contextlib.nullcontext()
        timeout = self.settings.chapter_timeout_seconds

        async def _load_one(chapter: ChapterRef) -> str:
            async with gate:
                try:
                    body = await asyncio.wait_for(self.retrieve_chapter(book, chapter), timeout=timeout)
                except asyncio.TimeoutError as exc:
                    raise ChapterRetrieveError(
                        source, f"Chapter retrieval timed out after {timeout}s", chapter.id
                    ) from exc
                except Exception as exc:
                    raise ChapterRetrieveError(source, f"Chapter retrieval failed: {exc}", chapter.id) from exc
            return chapter_text(body)

        results = await asyncio.gather(*(_load_one(chapter) for chapter in chapters), return_exceptions=True)

        ordered = [result for _chapter, result in sorted(zip(chapters, results), key=lambda pair: pair[0].order)]

        failures = [result for result in ordered if isinstance(result, BaseException)]
        for failure in failures:
            logger.warning("%s", failure)
        if failures:
            raise failures[0]
        return ordered
