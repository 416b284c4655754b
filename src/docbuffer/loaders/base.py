"""Shared loader contract: acquire bytes, pick a representation, parse."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
import logging
import os
from pathlib import Path
from typing import ClassVar

from docbuffer.config import LoaderSettings
from docbuffer.models import (
    BLOB_SOURCE,
    BlobLike,
    DocumentFormat,
    InputReference,
    LoadedDocument,
    Metadata,
    PathInput,
    PayloadKind,
    RawPayload,
    resolve_input,
)

logger = logging.getLogger(__name__)

# latin-1 maps every byte to exactly one code point, so text payloads
# re-encode to the original container bytes.
TEXT_PAYLOAD_ENCODING = "latin-1"


def is_epub_file(path: str | os.PathLike[str]) -> bool:
    return Path(path).suffix.lower() == DocumentFormat.EPUB.extension


def choose_payload_kind(fmt: DocumentFormat, reference: InputReference) -> PayloadKind:
    """Return TEXT only for EPUB loaders reading an ``.epub`` path."""

    if fmt is DocumentFormat.EPUB and isinstance(reference, PathInput) and is_epub_file(reference.path):
        return PayloadKind.TEXT
    return PayloadKind.BINARY


def build_payload(data: bytes, kind: PayloadKind) -> RawPayload:
    if kind is PayloadKind.TEXT:
        return RawPayload(data=data.decode(TEXT_PAYLOAD_ENCODING), kind=kind)
    return RawPayload(data=data, kind=kind)


def payload_bytes(raw: bytes | str) -> bytes:
    """Recover container bytes from either payload representation."""

    if isinstance(raw, str):
        return raw.encode(TEXT_PAYLOAD_ENCODING)
    return bytes(raw)


async def acquire(reference: InputReference) -> tuple[bytes, Metadata]:
    """Buffer the whole source and describe where it came from.

    ``OSError`` from the filesystem or the blob stream propagates unchanged.
    """

    if isinstance(reference, PathInput):
        data = await asyncio.to_thread(reference.path.read_bytes)
        return data, {"source": str(reference.path)}

    blob: BlobLike = reference.blob
    data = await asyncio.to_thread(blob.read)
    return bytes(data), {"source": BLOB_SOURCE, "blobType": blob.content_type}


class BufferLoader(ABC):
    """Load a path or blob fully into memory and hand it to a format parser."""

    format: ClassVar[DocumentFormat]

    def __init__(self, source: str | os.PathLike[str] | BlobLike, settings: LoaderSettings | None = None) -> None:
        self._reference = resolve_input(source)
        self._settings = settings or LoaderSettings()
        self._payload_kind = choose_payload_kind(self.format, self._reference)

    @property
    def reference(self) -> InputReference:
        return self._reference

    @property
    def payload_kind(self) -> PayloadKind:
        """Representation this loader hands to ``parse``."""

        return self._payload_kind

    @property
    def settings(self) -> LoaderSettings:
        return self._settings

    @abstractmethod
    async def parse(self, raw: bytes | str, metadata: Metadata) -> list[LoadedDocument]:
        """Turn a buffered payload into normalized records."""

    async def aload(self) -> list[LoadedDocument]:
        data, metadata = await acquire(self._reference)
        payload = build_payload(data, self._payload_kind)
        logger.debug(
            "Acquired %d bytes from %s as %s payload",
            len(data),
            metadata["source"],
            payload.kind.value,
        )

        documents = await self.parse(payload.data, metadata)
        logger.debug("Loaded %d record(s) from %s", len(documents), metadata["source"])
        return documents

    def load(self) -> list[LoadedDocument]:
        """Blocking variant of :meth:`aload`; not for use inside a running loop."""

        return asyncio.run(self.aload())

