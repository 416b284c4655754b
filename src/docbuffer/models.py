"""Canonical data structures shared by all document loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
import os
from pathlib import Path
from typing import BinaryIO, Protocol, Union, runtime_checkable

Metadata = dict[str, Union[str, int]]

BLOB_SOURCE = "blob"


class DocumentFormat(Enum):
    """Formats a loader can claim, keyed by their file extension."""

    PDF = ".pdf"
    EPUB = ".epub"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "DocumentFormat | None":
        suffix = Path(path).suffix.lower()
        for fmt in cls:
            if fmt.extension == suffix:
                return fmt
        return None


class PayloadKind(Enum):
    """Representation handed to a parser: raw bytes or decoded characters."""

    BINARY = "binary"
    TEXT = "text"


@runtime_checkable
class BlobLike(Protocol):
    """In-memory binary handle with a declared MIME type."""

    content_type: str

    def read(self) -> bytes:
        """Drain and return every remaining byte of the stream."""


@dataclass(slots=True)
class Blob:
    """Binary stream paired with its declared content type."""

    stream: BinaryIO
    content_type: str = "application/octet-stream"

    @classmethod
    def from_bytes(cls, data: bytes, content_type: str = "application/octet-stream") -> "Blob":
        return cls(stream=BytesIO(data), content_type=content_type)

    def read(self) -> bytes:
        return self.stream.read()


@dataclass(frozen=True, slots=True)
class PathInput:
    """Input reference pointing at a file on disk."""

    path: Path


@dataclass(frozen=True, slots=True)
class BlobInput:
    """Input reference wrapping an in-memory blob."""

    blob: BlobLike


InputReference = Union[PathInput, BlobInput]


def resolve_input(source: str | os.PathLike[str] | BlobLike) -> InputReference:
    """Normalize a loader source into exactly one input reference variant."""

    if isinstance(source, (str, os.PathLike)):
        return PathInput(path=Path(source))
    if isinstance(source, BlobLike):
        return BlobInput(blob=source)
    raise TypeError(f"Expected a path or a blob with read() and content_type, got {type(source).__name__}")


@dataclass(frozen=True, slots=True)
class RawPayload:
    """Buffered file content tagged with how the parser must interpret it."""

    data: bytes | str
    kind: PayloadKind


@dataclass(frozen=True, slots=True)
class ChapterRef:
    """A retrievable content item at its position in the reading order."""

    id: str
    order: int


@dataclass(slots=True)
class LoadedDocument:
    """Normalized text record emitted by a loader."""

    page_content: str
    metadata: Metadata = field(default_factory=dict)
