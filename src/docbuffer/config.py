"""Runtime configuration for document loaders."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import os
from typing import Mapping


DEFAULT_PDF_PAGE_SEPARATOR = "\n\n"


def _parse_optional_float(*, name: str, raw_value: str | None, minimum: float = 0.001) -> float | None:
    if raw_value is None or not raw_value.strip():
        return None
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_optional_int(*, name: str, raw_value: str | None, minimum: int = 1) -> int | None:
    if raw_value is None or not raw_value.strip():
        return None
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class LoaderSettings:
    """Validated loader settings.

    ``chapter_timeout_seconds`` bounds each EPUB chapter retrieval and
    ``max_concurrent_chapters`` caps how many run at once. ``None`` leaves
    the respective limit off.
    """

    chapter_timeout_seconds: float | None = None
    max_concurrent_chapters: int | None = None
    pdf_page_separator: str = DEFAULT_PDF_PAGE_SEPARATOR

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LoaderSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        timeout = _parse_optional_float(
            name="DOCBUFFER_CHAPTER_TIMEOUT_SECONDS",
            raw_value=source.get("DOCBUFFER_CHAPTER_TIMEOUT_SECONDS"),
        )
        max_concurrent = _parse_optional_int(
            name="DOCBUFFER_MAX_CONCURRENT_CHAPTERS",
            raw_value=source.get("DOCBUFFER_MAX_CONCURRENT_CHAPTERS"),
        )

        separator_raw = source.get("DOCBUFFER_PDF_PAGE_SEPARATOR")
        if separator_raw is None:
            separator = DEFAULT_PDF_PAGE_SEPARATOR
        else:
            separator = codecs.decode(separator_raw, "unicode_escape")

        return cls(
            chapter_timeout_seconds=timeout,
            max_concurrent_chapters=max_concurrent,
            pdf_page_separator=separator,
        )
