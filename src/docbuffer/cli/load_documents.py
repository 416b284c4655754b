"""CLI command that loads PDF/EPUB sources and reports the extracted records."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from docbuffer.config import LoaderSettings
from docbuffer.errors import LoaderError
from docbuffer.loaders import loader_for_path
from docbuffer.models import DocumentFormat, LoadedDocument

logger = logging.getLogger(__name__)

_SUPPORTED_SUFFIXES = {fmt.extension for fmt in DocumentFormat}


def _is_supported(path: Path) -> bool:
    return path.suffix.lower() in _SUPPORTED_SUFFIXES


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(path for path in target.rglob("*") if path.is_file() and _is_supported(path))
    return []


def _serialize(document: LoadedDocument, *, include_content: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "source": document.metadata.get("source"),
        "metadata": dict(document.metadata),
        "characters": len(document.page_content),
    }
    if include_content:
        payload["page_content"] = document.page_content
    return payload


async def _load_all(files: list[Path], settings: LoaderSettings, *, include_content: bool) -> tuple[list, list]:
    results: list[dict[str, object]] = []
    errors: list[dict[str, str]] = []

    for file_path in files:
        try:
            documents = await loader_for_path(file_path, settings).aload()
        except (LoaderError, OSError) as exc:
            logger.warning("Failed to load %s: %s", file_path, exc)
            errors.append({"source_path": str(file_path), "error": str(exc)})
            continue

        results.extend(_serialize(document, include_content=include_content) for document in documents)

    return results, errors


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load PDF/EPUB files into text records")
    parser.add_argument("--path", required=True, help="Source file or directory")
    parser.add_argument("--include-content", action="store_true", help="Embed extracted text in the output")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")
    load_dotenv()

    try:
        settings = LoaderSettings.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    source_path = Path(args.path)
    files = _collect_inputs(source_path)
    results, errors = asyncio.run(_load_all(files, settings, include_content=args.include_content))

    payload = {
        "path": str(source_path),
        "processed": len(results),
        "results": results,
        "errors": errors,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if not errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
