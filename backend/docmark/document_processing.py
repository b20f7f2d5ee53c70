"""Utility helpers for reading markup documents from bytes, files and URLs."""
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable
from urllib.parse import urlparse

import httpx

from .core.config import settings
from .document_corpus import Corpus, LoadedDocument
from .document_models import ParseResult
from .document_parser import parse_markup

logger = logging.getLogger(__name__)


class UnsupportedDocumentError(RuntimeError):
    """Raised when a document cannot be parsed."""


class DocumentFetchError(RuntimeError):
    """Raised when a remote document cannot be retrieved."""


def _allowed_suffixes(suffixes: Iterable[str] | None) -> set[str]:
    return {suffix.lower() for suffix in (suffixes if suffixes is not None else settings.source_suffixes)}


def decode_payload(payload: bytes) -> str:
    """Decode document bytes, tolerating a BOM and non UTF-8 sources."""

    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning("Document is not valid UTF-8, decoding as Latin-1")
        return payload.decode("latin-1")


def load_document(
    filename: str,
    payload: bytes,
    *,
    suffixes: Iterable[str] | None = None,
) -> ParseResult:
    """Parse ``payload`` as the markup document called ``filename``."""

    suffix = Path(filename or "").suffix.lower()
    allowed = _allowed_suffixes(suffixes)
    if suffix not in allowed:
        raise UnsupportedDocumentError(
            f"Unsupported document type {suffix or '(none)'!r}; expected one of {', '.join(sorted(allowed))}"
        )
    return parse_markup(decode_payload(payload), name=filename or None)


def load_path(path: Path, *, name: str | None = None, suffixes: Iterable[str] | None = None) -> LoadedDocument:
    """Read and parse the file at ``path``."""

    path = Path(path)
    document_name = name or path.name
    result = load_document(document_name, path.read_bytes(), suffixes=suffixes)
    return LoadedDocument(name=document_name, result=result, path=path)


def load_corpus(root: Path, *, suffixes: Iterable[str] | None = None) -> Corpus:
    """Load every markup document below ``root`` into a :class:`Corpus`.

    Documents are named by their POSIX path relative to ``root``.
    """

    root = Path(root)
    allowed = _allowed_suffixes(suffixes)
    corpus = Corpus()
    for path in sorted(root.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in allowed:
            continue
        name = PurePosixPath(*path.relative_to(root).parts).as_posix()
        corpus.add(load_path(path, name=name, suffixes=allowed))
    logger.info("Loaded %d documents from %s", len(corpus), root)
    return corpus


def _name_from_url(url: str) -> str:
    name = PurePosixPath(urlparse(url).path).name
    return name or "index.rdoc"


async def fetch_document(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    suffixes: Iterable[str] | None = None,
) -> ParseResult:
    """Download ``url`` and parse it.

    The document is named after the last path segment of ``url``; its suffix
    must be an accepted markup suffix.
    """

    name = _name_from_url(url)
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.fetch_timeout, follow_redirects=True)
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.error("GET %s returned HTTP %s", url, exc.response.status_code)
        raise DocumentFetchError(f"{url} returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.error("Error fetching %s: %s", url, exc)
        raise DocumentFetchError(f"Could not fetch {url}: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()

    payload = response.content
    if len(payload) > settings.max_upload_bytes:
        raise DocumentFetchError(f"{url} is larger than {settings.max_upload_bytes} bytes")
    return load_document(name, payload, suffixes=suffixes)


__all__ = [
    "DocumentFetchError",
    "UnsupportedDocumentError",
    "decode_payload",
    "fetch_document",
    "load_corpus",
    "load_document",
    "load_path",
]
