"""Renderers turning a document tree into output formats."""
from __future__ import annotations

from io import StringIO
from typing import Callable, TextIO

from ..document_models import Document
from .docx import docx_filename, export_document_to_docx, render_docx, to_docx
from .html import render_html, to_html
from .markup import render_markup, to_markup
from .text import render_text, to_text

TEXT_RENDERERS: dict[str, Callable[..., None]] = {
    "html": render_html,
    "text": render_text,
    "rdoc": render_markup,
}

FORMAT_SUFFIXES = {"html": ".html", "text": ".txt", "rdoc": ".rdoc", "docx": ".docx"}


class UnsupportedFormatError(ValueError):
    """Raised when a renderer is requested for an unknown format."""


def render_document(document: Document, fmt: str, out: TextIO, **options) -> None:
    """Render ``document`` in the text format ``fmt`` into ``out``.

    DOCX is binary and goes through :func:`render_docx` instead.
    """

    try:
        renderer = TEXT_RENDERERS[fmt]
    except KeyError:
        raise UnsupportedFormatError(
            f"Unknown output format {fmt!r}; expected one of {', '.join(sorted(TEXT_RENDERERS))}"
        ) from None
    renderer(document, out, **options)


def render_to_string(document: Document, fmt: str, **options) -> str:
    buffer = StringIO()
    render_document(document, fmt, buffer, **options)
    return buffer.getvalue()


__all__ = [
    "FORMAT_SUFFIXES",
    "TEXT_RENDERERS",
    "UnsupportedFormatError",
    "docx_filename",
    "export_document_to_docx",
    "render_docx",
    "render_document",
    "render_html",
    "render_markup",
    "render_text",
    "render_to_string",
    "to_docx",
    "to_html",
    "to_markup",
    "to_text",
]
