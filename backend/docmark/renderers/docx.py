"""Utilities for exporting document trees into DOCX files."""
from __future__ import annotations

import re
from io import BytesIO
from pathlib import Path
from typing import BinaryIO

from docx import Document as DocxDocument
from docx.shared import Pt

from ..document_corpus import ReferenceResolver
from ..document_models import (
    Block,
    CodeSample,
    Document,
    Heading,
    Inline,
    ListBlock,
    Paragraph,
    Rule,
)
from .text import inline_text

_DEFAULT_EXPORT_DIR = Path(__file__).resolve().parent.parent / "exports"
_CODE_FONT = "Courier New"
_MAX_LIST_DEPTH = 3


def _sanitize_stem(value: str) -> str:
    """Return a filesystem-safe stem for the generated document."""

    sanitized = re.sub(r"[^0-9A-Za-z_-]+", "_", value).strip("._")
    return sanitized or "document"


def _ensure_export_dir(path: Path | None) -> Path:
    export_dir = Path(path or _DEFAULT_EXPORT_DIR)
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir


def _remove_placeholder_paragraph(document) -> None:
    """Remove the placeholder paragraph that python-docx creates by default."""

    if document.paragraphs:
        paragraph = document.paragraphs[0]
        element = paragraph._element  # type: ignore[attr-defined]
        parent = element.getparent()
        if parent is not None:
            parent.remove(element)


def _list_style(kind: str, depth: int) -> str:
    base = "List Bullet" if kind == "bullet" else "List Number"
    level = min(depth, _MAX_LIST_DEPTH)
    return base if level == 1 else f"{base} {level}"


class _DocxWriter:
    def __init__(self, target, resolver: ReferenceResolver | None) -> None:
        self.target = target
        self.resolver = resolver

    def runs(self, paragraph, inlines: list[Inline]) -> None:
        for inline in inlines:
            if inline.kind == "link":
                run = paragraph.add_run(inline_text([inline]))
                run.underline = True
                continue
            run = paragraph.add_run(inline.text)
            if inline.kind == "bold":
                run.bold = True
            elif inline.kind == "em":
                run.italic = True
            elif inline.kind == "code":
                run.font.name = _CODE_FONT
            elif inline.kind == "xref" and self.resolver is not None:
                run.underline = self.resolver(inline.target or "") is not None

    def blocks(self, blocks: list[Block], depth: int = 0) -> None:
        for block in blocks:
            self.block(block, depth)

    def block(self, block: Block, depth: int) -> None:
        if isinstance(block, Heading):
            heading = self.target.add_heading(level=block.level)
            self.runs(heading, block.inlines)
        elif isinstance(block, Paragraph):
            self.runs(self.target.add_paragraph(), block.inlines)
        elif isinstance(block, CodeSample):
            paragraph = self.target.add_paragraph()
            run = paragraph.add_run(block.text)
            run.font.name = _CODE_FONT
            run.font.size = Pt(9)
        elif isinstance(block, Rule):
            self.target.add_paragraph("* * *")
        elif isinstance(block, ListBlock):
            self.list_block(block, depth + 1)

    def list_block(self, block: ListBlock, depth: int) -> None:
        for item in block.items:
            if block.kind in {"label", "note"}:
                term = self.target.add_paragraph()
                term.add_run(item.label or "").bold = True
                self.blocks(item.blocks, depth)
                continue
            first, *rest = item.blocks or [Paragraph(text="")]
            if isinstance(first, Paragraph):
                paragraph = self.target.add_paragraph(style=_list_style(block.kind, depth))
                self.runs(paragraph, first.inlines)
            else:
                self.target.add_paragraph(style=_list_style(block.kind, depth))
                rest = [first, *rest]
            self.blocks(rest, depth)


def render_docx(document: Document, out: BinaryIO, *, resolver: ReferenceResolver | None = None) -> None:
    """Write ``document`` as a DOCX package into the binary sink ``out``."""

    target = DocxDocument()
    _remove_placeholder_paragraph(target)
    _DocxWriter(target, resolver).blocks(document.blocks)
    target.save(out)


def to_docx(document: Document, **options) -> bytes:
    buffer = BytesIO()
    render_docx(document, buffer, **options)
    return buffer.getvalue()


def docx_filename(source_name: str | None, stem_fallback: str = "document") -> str:
    """Return a safe ``.docx`` file name derived from a source document name."""

    stem = Path(source_name or "").stem or stem_fallback
    return f"{_sanitize_stem(stem)}.docx"


def _next_available_path(directory: Path, filename: str) -> Path:
    candidate = directory / filename
    if not candidate.exists():
        return candidate

    stem = candidate.stem
    suffix = candidate.suffix
    counter = 1
    while True:
        updated = directory / f"{stem}_{counter}{suffix}"
        if not updated.exists():
            return updated
        counter += 1


def export_document_to_docx(
    document: Document,
    *,
    source_filename: str | None = None,
    export_dir: Path | None = None,
    resolver: ReferenceResolver | None = None,
) -> tuple[Path, bytes]:
    """Create a DOCX file for ``document`` and return its path and contents."""

    payload = to_docx(document, resolver=resolver)

    export_directory = _ensure_export_dir(export_dir)
    filename = docx_filename(source_filename or document.name)
    target_path = _next_available_path(export_directory, filename)
    target_path.write_bytes(payload)

    return target_path, payload


__all__ = ["docx_filename", "export_document_to_docx", "render_docx", "to_docx"]
