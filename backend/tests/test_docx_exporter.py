"""Tests for the DOCX renderer and exporter."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from docx import Document as DocxDocument

from docmark import parse_markup
from docmark.renderers import docx_filename, export_document_to_docx, to_docx


def _reopen(payload: bytes):
    return DocxDocument(BytesIO(payload))


def test_docx_structure(sample_markup: str) -> None:
    document = _reopen(to_docx(parse_markup(sample_markup).document))
    paragraphs = document.paragraphs

    headings = [(p.style.name, p.text) for p in paragraphs if p.style.name.startswith("Heading")]
    assert headings == [("Heading 1", "Modules"), ("Heading 2", "Visibility"), ("Heading 3", "Notes")]

    bullets = [(p.style.name, p.text) for p in paragraphs if p.style.name.startswith("List Bullet")]
    assert bullets == [
        ("List Bullet", "public"),
        ("List Bullet", "protected"),
        ("List Bullet 2", "only within the class"),
        ("List Bullet", "private"),
    ]
    assert [p.text for p in paragraphs if p.style.name == "List Number"] == ["first", "second"]


def test_docx_inline_formatting() -> None:
    document = _reopen(to_docx(parse_markup("*bold* _em_ +code+\n").document))
    runs = {run.text: run for run in document.paragraphs[0].runs}

    assert runs["bold"].bold is True
    assert runs["em"].italic is True
    assert runs["code"].font.name == "Courier New"


def test_export_never_overwrites(tmp_path: Path) -> None:
    document = parse_markup("= Title\n", name="guide.rdoc").document

    first, payload = export_document_to_docx(document, export_dir=tmp_path)
    second, _ = export_document_to_docx(document, export_dir=tmp_path)

    assert first == tmp_path / "guide.docx"
    assert second == tmp_path / "guide_1.docx"
    assert first.read_bytes() == payload


def test_docx_filename_strips_directories() -> None:
    assert docx_filename("guide/intro.rdoc") == "intro.docx"
    assert docx_filename("../a b.txt") == "a_b.docx"
    assert docx_filename(None) == "document.docx"
