"""HTML output; sections nest following the heading outline."""
from __future__ import annotations

from html import escape
from io import StringIO
from typing import TextIO

from ..document_corpus import ReferenceResolver, local_resolver
from ..document_models import (
    Block,
    CodeSample,
    Document,
    Heading,
    Inline,
    ListBlock,
    ListItem,
    Paragraph,
    Rule,
    plain_text,
)
from ..document_outline import Section, build_outline

_INLINE_TAGS = {"bold": "strong", "em": "em", "code": "code"}


class HtmlRenderer:
    """Write a :class:`Document` as HTML to a text sink."""

    def __init__(self, out: TextIO, resolver: ReferenceResolver) -> None:
        self.out = out
        self.resolver = resolver

    def inlines(self, inlines: list[Inline]) -> str:
        parts: list[str] = []
        for inline in inlines:
            text = escape(inline.text, quote=False)
            if inline.kind == "text":
                parts.append(text)
            elif inline.kind in _INLINE_TAGS:
                tag = _INLINE_TAGS[inline.kind]
                parts.append(f"<{tag}>{text}</{tag}>")
            elif inline.kind == "link":
                parts.append(f'<a href="{escape(inline.target or "")}">{text}</a>')
            else:
                href = self.resolver(inline.target or "")
                if href is None:
                    parts.append(f'<span class="xref unresolved">{text}</span>')
                else:
                    parts.append(f'<a class="xref" href="{escape(href)}">{text}</a>')
        return "".join(parts)

    def block(self, block: Block) -> None:
        write = self.out.write
        if isinstance(block, Heading):
            write(
                f'<h{block.level} id="{escape(block.anchor)}">'
                f"{self.inlines(block.inlines)}</h{block.level}>\n"
            )
        elif isinstance(block, Paragraph):
            write(f"<p>{self.inlines(block.inlines)}</p>\n")
        elif isinstance(block, CodeSample):
            write(f"<pre><code>{escape(block.text, quote=False)}</code></pre>\n")
        elif isinstance(block, Rule):
            write("<hr>\n")
        elif isinstance(block, ListBlock):
            self.list_block(block)

    def blocks(self, blocks: list[Block]) -> None:
        for block in blocks:
            self.block(block)

    def list_block(self, block: ListBlock) -> None:
        write = self.out.write
        if block.kind in {"label", "note"}:
            write(f'<dl class="{block.kind}-list">\n')
            for item in block.items:
                write(f"<dt>{escape(item.label or '', quote=False)}</dt>\n<dd>\n")
                self.blocks(item.blocks)
                write("</dd>\n")
            write("</dl>\n")
            return

        if block.kind == "bullet":
            write("<ul>\n")
            self.list_items(block.items)
            write("</ul>\n")
            return

        attributes = ""
        if block.kind == "lalpha":
            attributes += ' type="a"'
        elif block.kind == "ualpha":
            attributes += ' type="A"'
        if block.start not in (None, 1):
            attributes += f' start="{block.start}"'
        write(f"<ol{attributes}>\n")
        self.list_items(block.items)
        write("</ol>\n")

    def list_items(self, items: list[ListItem]) -> None:
        for item in items:
            self.out.write("<li>")
            self.blocks(item.blocks)
            self.out.write("</li>\n")

    def section(self, section: Section) -> None:
        self.out.write(f'<section class="level-{section.level}">\n')
        self.block(section.heading)
        self.blocks(section.blocks)
        for child in section.children:
            self.section(child)
        self.out.write("</section>\n")

    def document(self, document: Document) -> None:
        outline = build_outline(document)
        self.blocks(outline.preamble)
        for section in outline.sections:
            self.section(section)


def _document_title(document: Document) -> str:
    headings = document.headings()
    if headings:
        return plain_text(headings[0].inlines) or headings[0].text
    return document.name or "Document"


def render_html(
    document: Document,
    out: TextIO,
    *,
    resolver: ReferenceResolver | None = None,
    standalone: bool = False,
    title: str | None = None,
) -> None:
    """Render ``document`` as HTML into ``out``.

    ``standalone`` wraps the body in a complete HTML page. Cross references
    are resolved with ``resolver``; by default only headings of the document
    itself are known.
    """

    renderer = HtmlRenderer(out, resolver or local_resolver(document))
    if standalone:
        page_title = escape(title or _document_title(document), quote=False)
        out.write(
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{page_title}</title>\n</head>\n<body>\n"
        )
    renderer.document(document)
    if standalone:
        out.write("</body>\n</html>\n")


def to_html(document: Document, **options) -> str:
    buffer = StringIO()
    render_html(document, buffer, **options)
    return buffer.getvalue()


__all__ = ["HtmlRenderer", "render_html", "to_html"]
