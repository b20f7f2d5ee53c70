"""Helpers for converting parser results into API schemas."""
from __future__ import annotations

from .document_models import (
    Block,
    CodeSample,
    Heading,
    Inline,
    ListBlock,
    Paragraph,
    ParseResult,
    ParseWarning,
)
from .document_outline import Section, build_outline
from .schemas import (
    BlockSchema,
    DocumentTreeResponse,
    InlineSchema,
    ListItemSchema,
    SectionSchema,
    WarningSchema,
)


def _inlines(inlines: list[Inline]) -> list[InlineSchema]:
    return [InlineSchema(kind=inline.kind, text=inline.text, target=inline.target) for inline in inlines]


def _block(block: Block) -> BlockSchema:
    if isinstance(block, Heading):
        return BlockSchema(
            type="heading",
            line=block.line,
            text=block.text,
            level=block.level,
            anchor=block.anchor,
            inlines=_inlines(block.inlines),
        )
    if isinstance(block, Paragraph):
        return BlockSchema(type="paragraph", line=block.line, text=block.text, inlines=_inlines(block.inlines))
    if isinstance(block, CodeSample):
        return BlockSchema(type="code", line=block.line, text=block.text)
    if isinstance(block, ListBlock):
        items = [
            ListItemSchema(label=item.label, blocks=[_block(child) for child in item.blocks])
            for item in block.items
        ]
        return BlockSchema(type="list", line=block.line, kind=block.kind, start=block.start, items=items)
    return BlockSchema(type="rule", line=block.line)


def _section(section: Section) -> SectionSchema:
    return SectionSchema(
        title=section.heading.text,
        anchor=section.heading.anchor,
        level=section.level,
        children=[_section(child) for child in section.children],
    )


def build_warnings(warnings: list[ParseWarning]) -> list[WarningSchema]:
    return [WarningSchema(line=item.line, message=item.message, source=item.source) for item in warnings]


def build_document_tree(result: ParseResult) -> DocumentTreeResponse:
    """Convert a :class:`ParseResult` to an API response schema."""

    document = result.document
    outline = build_outline(document)
    return DocumentTreeResponse(
        name=document.name,
        blocks=[_block(block) for block in document.blocks],
        outline=[_section(section) for section in outline.sections],
        warnings=build_warnings(result.warnings),
    )


__all__ = ["build_document_tree", "build_warnings"]
