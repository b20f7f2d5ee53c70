"""RDoc markup output; parsing the result yields an equal document tree."""
from __future__ import annotations

from io import StringIO
from typing import TextIO

from ..document_models import Block, CodeSample, Document, Heading, ListBlock, Paragraph, Rule

_CODE_INDENT = "  "
_LABEL_INDENT = "  "


def _alpha(number: int, upper: bool) -> str:
    letter = chr(ord("a") + (number - 1) % 26)
    return letter.upper() if upper else letter


def _indent(lines: list[str], padding: str) -> list[str]:
    return [padding + line if line else "" for line in lines]


def markup_lines(blocks: list[Block]) -> list[str]:
    lines: list[str] = []
    for block in blocks:
        if lines:
            lines.append("")
        lines.extend(_block_lines(block))
    return lines


def _block_lines(block: Block) -> list[str]:
    if isinstance(block, Heading):
        return ["=" * block.level + " " + block.text]
    if isinstance(block, Paragraph):
        return [block.text]
    if isinstance(block, CodeSample):
        return _indent(block.text.split("\n"), _CODE_INDENT)
    if isinstance(block, Rule):
        return ["---"]
    if isinstance(block, ListBlock):
        return _list_lines(block)
    return []


def _list_lines(block: ListBlock) -> list[str]:
    lines: list[str] = []
    number = block.start if block.start is not None else 1
    for item in block.items:
        body = markup_lines(item.blocks)

        if block.kind in {"label", "note"}:
            marker = f"[{item.label}]" if block.kind == "label" else f"{item.label}::"
            lines.append(marker)
            lines.extend(_indent(body, _LABEL_INDENT))
            continue

        if block.kind == "bullet":
            token = "*"
        elif block.kind == "number":
            token = f"{number}."
        else:
            token = f"{_alpha(number, block.kind == 'ualpha')}."
        number += 1

        padding = " " * (len(token) + 1)
        if item.blocks and not isinstance(item.blocks[0], CodeSample):
            lines.append(f"{token} {body[0]}")
            lines.extend(_indent(body[1:], padding))
        else:
            lines.append(token)
            lines.extend(_indent(body, padding))
    return lines


def render_markup(document: Document, out: TextIO, *, resolver=None) -> None:
    """Render ``document`` back to RDoc markup into ``out``."""

    lines = markup_lines(document.blocks)
    if lines:
        out.write("\n".join(lines))
        out.write("\n")


def to_markup(document: Document) -> str:
    buffer = StringIO()
    render_markup(document, buffer)
    return buffer.getvalue()


__all__ = ["markup_lines", "render_markup", "to_markup"]
