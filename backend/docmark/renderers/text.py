"""Plain text output."""
from __future__ import annotations

import textwrap
from io import StringIO
from typing import TextIO

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

_UNDERLINES = "=-~^\"'"
_CODE_INDENT = "    "
_MIN_WIDTH = 10


def _alpha(number: int, upper: bool) -> str:
    letter = chr(ord("a") + (number - 1) % 26)
    return letter.upper() if upper else letter


def inline_text(inlines: list[Inline]) -> str:
    """Visible text of ``inlines``; link targets follow their labels in brackets."""

    parts: list[str] = []
    for inline in inlines:
        if inline.kind == "link" and inline.target and inline.target != inline.text:
            parts.append(f"{inline.text} ({inline.target})")
        else:
            parts.append(inline.text)
    return "".join(parts)


class TextRenderer:
    def __init__(self, width: int = 78) -> None:
        self.width = width

    def _wrap(self, text: str, width: int) -> list[str]:
        return textwrap.wrap(
            text,
            width=max(width, _MIN_WIDTH),
            break_long_words=False,
            break_on_hyphens=False,
        ) or [""]

    def blocks(self, blocks: list[Block], width: int) -> list[str]:
        lines: list[str] = []
        for block in blocks:
            if lines:
                lines.append("")
            lines.extend(self.block(block, width))
        return lines

    def block(self, block: Block, width: int) -> list[str]:
        if isinstance(block, Heading):
            title = inline_text(block.inlines) or block.text
            return [title, _UNDERLINES[block.level - 1] * len(title)]
        if isinstance(block, Paragraph):
            return self._wrap(inline_text(block.inlines), width)
        if isinstance(block, CodeSample):
            return [(_CODE_INDENT + line).rstrip() for line in block.text.split("\n")]
        if isinstance(block, Rule):
            return ["-" * max(width, _MIN_WIDTH)]
        if isinstance(block, ListBlock):
            return self.list_block(block, width)
        return []

    def list_block(self, block: ListBlock, width: int) -> list[str]:
        lines: list[str] = []
        number = block.start if block.start is not None else 1
        for item in block.items:
            if block.kind in {"label", "note"}:
                lines.append(item.label or "")
                body = self.blocks(item.blocks, width - len(_CODE_INDENT))
                lines.extend((_CODE_INDENT + line).rstrip() for line in body)
                continue

            if block.kind == "bullet":
                prefix = "* "
            elif block.kind == "number":
                prefix = f"{number}. "
            else:
                prefix = f"{_alpha(number, block.kind == 'ualpha')}. "
            number += 1

            body = self.blocks(item.blocks, width - len(prefix)) or [""]
            lines.append((prefix + body[0]).rstrip())
            padding = " " * len(prefix)
            lines.extend((padding + line).rstrip() for line in body[1:])
        return lines

    def render(self, document: Document, out: TextIO) -> None:
        lines = self.blocks(document.blocks, self.width)
        if lines:
            out.write("\n".join(lines))
            out.write("\n")


def render_text(document: Document, out: TextIO, *, width: int = 78, resolver=None) -> None:
    """Render ``document`` as plain text into ``out``.

    ``resolver`` is accepted for symmetry with the other renderers; plain text
    shows cross references by their label only.
    """

    TextRenderer(width=width).render(document, out)


def to_text(document: Document, **options) -> str:
    buffer = StringIO()
    render_text(document, buffer, **options)
    return buffer.getvalue()


__all__ = ["TextRenderer", "inline_text", "render_text", "to_text"]
