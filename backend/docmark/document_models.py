"""Common document model definitions used across parsing and rendering."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

InlineKind = Literal["text", "bold", "em", "code", "link", "xref"]
ListKind = Literal["bullet", "number", "lalpha", "ualpha", "label", "note"]


@dataclass(slots=True)
class Inline:
    """A span of paragraph or heading text.

    Parameters
    ----------
    kind:
        ``text`` for literal text, ``bold``/``em``/``code`` for emphasis,
        ``link`` for ordinary links and ``xref`` for ``rdoc-ref:`` targets.
    text:
        Literal text of the span, or the label of a link.
    target:
        Link target for ``link`` and ``xref`` spans.
    """

    kind: InlineKind
    text: str
    target: str | None = None


@dataclass(slots=True)
class Heading:
    text: str
    level: int
    inlines: list[Inline] = field(default_factory=list, compare=False)
    anchor: str = field(default="", compare=False)
    line: int = field(default=0, compare=False)


@dataclass(slots=True)
class Paragraph:
    text: str
    inlines: list[Inline] = field(default_factory=list, compare=False)
    line: int = field(default=0, compare=False)


@dataclass(slots=True)
class CodeSample:
    """Verbatim text; never interpreted as markup."""

    text: str
    line: int = field(default=0, compare=False)


@dataclass(slots=True)
class Rule:
    line: int = field(default=0, compare=False)


@dataclass(slots=True)
class ListItem:
    blocks: list[Block]
    label: str | None = None


@dataclass(slots=True)
class ListBlock:
    kind: ListKind
    items: list[ListItem]
    start: int | None = None
    line: int = field(default=0, compare=False)


Block = Union[Heading, Paragraph, CodeSample, ListBlock, Rule]


@dataclass(slots=True)
class Document:
    blocks: list[Block]
    name: str | None = field(default=None, compare=False)

    def headings(self) -> list[Heading]:
        """Top level headings in document order."""

        return [block for block in self.blocks if isinstance(block, Heading)]


@dataclass(slots=True)
class ParseWarning:
    """A recoverable markup problem found while parsing."""

    line: int
    message: str
    source: str = ""

    def __str__(self) -> str:
        if self.source:
            return f"line {self.line}: {self.message}: {self.source!r}"
        return f"line {self.line}: {self.message}"


@dataclass(slots=True)
class ParseResult:
    document: Document
    warnings: list[ParseWarning] = field(default_factory=list)


def plain_text(inlines: list[Inline]) -> str:
    """Return the visible text of ``inlines`` without any markup."""

    return "".join(inline.text for inline in inlines)


def iter_inlines(blocks: list[Block]):
    """Yield ``(block, inline)`` pairs for every inline span, nested lists included."""

    for block in blocks:
        if isinstance(block, (Heading, Paragraph)):
            for inline in block.inlines:
                yield block, inline
        elif isinstance(block, ListBlock):
            for item in block.items:
                yield from iter_inlines(item.blocks)


__all__ = [
    "Block",
    "CodeSample",
    "Document",
    "Heading",
    "Inline",
    "InlineKind",
    "ListBlock",
    "ListItem",
    "ListKind",
    "ParseResult",
    "ParseWarning",
    "Paragraph",
    "Rule",
    "iter_inlines",
    "plain_text",
]
