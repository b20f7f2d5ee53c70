"""Heading outline: section nesting and heading anchors."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field

from .document_models import Block, Document, Heading


def slugify(text: str, max_len: int = 60) -> str:
    """Turn heading text into a safe ASCII identifier."""

    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^\w\s-]", "", text).strip().lower()
    text = re.sub(r"[\s_]+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text[:max_len].strip("-") or "section"


class AnchorRegistry:
    """Hands out unique anchors; repeated titles get ``-1``, ``-2`` suffixes."""

    def __init__(self) -> None:
        self._seen: dict[str, int] = {}

    def register(self, title: str) -> str:
        base = slugify(title)
        count = self._seen.get(base, 0)
        self._seen[base] = count + 1
        anchor = base if count == 0 else f"{base}-{count}"
        # "intro-1" may also be a real title; keep going until unused.
        while anchor != base and anchor in self._seen:
            count += 1
            self._seen[base] = count + 1
            anchor = f"{base}-{count}"
        if anchor != base:
            self._seen[anchor] = 1
        return anchor


@dataclass(slots=True)
class Section:
    heading: Heading
    blocks: list[Block] = field(default_factory=list)
    children: list[Section] = field(default_factory=list)

    @property
    def level(self) -> int:
        return self.heading.level

    def walk(self):
        """Yield this section and all nested sections depth first."""

        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(slots=True)
class Outline:
    """Blocks before the first heading plus the top level sections."""

    preamble: list[Block] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)

    def walk(self):
        for section in self.sections:
            yield from section.walk()


def build_outline(document: Document) -> Outline:
    """Nest the top level blocks of ``document`` under their headings.

    A heading of level N becomes a child of the nearest preceding heading of
    level < N; skipped levels nest under the nearest lower heading.
    """

    outline = Outline()
    stack: list[Section] = []

    for block in document.blocks:
        if isinstance(block, Heading):
            while stack and stack[-1].level >= block.level:
                stack.pop()
            section = Section(heading=block)
            if stack:
                stack[-1].children.append(section)
            else:
                outline.sections.append(section)
            stack.append(section)
        elif stack:
            stack[-1].blocks.append(block)
        else:
            outline.preamble.append(block)

    return outline


__all__ = ["AnchorRegistry", "Outline", "Section", "build_outline", "slugify"]
