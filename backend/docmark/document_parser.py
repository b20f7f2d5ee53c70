"""Block level parser turning markup text into a :class:`Document` tree."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .document_models import (
    Block,
    CodeSample,
    Document,
    Heading,
    ListBlock,
    ListItem,
    ListKind,
    Paragraph,
    ParseResult,
    ParseWarning,
    Rule,
    plain_text,
)
from .document_outline import AnchorRegistry
from .inline_markup import parse_inline

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(={1,6})(?!=)[ \t]*(\S.*)$")
_RULE_RE = re.compile(r"^-{3,}$")

# Order matters: a bullet "- " must not shadow the rule above.
_LIST_PATTERNS: list[tuple[ListKind, re.Pattern[str]]] = [
    ("bullet", re.compile(r"^(?P<token>(?P<marker>[*-]))(?:[ \t]+(?P<text>.*))?$")),
    ("number", re.compile(r"^(?P<token>(?P<marker>\d+)\.)(?:[ \t]+(?P<text>.*))?$")),
    ("lalpha", re.compile(r"^(?P<token>(?P<marker>[a-z])\.)(?:[ \t]+(?P<text>.*))?$")),
    ("ualpha", re.compile(r"^(?P<token>(?P<marker>[A-Z])\.)(?:[ \t]+(?P<text>.*))?$")),
    ("label", re.compile(r"^(?P<token>\[(?P<marker>[^\]]+)\])(?:[ \t]+(?P<text>.*))?$")),
    ("note", re.compile(r"^(?P<token>(?P<marker>[^\s:].*?)::)(?:[ \t]+(?P<text>.*))?$")),
]


@dataclass(slots=True)
class _Line:
    number: int
    text: str

    @property
    def blank(self) -> bool:
        return not self.text

    @property
    def indent(self) -> int:
        return len(self.text) - len(self.text.lstrip(" "))

    def dedent(self, amount: int) -> _Line:
        return _Line(self.number, self.text[min(amount, self.indent):])


@dataclass(slots=True)
class _ListMarker:
    kind: ListKind
    marker: str
    text: str
    content_column: int
    token_width: int


def _match_list_marker(text: str) -> _ListMarker | None:
    if text.startswith("\\") or _RULE_RE.match(text):
        return None
    for kind, pattern in _LIST_PATTERNS:
        match = pattern.match(text)
        if match is None:
            continue
        item_text = match.group("text") or ""
        column = match.start("text") if match.group("text") is not None else 0
        return _ListMarker(
            kind=kind,
            marker=match.group("marker"),
            text=item_text,
            content_column=column,
            token_width=match.end("token"),
        )
    return None


def _starts_block(line: _Line) -> bool:
    """Return ``True`` when ``line`` interrupts a running paragraph."""

    if line.blank or line.indent:
        return True
    text = line.text
    if text.startswith("\\"):
        return False
    return bool(_HEADING_RE.match(text) or _RULE_RE.match(text) or _match_list_marker(text))


def _alpha_start(marker: str) -> int:
    return ord(marker.lower()) - ord("a") + 1


class _BlockParser:
    """Single pass parser over pre-split lines.

    Nested contexts (list item bodies) are parsed by re-running
    :meth:`parse_blocks` on the item's dedented lines.
    """

    def __init__(self) -> None:
        self.warnings: list[ParseWarning] = []
        self.anchors = AnchorRegistry()

    def parse_blocks(self, lines: list[_Line]) -> list[Block]:
        blocks: list[Block] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            if line.blank:
                index += 1
                continue
            if line.indent:
                block, index = self._parse_verbatim(lines, index)
            elif heading := _HEADING_RE.match(line.text):
                block = self._make_heading(heading, line)
                index += 1
            elif _RULE_RE.match(line.text):
                block = Rule(line=line.number)
                index += 1
            elif (marker := _match_list_marker(line.text)) is not None:
                block, index = self._parse_list(lines, index, marker)
            else:
                block, index = self._parse_paragraph(lines, index)
            blocks.append(block)
        return blocks

    def _make_heading(self, match: re.Match[str], line: _Line) -> Heading:
        text = match.group(2).strip()
        inlines = parse_inline(text, line=line.number, warnings=self.warnings)
        return Heading(
            text=text,
            level=len(match.group(1)),
            inlines=inlines,
            anchor=self.anchors.register(plain_text(inlines)),
            line=line.number,
        )

    def _parse_paragraph(self, lines: list[_Line], index: int) -> tuple[Paragraph, int]:
        first = lines[index]
        parts = [first.text.strip()]
        index += 1
        while index < len(lines) and not _starts_block(lines[index]):
            parts.append(lines[index].text.strip())
            index += 1
        text = " ".join(parts)
        inlines = parse_inline(text, line=first.number, warnings=self.warnings)
        return Paragraph(text=text, inlines=inlines, line=first.number), index

    def _parse_verbatim(self, lines: list[_Line], index: int) -> tuple[CodeSample, int]:
        first = lines[index]
        start = end = index
        while index < len(lines) and (lines[index].blank or lines[index].indent):
            if not lines[index].blank:
                end = index + 1
            index += 1
        # Trailing blank lines are left to the caller.
        collected = lines[start:end]
        margin = min(line.indent for line in collected if not line.blank)
        text = "\n".join(line.dedent(margin).text for line in collected)
        return CodeSample(text=text, line=first.number), end

    def _collect_item_lines(self, lines: list[_Line], index: int) -> tuple[list[_Line], int]:
        """Collect continuation lines of a list item starting at ``index``."""

        body: list[_Line] = []
        while index < len(lines):
            line = lines[index]
            if line.blank:
                following = next((item for item in lines[index:] if not item.blank), None)
                if following is None or not following.indent:
                    break
                body.append(line)
            elif line.indent:
                body.append(line)
            else:
                break
            index += 1
        return body, index

    def _parse_list(self, lines: list[_Line], index: int, marker: _ListMarker) -> tuple[ListBlock, int]:
        first = lines[index]
        items: list[ListItem] = []
        start: int | None = None
        if marker.kind == "number":
            start = int(marker.marker)
        elif marker.kind in {"lalpha", "ualpha"}:
            start = _alpha_start(marker.marker)

        current: _ListMarker | None = marker
        while current is not None and current.kind == marker.kind:
            item_line = lines[index]
            continuation, index = self._collect_item_lines(lines, index + 1)
            column = current.content_column
            if not column:
                column = next((line.indent for line in continuation if not line.blank), 0)
                if current.kind not in {"label", "note"}:
                    # Short markers: deeper continuation is a code sample.
                    column = min(column, current.token_width + 1)
            body: list[_Line] = []
            if current.text:
                body.append(_Line(item_line.number, current.text))
            body.extend(line.dedent(column) for line in continuation)

            label = current.marker if current.kind in {"label", "note"} else None
            items.append(ListItem(blocks=self.parse_blocks(body), label=label))

            # Blank lines may separate items of the same list.
            lookahead = index
            while lookahead < len(lines) and lines[lookahead].blank:
                lookahead += 1
            if lookahead >= len(lines) or lines[lookahead].indent:
                break
            current = _match_list_marker(lines[lookahead].text)
            if current is not None and current.kind == marker.kind:
                index = lookahead

        return ListBlock(kind=marker.kind, items=items, start=start, line=first.number), index


def split_lines(text: str) -> list[_Line]:
    """Split ``text`` into numbered lines with tabs expanded and trailing blanks removed."""

    return [
        _Line(number, raw.expandtabs(8).rstrip())
        for number, raw in enumerate(text.splitlines(), start=1)
    ]


def parse_markup(text: str, *, name: str | None = None) -> ParseResult:
    """Parse markup ``text`` into a :class:`ParseResult`.

    The parse never fails on malformed markup: problems are reported in
    :attr:`ParseResult.warnings` and the offending spans are kept as text.
    """

    parser = _BlockParser()
    blocks = parser.parse_blocks(split_lines(text))
    logger.debug(
        "Parsed %s: %d blocks, %d warnings", name or "<text>", len(blocks), len(parser.warnings)
    )
    return ParseResult(document=Document(blocks=blocks, name=name), warnings=parser.warnings)


__all__ = ["parse_markup", "split_lines"]
