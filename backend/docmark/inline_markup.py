"""Inline markup: emphasis, tags, links and ``rdoc-ref:`` cross references."""
from __future__ import annotations

import re

from .document_models import Inline, InlineKind, ParseWarning

XREF_PREFIX = "rdoc-ref:"
LINK_PREFIX = "link:"

_TAG_KINDS: dict[str, InlineKind] = {
    "b": "bold",
    "em": "em",
    "i": "em",
    "tt": "code",
    "code": "code",
}
_DELIMITER_KINDS: dict[str, InlineKind] = {"*": "bold", "_": "em", "+": "code"}

_LINK_SCHEMES = ("http", "https", "ftp", "mailto")
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):(?!:)")

_TRAILING_PUNCTUATION = ".,;:!?)'\""

_TOKEN_RE = re.compile(
    r"""
      (?P<escape>\\(?P<escaped>rdoc-ref:|[\\*_+<>{}\[\]=\-]))
    | <(?P<tag>b|em|i|tt|code)>(?P<tag_body>.*?)</(?P=tag)>
    | \{(?P<brace_label>[^{}]*)\}\[(?P<brace_target>[^\[\]]*)\]
    | (?P<bad_brace>\{[^{}]*\}\[[^\]\s]*)
    | (?<![\w\]])(?P<word_label>[\w.\-]+)
      \[(?P<word_target>(?:rdoc-ref:|link:|https?://|ftp://|mailto:)[^\[\]]*)\]
    | (?<![\w/])rdoc-ref:(?P<xref_target>[^\s\[\]{}<>]*)
    | (?<![\w/])(?P<url>(?:https?|ftp)://[^\s<>\[\]{}]+|mailto:[^\s<>\[\]{}]+)
    | (?<![\w\\])(?P<delim>[*_+])(?P<word_body>(?:(?!(?P=delim))\S)+?)(?P=delim)(?!\w)
    """,
    re.VERBOSE,
)


def xref_label(target: str) -> str:
    """Return the text shown for a bare cross reference to ``target``."""

    if "@" in target:
        _, _, section = target.partition("@")
        if section:
            return section.replace("+", " ")
    return target


def _split_trailing(value: str) -> tuple[str, str]:
    stripped = value.rstrip(_TRAILING_PUNCTUATION)
    return stripped, value[len(stripped):]


def _allowed_link(target: str) -> bool:
    """Relative targets and the web and mail schemes are allowed."""

    scheme = _SCHEME_RE.match(target)
    return scheme is None or scheme.group(1).lower() in _LINK_SCHEMES


def _classify_target(target: str) -> tuple[InlineKind, str]:
    if target.startswith(XREF_PREFIX):
        return "xref", target[len(XREF_PREFIX):]
    if target.startswith(LINK_PREFIX):
        return "link", target[len(LINK_PREFIX):]
    return "link", target


class _InlineBuilder:
    """Collects inline spans, merging adjacent literal text."""

    def __init__(self, line: int, warnings: list[ParseWarning] | None) -> None:
        self.inlines: list[Inline] = []
        self.line = line
        self.warnings = warnings

    def text(self, value: str) -> None:
        if not value:
            return
        if self.inlines and self.inlines[-1].kind == "text":
            self.inlines[-1].text += value
        else:
            self.inlines.append(Inline(kind="text", text=value))

    def span(self, kind: InlineKind, value: str, target: str | None = None) -> None:
        self.inlines.append(Inline(kind=kind, text=value, target=target))

    def malformed(self, message: str, source: str) -> None:
        if self.warnings is not None:
            self.warnings.append(ParseWarning(line=self.line, message=message, source=source))
        self.text(source)

    def link(self, label: str, raw_target: str, source: str) -> None:
        target = raw_target.strip()
        if not target or any(char.isspace() for char in target):
            self.malformed("malformed link target", source)
            return
        kind, value = _classify_target(target)
        if not value:
            self.malformed("cross reference without target", source)
            return
        if kind == "link" and not _allowed_link(value):
            self.malformed("unsupported link scheme", source)
            return
        self.span(kind, label or xref_label(value), value)


def parse_inline(
    text: str,
    *,
    line: int = 0,
    warnings: list[ParseWarning] | None = None,
) -> list[Inline]:
    """Split ``text`` into :class:`Inline` spans.

    Malformed links and cross references are appended to ``warnings`` and kept
    as literal text. Unknown or unclosed markup is literal text as well, but
    it is not reported.
    """

    builder = _InlineBuilder(line, warnings)
    position = 0
    for match in _TOKEN_RE.finditer(text):
        builder.text(text[position:match.start()])
        position = match.end()
        source = match.group(0)

        if match.group("escape"):
            builder.text(match.group("escaped"))
        elif match.group("tag"):
            builder.span(_TAG_KINDS[match.group("tag")], match.group("tag_body"))
        elif match.group("brace_target") is not None:
            builder.link(match.group("brace_label").strip(), match.group("brace_target"), source)
        elif match.group("bad_brace"):
            builder.malformed("unterminated link target", source)
        elif match.group("word_label"):
            builder.link(match.group("word_label"), match.group("word_target"), source)
        elif match.group("xref_target") is not None:
            target, trailing = _split_trailing(match.group("xref_target"))
            if target:
                builder.span("xref", xref_label(target), target)
                builder.text(trailing)
            else:
                builder.malformed("cross reference without target", source)
        elif match.group("url"):
            url, trailing = _split_trailing(match.group("url"))
            builder.span("link", url, url)
            builder.text(trailing)
        else:
            builder.span(_DELIMITER_KINDS[match.group("delim")], match.group("word_body"))

    builder.text(text[position:])
    return builder.inlines


__all__ = ["LINK_PREFIX", "XREF_PREFIX", "parse_inline", "xref_label"]
