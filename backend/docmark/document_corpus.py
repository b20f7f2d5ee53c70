"""Loaded document sets and ``rdoc-ref:`` cross reference resolution."""
from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, Iterator

from .document_models import Document, Heading, ListBlock, ParseResult, iter_inlines
from .document_outline import slugify

logger = logging.getLogger(__name__)

ReferenceResolver = Callable[[str], "str | None"]


@dataclass(slots=True)
class LoadedDocument:
    """A parsed document together with the name it is known by in a corpus."""

    name: str
    result: ParseResult
    path: Path | None = None

    @property
    def document(self) -> Document:
        return self.result.document


class DuplicateDocumentError(ValueError):
    """Raised when two loaded documents end up with the same corpus name."""


@dataclass(slots=True)
class ResolvedReference:
    document: str
    anchor: str | None = None


@dataclass(slots=True)
class ReferenceProblem:
    document: str
    line: int
    target: str

    def __str__(self) -> str:
        return f"{self.document}:{self.line}: unresolved reference {self.target!r}"


def output_name(name: str, suffix: str = ".html") -> str:
    """Return the rendered file name for the document called ``name``."""

    return PurePosixPath(name).with_suffix(suffix).as_posix()


def split_target(target: str) -> tuple[str, str | None]:
    """Split ``doc.rdoc@Some+Heading`` into ``("doc.rdoc", "Some Heading")``."""

    document, sep, section = target.partition("@")
    if not sep:
        return document, None
    return document, section.replace("+", " ")


def _iter_headings(blocks) -> Iterator[Heading]:
    for block in blocks:
        if isinstance(block, Heading):
            yield block
        elif isinstance(block, ListBlock):
            for item in block.items:
                yield from _iter_headings(item.blocks)


def find_heading(document: Document, label: str) -> Heading | None:
    """Find the heading of ``document`` whose anchor or text matches ``label``."""

    label = label.strip()
    if not label:
        return None
    headings = list(_iter_headings(document.blocks))
    slug = slugify(label)
    for heading in headings:
        if heading.anchor in {label, slug}:
            return heading
    folded = label.casefold()
    for heading in headings:
        if heading.text.casefold() == folded:
            return heading
    return None


def local_resolver(document: Document) -> ReferenceResolver:
    """Resolver that only knows the headings of ``document`` itself."""

    def resolve(target: str) -> str | None:
        name, section = split_target(target)
        if section is None:
            heading = find_heading(document, name)
        elif name in {"", document.name}:
            heading = find_heading(document, section)
        else:
            heading = None
        return f"#{heading.anchor}" if heading is not None else None

    return resolve


class Corpus:
    """The documents loaded from one source tree, keyed by relative name."""

    def __init__(self, documents: Iterable[LoadedDocument] = ()) -> None:
        self._documents: dict[str, LoadedDocument] = {}
        for loaded in documents:
            self.add(loaded)

    def add(self, loaded: LoadedDocument) -> None:
        if loaded.name in self._documents:
            logger.warning("Document %s loaded twice; keeping the latest copy", loaded.name)
        self._documents[loaded.name] = loaded

    def get(self, name: str) -> LoadedDocument | None:
        return self._documents.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._documents

    def __iter__(self) -> Iterator[LoadedDocument]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)

    def _lookup_document(self, name: str) -> LoadedDocument | None:
        if name in self._documents:
            return self._documents[name]
        stem = PurePosixPath(name).with_suffix("").as_posix() if name else ""
        for loaded in self._documents.values():
            if stem and PurePosixPath(loaded.name).with_suffix("").as_posix() == stem:
                return loaded
        return None

    def resolve(self, target: str, current: str | None = None) -> ResolvedReference | None:
        """Resolve ``target`` as seen from the document named ``current``."""

        name, section = split_target(target)

        if name:
            loaded = self._lookup_document(name)
            if loaded is not None:
                if section is None:
                    return ResolvedReference(document=loaded.name)
                heading = find_heading(loaded.document, section)
                if heading is None:
                    return None
                return ResolvedReference(document=loaded.name, anchor=heading.anchor)
            if section is not None:
                return None

        label = section if section is not None else name
        current_doc = self._documents.get(current) if current else None
        candidates = [current_doc] if current_doc is not None else []
        candidates.extend(doc for doc in self._documents.values() if doc is not current_doc)
        for loaded in candidates:
            heading = find_heading(loaded.document, label)
            if heading is not None:
                return ResolvedReference(document=loaded.name, anchor=heading.anchor)
        return None

    def href(self, reference: ResolvedReference, current: str | None, suffix: str = ".html") -> str:
        fragment = f"#{reference.anchor}" if reference.anchor else ""
        if reference.document == current and fragment:
            return fragment
        target_file = output_name(reference.document, suffix)
        base = posixpath.dirname(output_name(current, suffix)) if current else ""
        return posixpath.relpath(target_file, base or ".") + fragment

    def resolver_for(self, current: str | None, suffix: str = ".html") -> ReferenceResolver:
        def resolve(target: str) -> str | None:
            reference = self.resolve(target, current)
            if reference is None:
                return None
            return self.href(reference, current, suffix)

        return resolve


def check_references(corpus: Corpus) -> list[ReferenceProblem]:
    """List every cross reference in ``corpus`` that does not resolve."""

    problems: list[ReferenceProblem] = []
    for loaded in corpus:
        for block, inline in iter_inlines(loaded.document.blocks):
            if inline.kind != "xref" or inline.target is None:
                continue
            if corpus.resolve(inline.target, loaded.name) is None:
                problems.append(
                    ReferenceProblem(document=loaded.name, line=block.line, target=inline.target)
                )
    logger.info("Checked %d documents, %d unresolved references", len(corpus), len(problems))
    return problems


__all__ = [
    "Corpus",
    "DuplicateDocumentError",
    "LoadedDocument",
    "ReferenceProblem",
    "ReferenceResolver",
    "ResolvedReference",
    "check_references",
    "find_heading",
    "local_resolver",
    "output_name",
    "split_target",
]
