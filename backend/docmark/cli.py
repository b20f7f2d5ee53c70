"""
docmark: command line tool for markup documentation.

Usage:
  docmark <command> [options]

Commands:
  render   Render documents (files or directories) to html, text, rdoc or docx.
  check    Report markup warnings and unresolved cross references in a tree.
  tree     Print the heading outline of a document.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from docmark import __version__
from docmark.core.config import settings
from docmark.document_corpus import (
    Corpus,
    DuplicateDocumentError,
    LoadedDocument,
    check_references,
    output_name,
)
from docmark.document_outline import Section, build_outline
from docmark.document_processing import UnsupportedDocumentError, load_corpus, load_path
from docmark.renderers import FORMAT_SUFFIXES, export_document_to_docx, render_docx, render_document

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("docmark.cli")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _common_parent(files: list[Path]) -> Path | None:
    if len(files) < 2:
        return None
    return Path(os.path.commonpath([path.resolve().parent for path in files]))


def _collect(paths: list[Path]) -> Corpus:
    """Load ``paths`` into one corpus.

    Files given directly are named relative to their common parent directory.
    """

    base = _common_parent([path for path in paths if not path.is_dir()])
    corpus = Corpus()
    for path in paths:
        if path.is_dir():
            loaded_documents = list(load_corpus(path, suffixes=settings.source_suffixes))
        else:
            name = path.resolve().relative_to(base).as_posix() if base else path.name
            loaded_documents = [load_path(path, name=name, suffixes=settings.source_suffixes)]
        for loaded in loaded_documents:
            if loaded.name in corpus:
                raise DuplicateDocumentError(
                    f"More than one document is named {loaded.name!r}; render them separately"
                )
            corpus.add(loaded)
    return corpus


def _print_warnings(corpus: Corpus) -> int:
    count = 0
    for loaded in corpus:
        for warning in loaded.result.warnings:
            err_console.print(f"[yellow]warning[/yellow] {loaded.name}: {warning}")
            count += 1
    return count


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------

def _render_one(loaded: LoadedDocument, corpus: Corpus, args: argparse.Namespace) -> None:
    suffix = FORMAT_SUFFIXES[args.format]
    resolver = corpus.resolver_for(loaded.name, suffix)

    if args.format == "docx" and args.output is None:
        target, _ = export_document_to_docx(
            loaded.document,
            source_filename=loaded.name,
            export_dir=settings.export_dir,
            resolver=resolver,
        )
        console.print(f"[green]DOCX:[/green] {target}")
        return

    if args.format == "docx":
        target = args.output / output_name(loaded.name, suffix)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("wb") as handle:
            render_docx(loaded.document, handle, resolver=resolver)
        console.print(f"[green]DOCX:[/green] {target}")
        return

    options: dict[str, object] = {"resolver": resolver}
    if args.format == "html":
        options["standalone"] = args.standalone
    elif args.format == "text":
        options["width"] = args.width

    if args.output is None:
        render_document(loaded.document, args.format, sys.stdout, **options)
        return

    target = args.output / output_name(loaded.name, suffix)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        render_document(loaded.document, args.format, handle, **options)
    console.print(f"[green]{args.format}:[/green] {target}")


def cmd_render(args: argparse.Namespace) -> int:
    corpus = _collect(args.paths)
    _print_warnings(corpus)
    for loaded in corpus:
        _render_one(loaded, corpus, args)
    return 0


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------

def cmd_check(args: argparse.Namespace) -> int:
    corpus = load_corpus(args.root, suffixes=settings.source_suffixes)
    warning_count = _print_warnings(corpus)
    problems = check_references(corpus)

    if problems:
        table = Table(title="Unresolved references", box=box.SIMPLE)
        table.add_column("document")
        table.add_column("line", justify="right")
        table.add_column("target")
        for problem in problems:
            table.add_row(problem.document, str(problem.line), problem.target)
        console.print(table)

    console.print(
        f"{len(corpus)} documents, {warning_count} markup warnings, "
        f"{len(problems)} unresolved references"
    )
    if problems and args.strict:
        return 1
    return 0


# ---------------------------------------------------------------------------
# tree
# ---------------------------------------------------------------------------

def _add_section(node: Tree, section: Section) -> None:
    child = node.add(f"{section.heading.text} [dim]#{section.heading.anchor}[/dim]")
    for nested in section.children:
        _add_section(child, nested)


def cmd_tree(args: argparse.Namespace) -> int:
    loaded = load_path(args.path, suffixes=settings.source_suffixes)
    outline = build_outline(loaded.document)
    root = Tree(f"[bold]{loaded.name}[/bold]")
    for section in outline.sections:
        _add_section(root, section)
    console.print(root)
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docmark",
        description="docmark: render and check markup documentation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"docmark {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")

    subparsers = parser.add_subparsers(title="commands", metavar="<command>", dest="command")
    subparsers.required = True

    render = subparsers.add_parser("render", help="Render documents.")
    render.add_argument("paths", nargs="+", type=Path, help="Files or directories to render.")
    render.add_argument(
        "-f", "--format",
        choices=sorted(FORMAT_SUFFIXES),
        default=settings.default_format,
        help="Output format (default: %(default)s).",
    )
    render.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output directory; without it docx goes to the export directory, other formats to stdout.",
    )
    render.add_argument("--standalone", action="store_true", help="Full HTML pages.")
    render.add_argument("--width", type=int, default=settings.text_width, help="Text wrap column.")
    render.set_defaults(func=cmd_render)

    check = subparsers.add_parser("check", help="Check cross references.")
    check.add_argument("root", type=Path, help="Documentation root directory.")
    check.add_argument("--strict", action="store_true", help="Exit with 1 on unresolved references.")
    check.set_defaults(func=cmd_check)

    tree = subparsers.add_parser("tree", help="Print the heading outline.")
    tree.add_argument("path", type=Path, help="Document to outline.")
    tree.set_defaults(func=cmd_tree)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s %(message)s",
    )
    try:
        return args.func(args)
    except (UnsupportedDocumentError, DuplicateDocumentError) as exc:
        err_console.print(f"[red]{exc}[/red]")
        return 2
    except OSError as exc:
        logger.debug("I/O failure", exc_info=True)
        err_console.print(f"[red]{exc}[/red]")
        return 2


if __name__ == "__main__":
    sys.exit(main())
