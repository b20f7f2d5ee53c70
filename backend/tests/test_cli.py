"""Tests for the docmark command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from docmark.cli import main
from docmark.core.config import settings


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    (root / "guide").mkdir(parents=True)
    (root / "modules.rdoc").write_text("= Modules\n\n== Visibility\n\n=== Private\n", encoding="utf-8")
    (root / "guide" / "intro.rdoc").write_text(
        "= Intro\n\nSee rdoc-ref:modules.rdoc@Visibility and rdoc-ref:nowhere.rdoc@Top.\n",
        encoding="utf-8",
    )
    return root


def test_render_directory_to_html(docs_root: Path, tmp_path: Path) -> None:
    out = tmp_path / "site"

    assert main(["render", str(docs_root), "-o", str(out), "--standalone"]) == 0

    intro = (out / "guide" / "intro.html").read_text(encoding="utf-8")
    assert intro.startswith("<!DOCTYPE html>")
    assert '<a class="xref" href="../modules.html#visibility">Visibility</a>' in intro
    assert (out / "modules.html").exists()


def test_render_single_file_to_stdout(docs_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["render", str(docs_root / "modules.rdoc"), "-f", "rdoc"]) == 0

    assert capsys.readouterr().out == "= Modules\n\n== Visibility\n\n=== Private\n"


def test_render_docx_without_output_uses_export_dir(
    docs_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    export_dir = tmp_path / "exports"
    monkeypatch.setattr(settings, "export_dir", export_dir)

    assert main(["render", str(docs_root / "modules.rdoc"), "-f", "docx"]) == 0
    assert main(["render", str(docs_root / "modules.rdoc"), "-f", "docx"]) == 0
    assert sorted(path.name for path in export_dir.iterdir()) == ["modules.docx", "modules_1.docx"]


def test_render_docx_into_output_dir(docs_root: Path, tmp_path: Path) -> None:
    out = tmp_path / "docx"
    assert main(["render", str(docs_root / "modules.rdoc"), "-f", "docx", "-o", str(out)]) == 0
    assert (out / "modules.docx").read_bytes().startswith(b"PK")


def test_check_reports_unresolved_references(docs_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["check", str(docs_root)]) == 0
    assert main(["check", str(docs_root), "--strict"]) == 1

    output = capsys.readouterr().out
    assert "nowhere.rdoc@Top" in output
    assert "1 unresolved references" in output


def test_tree_prints_outline(docs_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["tree", str(docs_root / "modules.rdoc")]) == 0

    output = capsys.readouterr().out
    assert output.index("Modules") < output.index("Visibility") < output.index("Private")


def test_unsupported_file(tmp_path: Path) -> None:
    path = tmp_path / "notes.md"
    path.write_text("# title\n", encoding="utf-8")

    assert main(["tree", str(path)]) == 2


def test_render_files_with_the_same_basename(tmp_path: Path) -> None:
    for folder in ("v1", "v2"):
        (tmp_path / folder).mkdir()
        (tmp_path / folder / "intro.rdoc").write_text(f"= Intro {folder}\n", encoding="utf-8")
    out = tmp_path / "site"

    files = [str(tmp_path / "v1" / "intro.rdoc"), str(tmp_path / "v2" / "intro.rdoc")]

    assert main(["render", *files, "-o", str(out)]) == 0

    assert "Intro v1" in (out / "v1" / "intro.html").read_text(encoding="utf-8")
    assert "Intro v2" in (out / "v2" / "intro.html").read_text(encoding="utf-8")


def test_render_rejects_duplicate_names_across_directories(tmp_path: Path) -> None:
    for folder in ("v1", "v2"):
        (tmp_path / folder).mkdir()
        (tmp_path / folder / "intro.rdoc").write_text("= Intro\n", encoding="utf-8")

    assert main(["render", str(tmp_path / "v1"), str(tmp_path / "v2"), "-f", "rdoc"]) == 2
