"""Tests for the html, text and rdoc renderers."""

from __future__ import annotations

from io import StringIO

import pytest

from docmark import parse_markup
from docmark.renderers import (
    UnsupportedFormatError,
    render_document,
    render_to_string,
    to_html,
    to_markup,
    to_text,
)


def test_html_for_title_and_paragraph() -> None:
    document = parse_markup("= Title\n\nSome text.\n").document

    assert to_html(document) == (
        '<section class="level-1">\n'
        '<h1 id="title">Title</h1>\n'
        "<p>Some text.</p>\n"
        "</section>\n"
    )


def test_html_sections_follow_heading_levels() -> None:
    document = parse_markup("= A\n\n== B\n\ntext\n\n= C\n").document

    assert to_html(document) == (
        '<section class="level-1">\n'
        '<h1 id="a">A</h1>\n'
        '<section class="level-2">\n'
        '<h2 id="b">B</h2>\n'
        "<p>text</p>\n"
        "</section>\n"
        "</section>\n"
        '<section class="level-1">\n'
        '<h1 id="c">C</h1>\n'
        "</section>\n"
    )


def test_html_code_is_escaped_verbatim() -> None:
    document = parse_markup("  <b>x</b> *y* & +z+\n").document

    assert to_html(document) == "<pre><code>&lt;b&gt;x&lt;/b&gt; *y* &amp; +z+</code></pre>\n"


def test_html_inline_markup_and_references() -> None:
    text = "= Visibility\n\n*Bold* <em>two words</em> +code+ rdoc-ref:@Visibility rdoc-ref:Missing x < y\n"
    html = to_html(parse_markup(text).document)

    assert "<strong>Bold</strong>" in html
    assert "<em>two words</em>" in html
    assert "<code>code</code>" in html
    assert '<a class="xref" href="#visibility">Visibility</a>' in html
    assert '<span class="xref unresolved">Missing</span>' in html
    assert "x &lt; y" in html


def test_html_lists(sample_markup: str) -> None:
    html = to_html(parse_markup(sample_markup).document)

    assert "<ul>\n<li><p>public</p>\n</li>\n" in html
    assert "<ol>\n<li><p>first</p>\n</li>\n" in html
    assert '<dl class="label-list">\n<dt>public</dt>\n<dd>\n<p>callable from anywhere</p>\n</dd>\n' in html
    assert '<dl class="note-list">' in html
    assert "<pre><code>def helper\n  secret\nend</code></pre>" in html
    assert "<hr>" in html


def test_html_ordered_list_attributes() -> None:
    html = to_html(parse_markup("3. c\n\nB. upper\n").document)

    assert '<ol start="3">' in html
    assert '<ol type="A" start="2">' in html


def test_html_standalone_page() -> None:
    html = to_html(parse_markup("= Title & More\n").document, standalone=True)

    assert html.startswith("<!DOCTYPE html>\n")
    assert "<title>Title &amp; More</title>" in html
    assert html.endswith("</body>\n</html>\n")


def test_html_uses_given_resolver() -> None:
    document = parse_markup("See rdoc-ref:other.rdoc@Top.\n").document

    html = to_html(document, resolver=lambda target: f"/docs/{target}")

    assert '<a class="xref" href="/docs/other.rdoc@Top">Top</a>' in html


def test_text_for_title_and_paragraph() -> None:
    document = parse_markup("= Title\n\nSome text.\n").document

    assert to_text(document) == "Title\n=====\n\nSome text.\n"


def test_text_wraps_and_indents(sample_markup: str) -> None:
    document = parse_markup(sample_markup).document
    text = to_text(document, width=30)

    assert "Modules\n=======\n" in text
    assert "Visibility\n----------\n" in text
    assert "Notes\n~~~~~\n" in text
    assert all(len(line) <= 30 for line in text.splitlines() if not line.startswith("    "))
    assert "* protected\n\n  * only within the class\n" in text
    assert "1. first\n2. second\n" in text
    assert '    puts "verbatim *not bold*"' in text
    assert "public\n    callable from anywhere\n" in text


def test_text_shows_link_targets() -> None:
    document = parse_markup("Read {the guide}[https://example.com/guide].\n").document

    assert to_text(document) == "Read the guide (https://example.com/guide).\n"


def test_markup_round_trip_preserves_tree(sample_markup: str) -> None:
    original = parse_markup(sample_markup).document

    rendered = to_markup(original)

    assert parse_markup(rendered).document == original
    assert to_markup(parse_markup(rendered).document) == rendered


def test_markup_round_trip_for_code_first_list_items() -> None:
    text = "*\n    code only\n\n10. ten\n11.\n\n      eleven code\n"
    original = parse_markup(text).document

    assert original.blocks[0].items[0].blocks[0].text == "code only"
    assert parse_markup(to_markup(original)).document == original


def test_markup_round_trip_for_zero_based_numbering() -> None:
    original = parse_markup("0. zero\n1. one\n").document

    rendered = to_markup(original)

    assert original.blocks[0].start == 0
    assert rendered == "0. zero\n1. one\n"
    assert parse_markup(rendered).document == original
    assert to_text(original) == "0. zero\n1. one\n"
    assert '<ol start="0">' in to_html(original)


def test_html_drops_script_links() -> None:
    result = parse_markup("{click}[javascript:alert(1)]\n")

    assert to_html(result.document) == "<p>{click}[javascript:alert(1)]</p>\n"
    assert [warning.message for warning in result.warnings] == ["unsupported link scheme"]


def test_render_document_writes_only_to_sink() -> None:
    document = parse_markup("= Title\n").document
    sink = StringIO()

    render_document(document, "rdoc", sink)

    assert sink.getvalue() == "= Title\n"
    assert render_to_string(document, "text", width=40) == "Title\n=====\n"


def test_unknown_format() -> None:
    with pytest.raises(UnsupportedFormatError):
        render_to_string(parse_markup("x").document, "pdf")
