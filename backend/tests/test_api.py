"""API tests for the parse and render endpoints."""

from __future__ import annotations

import base64
from io import BytesIO

import httpx
import pytest
from docx import Document as DocxDocument
from fastapi.testclient import TestClient

from docmark.api.deps import get_http_client
from docmark.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_parse_returns_tree_outline_and_warnings(client: TestClient) -> None:
    text = "= Title\n\nSome text rdoc-ref: here.\n\n== Sub\n\n* item\n"

    response = client.post("/api/parse", json={"text": text, "name": "doc.rdoc"})

    assert response.status_code == 200
    body = response.json()
    assert [block["type"] for block in body["blocks"]] == ["heading", "paragraph", "heading", "list"]
    assert body["blocks"][0]["level"] == 1 and body["blocks"][0]["anchor"] == "title"
    assert body["blocks"][3]["items"][0]["blocks"][0]["text"] == "item"
    assert body["outline"] == [
        {"title": "Title", "anchor": "title", "level": 1, "children": [
            {"title": "Sub", "anchor": "sub", "level": 2, "children": []},
        ]},
    ]
    assert body["warnings"] == [
        {"line": 3, "message": "cross reference without target", "source": "rdoc-ref:"},
    ]


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        ("html", '<section class="level-1">\n<h1 id="title">Title</h1>\n<p>Some text.</p>\n</section>\n'),
        ("text", "Title\n=====\n\nSome text.\n"),
        ("rdoc", "= Title\n\nSome text.\n"),
    ],
)
def test_render(client: TestClient, fmt: str, expected: str) -> None:
    response = client.post("/api/render", json={"text": "= Title\n\nSome text.\n", "format": fmt})

    assert response.status_code == 200
    assert response.json() == {"format": fmt, "output": expected, "warnings": []}


def test_render_defaults_to_configured_format(client: TestClient) -> None:
    response = client.post("/api/render", json={"text": "plain", "standalone": True})

    assert response.json()["format"] == "html"
    assert response.json()["output"].startswith("<!DOCTYPE html>")


def test_render_rejects_unknown_format(client: TestClient) -> None:
    response = client.post("/api/render", json={"text": "x", "format": "pdf"})

    assert response.status_code == 422


def test_render_file(client: TestClient) -> None:
    response = client.post(
        "/api/render/file",
        params={"format": "text"},
        files={"file": ("guide.rdoc", b"= Guide\n", "text/plain")},
    )

    assert response.status_code == 200
    assert response.json()["output"] == "Guide\n=====\n"


def test_render_file_errors(client: TestClient) -> None:
    unsupported = client.post("/api/render/file", files={"file": ("a.pdf", b"%PDF-1.4", "application/pdf")})
    empty = client.post("/api/render/file", files={"file": ("a.rdoc", b"  \n", "text/plain")})

    assert unsupported.status_code == 415
    assert empty.status_code == 400


def test_render_docx(client: TestClient) -> None:
    response = client.post("/api/render/docx", json={"text": "= Title\n\nSome text.\n", "name": "guide.rdoc"})

    assert response.status_code == 200
    body = response.json()
    assert body["file_name"] == "guide.docx"
    document = DocxDocument(BytesIO(base64.b64decode(body["file_base64"])))
    assert [paragraph.text for paragraph in document.paragraphs] == ["Title", "Some text."]


@pytest.mark.parametrize(
    ("name", "file_name"),
    [("docs/guide.rdoc", "guide.docx"), ("../../my notes.rdoc", "my_notes.docx"), (None, "document.docx")],
)
def test_render_docx_file_name_is_sanitized(
    client: TestClient, name: str | None, file_name: str
) -> None:
    response = client.post("/api/render/docx", json={"text": "= Title\n", "name": name})

    assert response.json()["file_name"] == file_name


def test_fetch(client: TestClient) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("missing.rdoc"):
            return httpx.Response(404)
        return httpx.Response(200, content=b"= Remote\n")

    async def mock_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            yield http_client

    app.dependency_overrides[get_http_client] = mock_client
    try:
        ok = client.post("/api/fetch", json={"url": "https://example.com/remote.rdoc", "format": "rdoc"})
        missing = client.post("/api/fetch", json={"url": "https://example.com/missing.rdoc"})
        unsupported = client.post("/api/fetch", json={"url": "https://example.com/page.html"})
    finally:
        app.dependency_overrides.clear()

    assert ok.status_code == 200
    assert ok.json()["output"] == "= Remote\n"
    assert missing.status_code == 502
    assert unsupported.status_code == 415
