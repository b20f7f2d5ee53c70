"""Endpoints that parse and render markup documents."""

from __future__ import annotations

import base64
import logging

import httpx
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from docmark.api.deps import get_app_settings, get_http_client
from docmark.core.config import Settings
from docmark.document_builder import build_document_tree, build_warnings
from docmark.document_models import ParseResult
from docmark.document_parser import parse_markup
from docmark.document_processing import (
    DocumentFetchError,
    UnsupportedDocumentError,
    fetch_document,
    load_document,
)
from docmark.renderers import UnsupportedFormatError, docx_filename, render_to_string, to_docx
from docmark.schemas import (
    DocumentTreeResponse,
    DocxExportRequest,
    DocxExportResponse,
    FetchRequest,
    OutputFormat,
    ParseRequest,
    RenderRequest,
    RenderResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


def _log_warnings(result: ParseResult) -> None:
    for warning in result.warnings:
        logger.info("%s: %s", result.document.name or "<request>", warning)


def _render(result: ParseResult, fmt: OutputFormat | None, settings: Settings, *, standalone: bool = False) -> RenderResponse:
    fmt = fmt or settings.default_format
    options: dict[str, object] = {}
    if fmt == "html":
        options["standalone"] = standalone
    elif fmt == "text":
        options["width"] = settings.text_width
    try:
        output = render_to_string(result.document, fmt, **options)
    except UnsupportedFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    _log_warnings(result)
    return RenderResponse(format=fmt, output=output, warnings=build_warnings(result.warnings))


@router.post("/parse", response_model=DocumentTreeResponse)
def parse_document(payload: ParseRequest) -> DocumentTreeResponse:
    result = parse_markup(payload.text, name=payload.name)
    _log_warnings(result)
    return build_document_tree(result)


@router.post("/render", response_model=RenderResponse)
def render_document(
    payload: RenderRequest,
    settings: Settings = Depends(get_app_settings),
) -> RenderResponse:
    result = parse_markup(payload.text, name=payload.name)
    return _render(result, payload.format, settings, standalone=payload.standalone)


@router.post("/render/file", response_model=RenderResponse)
async def render_file(
    file: UploadFile = File(...),
    format: OutputFormat | None = None,
    standalone: bool = False,
    settings: Settings = Depends(get_app_settings),
) -> RenderResponse:
    contents = await file.read()
    if not contents.strip():
        raise HTTPException(status_code=400, detail="Uploaded file is empty or unreadable")
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")
    try:
        result = load_document(file.filename or "", contents, suffixes=settings.source_suffixes)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    return _render(result, format, settings, standalone=standalone)


@router.post("/render/docx", response_model=DocxExportResponse)
def render_docx(payload: DocxExportRequest) -> DocxExportResponse:
    result = parse_markup(payload.text, name=payload.name)
    _log_warnings(result)
    try:
        data = to_docx(result.document)
    except Exception as exc:  # pragma: no cover
        logger.exception("Failed to export '%s' to DOCX", payload.name)
        raise HTTPException(status_code=500, detail="Could not build the DOCX file") from exc
    return DocxExportResponse(
        file_base64=base64.b64encode(data).decode("ascii"),
        file_name=docx_filename(payload.name),
        warnings=build_warnings(result.warnings),
    )


@router.post("/fetch", response_model=RenderResponse)
async def fetch_and_render(
    payload: FetchRequest,
    settings: Settings = Depends(get_app_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> RenderResponse:
    try:
        result = await fetch_document(payload.url, client=client, suffixes=settings.source_suffixes)
    except UnsupportedDocumentError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except DocumentFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _render(result, payload.format, settings, standalone=payload.standalone)
