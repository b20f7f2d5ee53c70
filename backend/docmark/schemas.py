from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

OutputFormat = Literal["html", "text", "rdoc"]


class HealthResponse(BaseModel):
    status: str = Field(..., description="Current API state")
    app: str = Field(..., description="Application name")
    version: str = Field(..., description="Package version")


class WarningSchema(BaseModel):
    line: int = Field(..., description="1-based source line of the block with the problem")
    message: str = Field(..., description="What was wrong with the markup")
    source: str = Field(default="", description="Offending markup, kept as literal text")


class InlineSchema(BaseModel):
    kind: Literal["text", "bold", "em", "code", "link", "xref"] = Field(..., description="Span type")
    text: str = Field(..., description="Literal text or link label")
    target: str | None = Field(default=None, description="Link or cross reference target")


class ListItemSchema(BaseModel):
    label: str | None = Field(default=None, description="Label of label and note list items")
    blocks: list[BlockSchema] = Field(default_factory=list, description="Nested blocks of the item")


class BlockSchema(BaseModel):
    type: Literal["heading", "paragraph", "code", "list", "rule"] = Field(..., description="Block type")
    line: int = Field(..., description="1-based source line where the block starts")
    text: str | None = Field(default=None, description="Raw markup or verbatim text")
    level: int | None = Field(default=None, description="Heading level")
    anchor: str | None = Field(default=None, description="Heading anchor")
    inlines: list[InlineSchema] = Field(default_factory=list, description="Parsed inline spans")
    kind: str | None = Field(default=None, description="List kind")
    start: int | None = Field(default=None, description="First number of ordered lists")
    items: list[ListItemSchema] = Field(default_factory=list, description="List items")


class SectionSchema(BaseModel):
    title: str = Field(..., description="Heading text")
    anchor: str = Field(..., description="Heading anchor")
    level: int = Field(..., description="Heading level")
    children: list[SectionSchema] = Field(default_factory=list, description="Nested sections")


class ParseRequest(BaseModel):
    text: str = Field(..., description="Markup text to parse")
    name: str | None = Field(default=None, description="Document name used in messages")


class DocumentTreeResponse(BaseModel):
    name: str | None = Field(default=None, description="Document name")
    blocks: list[BlockSchema] = Field(..., description="Top level blocks in document order")
    outline: list[SectionSchema] = Field(..., description="Heading tree")
    warnings: list[WarningSchema] = Field(default_factory=list, description="Recoverable markup problems")


class RenderRequest(BaseModel):
    text: str = Field(..., description="Markup text to render")
    format: OutputFormat | None = Field(default=None, description="Output format; the configured default when omitted")
    name: str | None = Field(default=None, description="Document name")
    standalone: bool = Field(default=False, description="Wrap HTML output in a full page")


class RenderResponse(BaseModel):
    format: OutputFormat = Field(..., description="Format of the output")
    output: str = Field(..., description="Rendered document")
    warnings: list[WarningSchema] = Field(default_factory=list, description="Recoverable markup problems")


class DocxExportRequest(BaseModel):
    text: str = Field(..., description="Markup text to export")
    name: str | None = Field(default=None, description="Source file name used for the DOCX name")


class DocxExportResponse(BaseModel):
    file_base64: str = Field(..., description="DOCX file, base64 without a data: prefix")
    file_name: str = Field(..., description="File name for saving on the client")
    warnings: list[WarningSchema] = Field(default_factory=list, description="Recoverable markup problems")


class FetchRequest(BaseModel):
    url: str = Field(..., description="HTTP(S) URL of a markup document")
    format: OutputFormat | None = Field(default=None, description="Output format")
    standalone: bool = Field(default=False, description="Wrap HTML output in a full page")


ListItemSchema.model_rebuild()
SectionSchema.model_rebuild()
