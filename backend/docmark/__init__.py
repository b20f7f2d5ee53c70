"""Parser and renderers for RDoc style documentation markup."""

from .document_models import (
    CodeSample,
    Document,
    Heading,
    Inline,
    ListBlock,
    ListItem,
    Paragraph,
    ParseResult,
    ParseWarning,
    Rule,
)
from .document_parser import parse_markup

__version__ = "0.1.0"

__all__ = [
    "CodeSample",
    "Document",
    "Heading",
    "Inline",
    "ListBlock",
    "ListItem",
    "Paragraph",
    "ParseResult",
    "ParseWarning",
    "Rule",
    "__version__",
    "parse_markup",
]
