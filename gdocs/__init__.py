"""
Google Docs Package

Markdown conversion in both directions and the gateway to the Docs and
Drive APIs.
"""

from gdocs.docs_to_markdown import DocsToMarkdownConverter
from gdocs.gateway import DocumentGateway, DocumentSummary, ReplaceResult, TabSummary
from gdocs.markdown_escape import escape_markdown, unescape_markdown
from gdocs.markdown_parser import ConversionResult, MarkdownToDocsConverter

__all__ = [
    "ConversionResult",
    "DocsToMarkdownConverter",
    "DocumentGateway",
    "DocumentSummary",
    "escape_markdown",
    "MarkdownToDocsConverter",
    "ReplaceResult",
    "TabSummary",
    "unescape_markdown",
]
