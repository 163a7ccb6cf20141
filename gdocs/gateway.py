"""
Google Docs Gateway

The only component that talks to the Google Docs and Drive APIs. It lists the
user's recent documents, reads a document (or one of its tabs) as markdown,
replaces a document's content with markdown, lists tabs and creates new
documents.

Every call to Google runs the blocking googleapiclient request in a worker
thread (`asyncio.to_thread`). Errors are translated by
`core.utils.handle_http_errors` into the taxonomy from `core.errors`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from core.config import get_config
from core.utils import handle_http_errors, validate_document_id, validate_markdown, validate_title
from gdocs.docs_helpers import create_delete_range_request
from gdocs.docs_structure import (
    DocumentTab,
    body_end_index,
    extract_plain_text,
    flatten_tabs,
    parse_document,
    select_tab,
)
from gdocs.docs_to_markdown import DocsToMarkdownConverter
from gdocs.markdown_parser import MarkdownToDocsConverter
from tracking.word_count import count_words

logger = logging.getLogger(__name__)

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"
RECENT_DOCS_QUERY = f"mimeType='{GOOGLE_DOC_MIME_TYPE}' and trashed=false and 'me' in owners"
DOCUMENT_FIELDS = "id, name, modifiedTime, webViewLink, ownedByMe"


def doc_link(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


@dataclass
class DocumentSummary:
    """A Google Doc as shown in the document picker."""

    id: str
    name: str
    modified_time: str = ""
    web_view_link: str = ""
    owned_by_me: bool = True

    @classmethod
    def from_drive_file(cls, file: dict[str, Any]) -> "DocumentSummary":
        return cls(
            id=file["id"],
            name=file.get("name", "Untitled"),
            modified_time=file.get("modifiedTime", ""),
            web_view_link=file.get("webViewLink") or doc_link(file["id"]),
            owned_by_me=file.get("ownedByMe", True),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "modifiedTime": self.modified_time,
            "webViewLink": self.web_view_link,
            "ownedByMe": self.owned_by_me,
        }


@dataclass
class TabSummary:
    """A document tab. Tabs cannot be created, renamed or deleted through the API."""

    id: str | None
    title: str
    index: int = 0
    nesting_level: int = 0
    parent_tab_id: str | None = None

    @classmethod
    def from_tab(cls, tab: DocumentTab) -> "TabSummary":
        return cls(
            id=tab.tab_id,
            title=tab.title,
            index=tab.index,
            nesting_level=tab.nesting_level,
            parent_tab_id=tab.parent_tab_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "index": self.index,
            "nestingLevel": self.nesting_level,
            "parentTabId": self.parent_tab_id,
        }


@dataclass
class ReplaceResult:
    word_count: int
    requests_sent: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "wordCount": self.word_count}


class DocumentGateway:
    """
    Async facade over the Docs and Drive service objects for one credential.

    Args:
        docs_service: A googleapiclient ``docs`` v1 resource.
        drive_service: A googleapiclient ``drive`` v3 resource.
        page_size: Number of recent documents to list (defaults to config).
    """

    def __init__(self, docs_service: Any, drive_service: Any, page_size: int | None = None):
        self.docs_service = docs_service
        self.drive_service = drive_service
        self.page_size = page_size or get_config().docs_page_size
        self.to_markdown = DocsToMarkdownConverter()
        self.to_requests = MarkdownToDocsConverter()

    async def _get_document(self, document_id: str) -> dict[str, Any]:
        return await asyncio.to_thread(
            self.docs_service.documents().get(documentId=document_id, includeTabsContent=True).execute
        )

    @handle_http_errors("list_recent_documents", is_read_only=True)
    async def list_recent_documents(self) -> list[DocumentSummary]:
        """Most recently modified Google Docs owned by the user, newest first."""
        logger.info(f"[list_recent_documents] page_size={self.page_size}")

        response = await asyncio.to_thread(
            self.drive_service.files()
            .list(
                q=RECENT_DOCS_QUERY,
                fields=f"files({DOCUMENT_FIELDS})",
                orderBy="modifiedTime desc",
                pageSize=self.page_size,
            )
            .execute
        )
        files = response.get("files", [])
        logger.info(f"[list_recent_documents] Found {len(files)} documents")
        return [DocumentSummary.from_drive_file(f) for f in files]

    @handle_http_errors("fetch_as_markdown", is_read_only=True)
    async def fetch_as_markdown(self, document_id: str, tab_id: str | None = None) -> str:
        """
        Read a document tab as markdown.

        Args:
            document_id: ID of the Google Doc.
            tab_id: Tab to read; the first tab when omitted.

        Returns:
            str: The tab content as markdown.
        """
        document_id = validate_document_id(document_id)
        logger.info(f"[fetch_as_markdown] Doc={document_id}, tab={tab_id}")

        document = await self._get_document(document_id)
        tab = select_tab(parse_document(document), tab_id)
        return self.to_markdown.convert(tab.blocks)

    @handle_http_errors("get_document_word_count", is_read_only=True)
    async def get_document_word_count(self, document_id: str, tab_id: str | None = None) -> dict[str, Any]:
        """Title, raw text and word count of a document tab."""
        document_id = validate_document_id(document_id)
        document = await self._get_document(document_id)
        tab = select_tab(parse_document(document), tab_id)
        text = extract_plain_text(tab.blocks)
        return {
            "documentId": document_id,
            "title": document.get("title") or "Untitled",
            "text": text,
            "wordCount": count_words(text),
        }

    @handle_http_errors("replace_with_markdown")
    async def replace_with_markdown(self, document_id: str, markdown: str, tab_id: str | None = None) -> ReplaceResult:
        """
        Replace the whole content of a document tab with markdown.

        The current document is fetched only to find where its content ends.
        Deletion, insertion and styling go out as one batchUpdate, which the
        Docs API applies atomically.

        Returns:
            ReplaceResult: Word count of the newly written plain text.
        """
        document_id = validate_document_id(document_id)
        markdown = validate_markdown(markdown)

        document = await self._get_document(document_id)
        tab = select_tab(parse_document(document), tab_id)
        end_index = body_end_index(tab.blocks)

        requests: list[dict[str, Any]] = []
        # Every body keeps one trailing newline that cannot be deleted.
        if end_index > 2:
            requests.append(create_delete_range_request(1, end_index - 1, tab_id))

        conversion = self.to_requests.convert(markdown, tab_id=tab_id, reset_styles=True)
        requests.extend(conversion.requests)

        logger.info(
            f"[replace_with_markdown] Doc={document_id}, tab={tab_id}, end_index={end_index}, "
            f"requests={len(requests)}"
        )

        if requests:
            await asyncio.to_thread(
                self.docs_service.documents().batchUpdate(documentId=document_id, body={"requests": requests}).execute
            )

        return ReplaceResult(word_count=count_words(conversion.plain_text), requests_sent=len(requests))

    @handle_http_errors("list_tabs", is_read_only=True)
    async def list_tabs(self, document_id: str) -> list[TabSummary]:
        """All tabs of a document, flattened depth-first."""
        document_id = validate_document_id(document_id)
        logger.info(f"[list_tabs] Doc={document_id}")

        document = await self._get_document(document_id)
        return [TabSummary.from_tab(tab) for tab in flatten_tabs(parse_document(document))]

    @handle_http_errors("create_document")
    async def create_document(self, title: str) -> DocumentSummary:
        """Create an empty Google Doc."""
        title = validate_title(title)
        logger.info(f"[create_document] Title='{title}'")

        doc = await asyncio.to_thread(self.docs_service.documents().create(body={"title": title}).execute)
        document_id = doc.get("documentId")

        file = await asyncio.to_thread(
            self.drive_service.files().get(fileId=document_id, fields=DOCUMENT_FIELDS).execute
        )
        summary = DocumentSummary.from_drive_file({"id": document_id, "name": doc.get("title", title), **file})
        logger.info(f"Successfully created Google Doc '{title}' (ID: {document_id}). Link: {summary.web_view_link}")
        return summary
