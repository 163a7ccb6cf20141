"""
Typed view of a Google Docs API document.

The Docs API returns a loosely shaped JSON tree. This module turns the parts
daily-write cares about into explicit types at the boundary so the converters
never reach into raw dictionaries:

- ``ParagraphBlock``: text runs with style attributes and an optional heading level
- ``TableBlock``: kept opaque, only its position is recorded
- ``UnknownBlock``: any other structural element (section break, table of contents)

Documents with tabs expose their content under ``tabs[].documentTab.body``;
legacy responses fetched without ``includeTabsContent`` only have ``body``.
Both shapes are parsed into a list of ``DocumentTab``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from core.errors import ResourceNotFoundError

logger = logging.getLogger(__name__)

HEADING_PREFIX = "HEADING_"
MAX_HEADING_LEVEL = 6
DEFAULT_TAB_TITLE = "Untitled Tab"


@dataclass(frozen=True)
class TextStyle:
    """The subset of Docs text style that survives the markdown round-trip."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    link: str | None = None

    @classmethod
    def from_api(cls, text_style: dict[str, Any] | None) -> TextStyle:
        text_style = text_style or {}
        link = text_style.get("link") or {}
        return cls(
            bold=bool(text_style.get("bold", False)),
            italic=bool(text_style.get("italic", False)),
            underline=bool(text_style.get("underline", False)),
            strikethrough=bool(text_style.get("strikethrough", False)),
            link=link.get("url") or None,
        )

    @property
    def is_plain(self) -> bool:
        return not (self.bold or self.italic or self.underline or self.strikethrough or self.link)


@dataclass
class TextRun:
    content: str
    style: TextStyle = field(default_factory=TextStyle)


@dataclass
class ParagraphBlock:
    runs: list[TextRun] = field(default_factory=list)
    heading_level: int | None = None
    start_index: int = 0
    end_index: int = 0

    @property
    def text(self) -> str:
        return "".join(run.content for run in self.runs)


@dataclass
class TableBlock:
    start_index: int = 0
    end_index: int = 0


@dataclass
class UnknownBlock:
    kind: str = "unknown"
    start_index: int = 0
    end_index: int = 0


Block = Union[ParagraphBlock, TableBlock, UnknownBlock]


@dataclass
class DocumentTab:
    """An addressable tab of a document. Read-only through the Docs API."""

    tab_id: str | None
    title: str
    index: int = 0
    nesting_level: int = 0
    parent_tab_id: str | None = None
    blocks: list[Block] = field(default_factory=list)
    child_tabs: list[DocumentTab] = field(default_factory=list)


def parse_heading_level(named_style_type: str | None) -> int | None:
    """Map HEADING_1..HEADING_6 to 1..6; every other named style is body text."""
    if not named_style_type or not named_style_type.startswith(HEADING_PREFIX):
        return None
    try:
        level = int(named_style_type[len(HEADING_PREFIX) :])
    except ValueError:
        return None
    if 1 <= level <= MAX_HEADING_LEVEL:
        return level
    return None


def parse_paragraph(element: dict[str, Any]) -> ParagraphBlock:
    paragraph = element.get("paragraph") or {}
    runs: list[TextRun] = []
    for paragraph_element in paragraph.get("elements", []):
        text_run = paragraph_element.get("textRun")
        if not text_run or not text_run.get("content"):
            continue
        runs.append(TextRun(content=text_run["content"], style=TextStyle.from_api(text_run.get("textStyle"))))

    named_style_type = (paragraph.get("paragraphStyle") or {}).get("namedStyleType")
    return ParagraphBlock(
        runs=runs,
        heading_level=parse_heading_level(named_style_type),
        start_index=element.get("startIndex", 0),
        end_index=element.get("endIndex", 0),
    )


def parse_body(content: list[dict[str, Any]] | None) -> list[Block]:
    """Parse a body ``content`` array into typed blocks."""
    blocks: list[Block] = []
    for element in content or []:
        start_index = element.get("startIndex", 0)
        end_index = element.get("endIndex", 0)
        if "paragraph" in element:
            blocks.append(parse_paragraph(element))
        elif "table" in element:
            blocks.append(TableBlock(start_index=start_index, end_index=end_index))
        else:
            kind = next((key for key in element if key not in ("startIndex", "endIndex")), "unknown")
            logger.debug(f"Unrecognized structural element '{kind}' at [{start_index}, {end_index})")
            blocks.append(UnknownBlock(kind=kind, start_index=start_index, end_index=end_index))
    return blocks


def _parse_tab(tab: dict[str, Any], nesting_level: int, parent_tab_id: str | None) -> DocumentTab:
    props = tab.get("tabProperties") or {}
    tab_id = props.get("tabId")
    body = ((tab.get("documentTab") or {}).get("body") or {}).get("content")
    return DocumentTab(
        tab_id=tab_id,
        title=props.get("title") or DEFAULT_TAB_TITLE,
        index=props.get("index", 0),
        nesting_level=props.get("nestingLevel", nesting_level),
        parent_tab_id=props.get("parentTabId", parent_tab_id),
        blocks=parse_body(body),
        child_tabs=[_parse_tab(child, nesting_level + 1, tab_id) for child in tab.get("childTabs", [])],
    )


def parse_document(document: dict[str, Any]) -> list[DocumentTab]:
    """
    Parse a ``documents.get`` response into its top-level tabs.

    A response without ``tabs`` (fetched without includeTabsContent) yields a
    single synthetic tab with ``tab_id=None`` holding the document body.
    """
    tabs = document.get("tabs")
    if tabs:
        return [_parse_tab(tab, 0, None) for tab in tabs]

    body = (document.get("body") or {}).get("content")
    return [DocumentTab(tab_id=None, title=document.get("title") or DEFAULT_TAB_TITLE, blocks=parse_body(body))]


def flatten_tabs(tabs: list[DocumentTab]) -> list[DocumentTab]:
    """Depth-first flattening: each tab is followed by its children."""
    flat: list[DocumentTab] = []
    for tab in tabs:
        flat.append(tab)
        flat.extend(flatten_tabs(tab.child_tabs))
    return flat


def select_tab(tabs: list[DocumentTab], tab_id: str | None = None) -> DocumentTab:
    """
    Pick the requested tab, or the first tab when no tab_id is given.

    Raises:
        ResourceNotFoundError: If tab_id names a tab the document doesn't have.
    """
    flat = flatten_tabs(tabs)
    if tab_id is None:
        if not flat:
            return DocumentTab(tab_id=None, title=DEFAULT_TAB_TITLE)
        return flat[0]

    for tab in flat:
        if tab.tab_id == tab_id:
            return tab
    raise ResourceNotFoundError(f"Tab '{tab_id}' not found in document", status_code=404)


def body_end_index(blocks: list[Block]) -> int:
    """The largest endIndex in a body, or 1 for an empty body."""
    end_index = 1
    for block in blocks:
        if block.end_index > end_index:
            end_index = block.end_index
    return end_index


def extract_plain_text(blocks: list[Block]) -> str:
    """Concatenate the raw text of every paragraph, ignoring tables."""
    return "".join(block.text for block in blocks if isinstance(block, ParagraphBlock))
