"""
Markdown to Google Docs Converter

This module provides the `MarkdownToDocsConverter` class that translates the
editor's markdown into Google Docs API `batchUpdate` requests. It supports
headings, bold, italic, bold+italic, strikethrough, underline (`<u>`) and
links, which is exactly the subset `gdocs/docs_to_markdown.py` produces.

The converter follows the "Index Tracker" pattern: it walks the markdown line
by line and keeps a cursor in plain-text offsets (1-based, in UTF-16 code
units like the Docs API), so every styled span is recorded at the index it
will occupy once the plain text is inserted.

Example:
    >>> converter = MarkdownToDocsConverter()
    >>> result = converter.convert("# Hello World\\n\\nThis is **bold** text.")
    >>> result.plain_text
    'Hello World\\nThis is bold text.\\n'

See Also:
    - `gdocs/gateway.py` for how the requests are sent (`replace_with_markdown`)
    - `gdocs/docs_helpers.py` for the request builders
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from gdocs.docs_helpers import (
    create_clear_text_style_request,
    create_heading_style_request,
    create_insert_text_request,
    create_link_request,
    create_normal_text_style_request,
    create_text_style_request,
    utf16_len,
)
from gdocs.markdown_escape import unescape_link_url, unescape_markdown

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.*)$")

# One literal character: a backslash escape, an HTML entity, or any single character.
LITERAL_PATTERN = re.compile(r"\\[\\*_~`\[\]#|]|&(?:lt|gt|amp);|.", re.DOTALL)


@dataclass(frozen=True)
class InlineMatcher:
    """
    One inline span type.

    Attributes:
        name: Span type name, used in debug logging.
        pattern: Compiled regex matched at the cursor. Group 1 is the span text.
        bold, italic, strikethrough, underline: Style flags the span applies.
        link_group: Regex group holding the link URL, if the span is a link.
    """

    name: str
    pattern: re.Pattern
    bold: bool | None = None
    italic: bool | None = None
    strikethrough: bool | None = None
    underline: bool | None = None
    link_group: int | None = None


# Span body: escape sequences are consumed whole, so an escaped delimiter
# never closes the span it sits in.
_SPAN_BODY = r"((?:\\.|[^\\])+?)"

# Tried in this order at every cursor position. Triple asterisks must come
# before double and single so ***x*** is not read as italic-wrapped bold.
INLINE_MATCHERS: tuple[InlineMatcher, ...] = (
    InlineMatcher("bold_italic", re.compile(r"\*\*\*" + _SPAN_BODY + r"\*\*\*"), bold=True, italic=True),
    InlineMatcher("bold", re.compile(r"\*\*" + _SPAN_BODY + r"\*\*"), bold=True),
    InlineMatcher("italic", re.compile(r"\*" + _SPAN_BODY + r"\*"), italic=True),
    InlineMatcher("strikethrough", re.compile(r"~~" + _SPAN_BODY + r"~~"), strikethrough=True),
    InlineMatcher("underline", re.compile(r"<u>" + _SPAN_BODY + r"</u>"), underline=True),
    InlineMatcher("link", re.compile(r"\[((?:\\.|[^\\\]])+)\]\(((?:\\.|[^\\)])+)\)"), link_group=2),
)


@dataclass
class FormattingRange:
    """A styled span in plain-text offsets of the target document."""

    start_index: int
    end_index: int
    bold: bool | None = None
    italic: bool | None = None
    strikethrough: bool | None = None
    underline: bool | None = None
    link: str | None = None


def _merge_into(target: FormattingRange, other: FormattingRange) -> None:
    for name in ("bold", "italic", "strikethrough", "underline", "link"):
        value = getattr(other, name)
        if value is not None:
            setattr(target, name, value)


@dataclass
class HeadingRange:
    """A heading paragraph, applied as a paragraph style rather than a text style."""

    start_index: int
    end_index: int
    level: int


@dataclass
class ConversionResult:
    """
    Output of MarkdownToDocsConverter.convert.

    Attributes:
        plain_text: The text inserted into the document.
        insert_requests: The insertText request (plus style resets if requested).
        style_requests: updateTextStyle requests in decreasing start-index order.
        paragraph_requests: updateParagraphStyle requests for headings.
        formatting_ranges: Styled spans in document order.
        headings: Heading paragraphs in document order.
    """

    plain_text: str = ""
    insert_requests: list[dict[str, Any]] = field(default_factory=list)
    style_requests: list[dict[str, Any]] = field(default_factory=list)
    paragraph_requests: list[dict[str, Any]] = field(default_factory=list)
    formatting_ranges: list[FormattingRange] = field(default_factory=list)
    headings: list[HeadingRange] = field(default_factory=list)

    @property
    def requests(self) -> list[dict[str, Any]]:
        """All requests in the order they must be applied."""
        return self.insert_requests + self.style_requests + self.paragraph_requests


class MarkdownToDocsConverter:
    """
    Converts markdown text into Google Docs API batchUpdate requests.

    **Single-Insert Architecture**:
    All plain text is inserted with one insertText request. Styled spans are
    tracked as ranges while parsing and applied afterwards, back to front, so
    each range still points at the text it was recorded for.

    Attributes:
        matchers: Inline span matchers in priority order.
        cursor_index: Current cursor position (1-based, as per Google Docs API).
        formatting_ranges: Styled spans recorded during the last conversion.
        headings: Heading paragraphs recorded during the last conversion.
    """

    def __init__(self, matchers: tuple[InlineMatcher, ...] = INLINE_MATCHERS) -> None:
        self.matchers = matchers
        self.cursor_index: int = 1
        self.formatting_ranges: list[FormattingRange] = []
        self.headings: list[HeadingRange] = []
        self._text_parts: list[str] = []

    def convert(
        self,
        markdown_text: str,
        tab_id: str | None = None,
        start_index: int = 1,
        reset_styles: bool = False,
    ) -> ConversionResult:
        """
        Convert markdown text to Google Docs API requests.

        Args:
            markdown_text: The markdown string to convert.
            tab_id: Optional tab to address every request to.
            start_index: The index the text will be inserted at (1-based).
            reset_styles: Also emit requests that clear inherited text and
                paragraph styles from the inserted range. Used when replacing
                a whole document whose remaining paragraph may be styled.

        Returns:
            ConversionResult with the plain text and ordered requests.

        Note:
            This method resets the converter state before processing.
            The same converter instance can be reused for multiple conversions.
        """
        self.cursor_index = start_index
        self.formatting_ranges = []
        self.headings = []
        self._text_parts = []

        lines = markdown_text.replace("\r\n", "\n").split("\n")
        after_heading = False

        for i, line in enumerate(lines):
            is_last = i == len(lines) - 1

            # A heading's blank separator line is part of the heading, not an empty paragraph.
            if after_heading and not line.strip():
                after_heading = False
                continue

            heading_level = 0
            heading_match = HEADING_PATTERN.match(line)
            if heading_match:
                heading_level = len(heading_match.group(1))
                line = heading_match.group(2)

            line_start_index = self.cursor_index
            processed_line = self._process_inline(line)

            ends_with_newline = not is_last or len(processed_line) > 0
            if ends_with_newline:
                self._append_text("\n")

            if heading_level and self.cursor_index > line_start_index:
                self.headings.append(HeadingRange(line_start_index, self.cursor_index, heading_level))
            after_heading = bool(heading_level)

        plain_text = "".join(self._text_parts)
        result = ConversionResult(
            plain_text=plain_text,
            formatting_ranges=list(self.formatting_ranges),
            headings=list(self.headings),
        )

        if plain_text:
            result.insert_requests.append(create_insert_text_request(start_index, plain_text, tab_id))
            if reset_styles:
                end_index = start_index + utf16_len(plain_text)
                result.insert_requests.append(create_clear_text_style_request(start_index, end_index, tab_id))
                result.insert_requests.append(create_normal_text_style_request(start_index, end_index, tab_id))

        # Back to front: no range depends on an index shifted by an earlier request.
        for formatting_range in reversed(self.formatting_ranges):
            result.style_requests.extend(self._style_requests_for(formatting_range, tab_id))

        for heading in self.headings:
            result.paragraph_requests.append(
                create_heading_style_request(heading.start_index, heading.end_index, heading.level, tab_id)
            )

        logger.debug(
            f"Converted markdown: {len(plain_text)} chars, {len(self.formatting_ranges)} styled spans, "
            f"{len(self.headings)} headings"
        )
        return result

    def _append_text(self, text: str) -> None:
        self._text_parts.append(text)
        self.cursor_index += utf16_len(text)

    def _process_inline(self, text: str) -> str:
        """
        Walk one line left to right, recording styled spans.

        At each position the matchers are tried in priority order; when none
        matches, one literal character (or escape sequence) is consumed.
        Unclosed markers therefore end up as literal text. The text inside a
        matched span is walked the same way, so nested markup such as
        ``[**bold link**](url)`` keeps both styles.

        Returns:
            The plain text produced for the line.
        """
        pieces: list[str] = []
        pos = 0

        while pos < len(text):
            for matcher in self.matchers:
                match = matcher.pattern.match(text, pos)
                if match:
                    pieces.append(self._process_span(matcher, match))
                    pos = match.end()
                    break
            else:
                literal = LITERAL_PATTERN.match(text, pos)
                char = unescape_markdown(literal.group(0))
                self._append_text(char)
                pieces.append(char)
                pos = literal.end()

        return "".join(pieces)

    def _process_span(self, matcher: InlineMatcher, match: re.Match) -> str:
        start = self.cursor_index
        position = len(self.formatting_ranges)
        content = self._process_inline(match.group(1))

        span = FormattingRange(
            start_index=start,
            end_index=self.cursor_index,
            bold=matcher.bold,
            italic=matcher.italic,
            strikethrough=matcher.strikethrough,
            underline=matcher.underline,
            link=unescape_link_url(match.group(matcher.link_group)) if matcher.link_group else None,
        )
        inner = self.formatting_ranges[position] if len(self.formatting_ranges) > position else None
        if inner and (inner.start_index, inner.end_index) == (span.start_index, span.end_index):
            # Same span wrapped twice, e.g. [**x**](url): one range carries both styles.
            _merge_into(inner, span)
        else:
            self.formatting_ranges.insert(position, span)

        logger.debug(f"Matched {matcher.name} span {content!r} at [{start}, {self.cursor_index})")
        return content

    @staticmethod
    def _style_requests_for(formatting_range: FormattingRange, tab_id: str | None) -> list[dict[str, Any]]:
        requests: list[dict[str, Any]] = []
        style_request = create_text_style_request(
            formatting_range.start_index,
            formatting_range.end_index,
            bold=formatting_range.bold,
            italic=formatting_range.italic,
            strikethrough=formatting_range.strikethrough,
            underline=formatting_range.underline,
            tab_id=tab_id,
        )
        if style_request:
            requests.append(style_request)
        if formatting_range.link:
            requests.append(
                create_link_request(
                    formatting_range.start_index, formatting_range.end_index, formatting_range.link, tab_id
                )
            )
        return requests
