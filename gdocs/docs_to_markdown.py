"""
Google Docs to Markdown Converter

Turns the typed blocks from ``gdocs.docs_structure`` into the markdown shown
in the editor. Supported styling is bold, italic, bold+italic, underline
(``<u>``), strikethrough, links and headings 1-6. Tables are not decomposed
and become a fixed placeholder.

Example:
    >>> converter = DocsToMarkdownConverter()
    >>> converter.convert(parse_body(document["body"]["content"]))
    '# Title\\n\\nSome **bold** text'

See Also:
    - `gdocs/markdown_parser.py` for the opposite direction
"""

from __future__ import annotations

import logging

from gdocs.docs_structure import Block, ParagraphBlock, TableBlock, TextRun
from gdocs.markdown_escape import escape_link_url, escape_markdown

logger = logging.getLogger(__name__)

TABLE_PLACEHOLDER = "_[Table content]_"


def merge_runs(runs: list[TextRun]) -> list[TextRun]:
    """
    Merge adjacent runs that carry the same style.

    The result is maximal: no two neighbouring runs share a style. The input
    runs are not modified.
    """
    merged: list[TextRun] = []
    for run in runs:
        if merged and merged[-1].style == run.style:
            merged[-1] = TextRun(content=merged[-1].content + run.content, style=run.style)
        else:
            merged.append(TextRun(content=run.content, style=run.style))
    return merged


def run_to_markdown(run: TextRun) -> str:
    """
    Render one merged run.

    Emphasis markers must hug the text, so a single leading or trailing space
    is moved outside the markers. Markers are applied innermost to outermost:
    strikethrough, underline, bold/italic, link.
    """
    text = run.content
    style = run.style

    if text == "\n":
        return text

    if style.is_plain:
        return escape_markdown(text)

    trimmed = text.strip()
    if not trimmed:
        return text

    leading_space = " " if text.startswith(" ") else ""
    trailing_space = " " if text.endswith(" ") and text != " " else ""

    formatted = escape_markdown(trimmed)

    if style.strikethrough:
        formatted = f"~~{formatted}~~"

    if style.underline:
        formatted = f"<u>{formatted}</u>"

    if style.bold and style.italic:
        formatted = f"***{formatted}***"
    elif style.bold:
        formatted = f"**{formatted}**"
    elif style.italic:
        formatted = f"*{formatted}*"

    if style.link:
        formatted = f"[{formatted}]({escape_link_url(style.link)})"

    return leading_space + formatted + trailing_space


def paragraph_to_markdown(paragraph: ParagraphBlock) -> str:
    """Render a paragraph, including its trailing separator."""
    text = "".join(run_to_markdown(run) for run in merge_runs(paragraph.runs))

    if not text.strip():
        return "\n"

    clean_text = text.rstrip("\n")
    if paragraph.heading_level:
        return "#" * paragraph.heading_level + " " + clean_text + "\n\n"
    return clean_text + "\n"


class DocsToMarkdownConverter:
    """
    Converts a Google Docs body into a markdown string.

    Heading paragraphs are followed by a blank line, body paragraphs by a
    single line break. Conversion never raises: unknown block types are
    skipped and tables become ``TABLE_PLACEHOLDER``.
    """

    def convert(self, blocks: list[Block]) -> str:
        parts: list[str] = []
        for block in blocks:
            if isinstance(block, ParagraphBlock):
                parts.append(paragraph_to_markdown(block))
            elif isinstance(block, TableBlock):
                parts.append(TABLE_PLACEHOLDER + "\n\n")
            else:
                logger.debug(f"Skipping {block.kind} block at [{block.start_index}, {block.end_index})")

        markdown = "".join(parts).strip()
        logger.debug(f"Converted {len(blocks)} blocks to {len(markdown)} characters of markdown")
        return markdown
