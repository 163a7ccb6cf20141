"""
Word counting for editor content.

Words are whitespace-separated tokens of the text a reader would see, so the
markdown is rendered to plain text first: emphasis markers, link URLs, image
syntax and task-list checkboxes never count as words.
"""

import logging

from markdown_it import MarkdownIt
from mdit_py_plugins.tasklists import tasklists_plugin

logger = logging.getLogger(__name__)

_md = MarkdownIt("commonmark").enable("table").enable("strikethrough").use(tasklists_plugin)

# Inline tokens whose content is visible text
_TEXT_TOKENS = {"text", "code_inline"}
_BREAK_TOKENS = {"softbreak", "hardbreak"}
# Block tokens that carry their text directly
_BLOCK_TEXT_TOKENS = {"code_block", "fence"}


def count_words(text: str | None) -> int:
    """Number of non-empty whitespace-separated tokens."""
    if not text:
        return 0
    return len(text.split())


def markdown_to_plain_text(markdown: str | None) -> str:
    """
    Render markdown to the plain text it displays.

    Blocks are separated by newlines. Images are dropped entirely (their alt
    text is not shown in the editor) and raw inline HTML such as ``<u>`` is
    removed while the text between the tags is kept.
    """
    if not markdown:
        return ""

    parts: list[str] = []
    for token in _md.parse(markdown):
        if token.type == "inline":
            for child in token.children or []:
                if child.type in _TEXT_TOKENS:
                    parts.append(child.content)
                elif child.type in _BREAK_TOKENS:
                    parts.append("\n")
            parts.append("\n")
        elif token.type in _BLOCK_TEXT_TOKENS:
            parts.append(token.content)
            parts.append("\n")

    return "".join(parts)


def count_markdown_words(markdown: str | None) -> int:
    """Word count of the text a markdown document renders to."""
    return count_words(markdown_to_plain_text(markdown))
