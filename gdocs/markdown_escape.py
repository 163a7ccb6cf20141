"""
Escaping between literal document text and markdown-significant characters.

Text read from a Google Doc may contain characters that mean something in
markdown (``*``, ``_``, ``[`` ...) or HTML (``<``, ``&``). Before such text is
shown in the editor it is escaped so it renders literally; when editor
content is written back, the escapes are removed again.
"""

import re

# Characters that get a leading backslash, in the order they are escaped.
MARKDOWN_SPECIAL_CHARS = "*_~`[]#|"

HTML_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
)

_UNESCAPE_PATTERN = re.compile(r"\\([\\*_~`\[\]#|])")


def escape_markdown(text: str) -> str:
    """
    Escape literal text so a markdown renderer shows it unchanged.

    Backslashes are escaped first so the escapes added afterwards are not
    themselves doubled.

    Example:
        >>> escape_markdown("50% off [deal] #1")
        '50% off \\\\[deal\\\\] \\\\#1'
    """
    escaped = text.replace("\\", "\\\\")
    for char, entity in HTML_ENTITIES:
        escaped = escaped.replace(char, entity)
    for char in MARKDOWN_SPECIAL_CHARS:
        escaped = escaped.replace(char, "\\" + char)
    return escaped


def unescape_markdown(text: str) -> str:
    """Inverse of escape_markdown. Text without escape sequences is returned unchanged."""
    unescaped = _UNESCAPE_PATTERN.sub(r"\1", text)
    return unescaped.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")


_LINK_URL_UNESCAPE_PATTERN = re.compile(r"\\([\\()])")


def escape_link_url(url: str) -> str:
    """Escape a URL for use inside ``[text](url)`` so parentheses cannot close it early."""
    return url.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def unescape_link_url(url: str) -> str:
    """Inverse of escape_link_url."""
    return _LINK_URL_UNESCAPE_PATTERN.sub(r"\1", url)
