"""
Google Docs Helper Functions

Builders for the Docs API ``batchUpdate`` request dictionaries used by the
converter and the gateway. Every builder accepts an optional ``tab_id``; when
given, the location or range is addressed to that tab.
"""

from typing import Any

# Named style mappings for headings (1 -> HEADING_1, etc.)
HEADING_STYLE_MAP: dict[int, str] = {level: f"HEADING_{level}" for level in range(1, 7)}

# Text style fields in the order they appear in the ``fields`` mask
TEXT_STYLE_FIELDS = ("bold", "italic", "strikethrough", "underline")


def utf16_len(text: str) -> int:
    """
    Length of text in UTF-16 code units.

    Docs API indices count UTF-16 code units, so characters outside the
    Basic Multilingual Plane (most emoji) take two index positions.
    """
    return len(text.encode("utf-16-le")) // 2


def build_location(index: int, tab_id: str | None = None) -> dict[str, Any]:
    location: dict[str, Any] = {"index": index}
    if tab_id:
        location["tabId"] = tab_id
    return location


def build_range(start_index: int, end_index: int, tab_id: str | None = None) -> dict[str, Any]:
    range_: dict[str, Any] = {"startIndex": start_index, "endIndex": end_index}
    if tab_id:
        range_["tabId"] = tab_id
    return range_


def create_insert_text_request(index: int, text: str, tab_id: str | None = None) -> dict[str, Any]:
    """Create an insertText request."""
    return {"insertText": {"location": build_location(index, tab_id), "text": text}}


def create_delete_range_request(start_index: int, end_index: int, tab_id: str | None = None) -> dict[str, Any]:
    """Create a deleteContentRange request."""
    return {"deleteContentRange": {"range": build_range(start_index, end_index, tab_id)}}


def build_text_style(
    bold: bool | None = None,
    italic: bool | None = None,
    strikethrough: bool | None = None,
    underline: bool | None = None,
) -> tuple[dict[str, Any], list[str]]:
    """
    Build a textStyle object and its field mask from the given flags.

    Flags left as None are not part of the update.

    Returns:
        Tuple of (text_style_dict, list_of_field_names)
    """
    values = {"bold": bold, "italic": italic, "strikethrough": strikethrough, "underline": underline}
    text_style: dict[str, Any] = {}
    fields: list[str] = []
    for name in TEXT_STYLE_FIELDS:
        if values[name] is not None:
            text_style[name] = values[name]
            fields.append(name)
    return text_style, fields


def create_text_style_request(
    start_index: int,
    end_index: int,
    bold: bool | None = None,
    italic: bool | None = None,
    strikethrough: bool | None = None,
    underline: bool | None = None,
    tab_id: str | None = None,
) -> dict[str, Any] | None:
    """
    Create an updateTextStyle request for boolean style flags.

    Returns:
        The request, or None when no flag is set.
    """
    text_style, fields = build_text_style(bold, italic, strikethrough, underline)
    if not fields:
        return None
    return {
        "updateTextStyle": {
            "range": build_range(start_index, end_index, tab_id),
            "textStyle": text_style,
            "fields": ",".join(fields),
        }
    }


def create_link_request(start_index: int, end_index: int, url: str, tab_id: str | None = None) -> dict[str, Any]:
    """Create an updateTextStyle request that turns a range into a link."""
    return {
        "updateTextStyle": {
            "range": build_range(start_index, end_index, tab_id),
            "textStyle": {"link": {"url": url}},
            "fields": "link",
        }
    }


def create_clear_text_style_request(start_index: int, end_index: int, tab_id: str | None = None) -> dict[str, Any]:
    """
    Create an updateTextStyle request that resets bold, italic, strikethrough,
    underline and link on a range. Fields in the mask but absent from
    textStyle are reset to their defaults by the Docs API.
    """
    return {
        "updateTextStyle": {
            "range": build_range(start_index, end_index, tab_id),
            "textStyle": {},
            "fields": ",".join((*TEXT_STYLE_FIELDS, "link")),
        }
    }


def create_heading_style_request(
    start_index: int, end_index: int, level: int, tab_id: str | None = None
) -> dict[str, Any]:
    """Create an updateParagraphStyle request applying HEADING_1..HEADING_6."""
    return {
        "updateParagraphStyle": {
            "range": build_range(start_index, end_index, tab_id),
            "paragraphStyle": {"namedStyleType": HEADING_STYLE_MAP[level]},
            "fields": "namedStyleType",
        }
    }


def create_normal_text_style_request(start_index: int, end_index: int, tab_id: str | None = None) -> dict[str, Any]:
    """Create an updateParagraphStyle request resetting paragraphs to NORMAL_TEXT."""
    return {
        "updateParagraphStyle": {
            "range": build_range(start_index, end_index, tab_id),
            "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"},
            "fields": "namedStyleType",
        }
    }
