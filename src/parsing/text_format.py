"""Cosmetic rewriting for plain text segments."""

import html
import re

BULLET = "•"

# Line start, optional indent, "*", at least one whitespace character.
# Whitespace here never includes a line break, so NBSP and tabs count
# but a lone "*" line is not a list item.
# "**bold**" is left alone because the second "*" is not whitespace.
_LIST_MARKER_PATTERN = re.compile(r"^([^\S\n]*)\*([^\S\n]+)", re.MULTILINE)


def normalize_list_markers(text: str) -> str:
    """
    Turn Markdown "* item" list markers into bullet glyphs.
    
    Indentation and the whitespace after the marker are preserved, so
    "  * item" becomes "  • item". The marker must share its line with
    some whitespace; "*" alone on a line is kept. Emphasis markup is
    passed through.
    
    Args:
        text: Text segment content.
    
    Returns:
        Text with list markers replaced on every line.
    """
    if "*" not in text:
        return text
    return _LIST_MARKER_PATTERN.sub(rf"\1{BULLET}\2", text)


def escape_for_markdown(text: str) -> str:
    """
    Make segment content safe to hand to a Markdown renderer with HTML on.
    
    HTML special characters are escaped and "$" becomes a numeric
    entity, so the renderer neither runs markup from the model nor
    typesets dollar amounts as math. The entity displays as "$" both in
    Markdown paragraphs and inside raw HTML blocks.
    """
    return html.escape(text, quote=False).replace("$", "&#36;")
