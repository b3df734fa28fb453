"""Parsing module for turning streamed message text into renderable segments."""

from .models import ContentSegment, SegmentKind, Span
from .content_parser import ContentParser, ParseCache
from .latex import latex_to_unicode
from .text_format import normalize_list_markers

__all__ = [
    "ContentSegment",
    "SegmentKind",
    "Span",
    "ContentParser",
    "ParseCache",
    "latex_to_unicode",
    "normalize_list_markers",
]
