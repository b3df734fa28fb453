"""
Data models for the content parsing module.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SegmentKind(Enum):
    """Rendering category of a content segment."""
    TEXT = "text"
    CODE = "code"
    BLOCK_MATH = "block_math"
    INLINE_MATH = "inline_math"


# Lower value wins when two claimed spans overlap
KIND_PRIORITY = {
    SegmentKind.CODE: 0,
    SegmentKind.BLOCK_MATH: 1,
    SegmentKind.INLINE_MATH: 2,
}


@dataclass(frozen=True)
class Span:
    """Character range in the source string, end exclusive."""
    start: int
    end: int
    
    def __len__(self) -> int:
        return self.end - self.start
    
    def overlaps(self, other: "Span") -> bool:
        """True when the two ranges share at least one character."""
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class ContentSegment:
    """
    A contiguous, typed piece of parsed message content.
    
    Attributes:
        kind: Rendering category.
        content: Display text with delimiters removed. LaTeX is already
            rewritten for math kinds and list markers normalized for text.
        language: Fence language tag, only ever set for code segments.
    """
    kind: SegmentKind
    content: str
    language: Optional[str] = None
    
    @property
    def is_math(self) -> bool:
        return self.kind in (SegmentKind.BLOCK_MATH, SegmentKind.INLINE_MATH)


@dataclass(frozen=True)
class ClaimedSpan:
    """A source range claimed by a delimiter pattern, with the segment it yields."""
    span: Span
    segment: ContentSegment
    
    @property
    def priority(self) -> int:
        return KIND_PRIORITY[self.segment.kind]
