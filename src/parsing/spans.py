r"""
Span extraction for streamed message text.

Finds the character ranges claimed by fenced code, block math ($$...$$)
and inline math ($...$). Each category is collected with one
pre-compiled pattern; overlaps are then resolved by fixed priority:

    code  >  block math  >  inline math

A range claimed by a higher-priority pattern can never be claimed,
even partially, by a lower-priority one.
"""

import re
from typing import Iterable, Optional, Sequence

from src.parsing.models import ClaimedSpan, Span


# Opening fence, optional "<tag>\n" line, lazy body, closing fence.
# The tag line may not contain a backtick or cross a line break.
CODE_PATTERN = re.compile(r"```(?:([^`\n]*)\n)?([\s\S]*?)```")

BLOCK_MATH_PATTERN = re.compile(r"\$\$([\s\S]*?)\$\$")

# Single line, non-empty, no whitespace just inside either delimiter.
# A backslash escape is consumed as one unit so "\$" never closes the span.
INLINE_MATH_PATTERN = re.compile(r"(?<!\\)\$(?!\s)((?:\\.|[^\\$\n])+?)(?<!\s)\$")


def exclude_overlapping(
    candidates: Iterable[tuple],
    claimed: Sequence[Span]
) -> list:
    """
    Drop every candidate whose span intersects an already-claimed span.
    
    Candidates are tuples whose first item is a Span; order is kept.
    
    Args:
        candidates: Candidate tuples from a lower-priority pattern.
        claimed: Spans already owned by higher-priority patterns.
    
    Returns:
        Candidates that do not touch any claimed range.
    """
    return [
        candidate for candidate in candidates
        if not any(candidate[0].overlaps(span) for span in claimed)
    ]


def extract_code_spans(text: str) -> list[tuple[Span, Optional[str], str]]:
    """
    Find fenced code blocks.
    
    Only fully closed fences count; an unterminated fence stays text.
    The first closing fence ends the block, so nested fences are not
    supported.
    
    Args:
        text: Full message text.
    
    Returns:
        (span, language, content) tuples in source order. The language
        is the trimmed tag line, or None when absent or blank.
    """
    spans: list[tuple[Span, Optional[str], str]] = []
    
    for match in CODE_PATTERN.finditer(text):
        language = None
        if match.group(1) is not None:
            language = match.group(1).strip() or None
        
        spans.append((Span(match.start(), match.end()), language, match.group(2)))
    
    return spans


def uncovered_ranges(length: int, covered: Sequence[Span]) -> list[Span]:
    """Ranges of [0, length) not covered by any of the given spans."""
    gaps: list[Span] = []
    cursor = 0
    
    for span in sorted(covered, key=lambda s: s.start):
        if span.start > cursor:
            gaps.append(Span(cursor, span.start))
        cursor = max(cursor, span.end)
    
    if cursor < length:
        gaps.append(Span(cursor, length))
    return gaps


def extract_math_spans(
    text: str,
    excluded: Sequence[Span] = ()
) -> list[tuple[Span, bool, str]]:
    """
    Find block and inline math outside the excluded (code) ranges.
    
    Only the gaps between excluded ranges are scanned, so a "$$" inside
    code can never pair with a delimiter outside it. Block math is
    collected first; inline candidates that overlap a kept block span
    are discarded.
    
    Args:
        text: Full message text.
        excluded: Ranges already claimed by code blocks.
    
    Returns:
        (span, is_block, content) tuples in source order. Block content
        is trimmed; inline content is returned as written.
    """
    gaps = uncovered_ranges(len(text), excluded)
    
    blocks = [
        (Span(m.start(), m.end()), True, m.group(1).strip())
        for gap in gaps
        for m in BLOCK_MATH_PATTERN.finditer(text, gap.start, gap.end)
    ]
    
    inline_candidates = [
        (Span(m.start(), m.end()), False, m.group(1))
        for gap in gaps
        for m in INLINE_MATH_PATTERN.finditer(text, gap.start, gap.end)
    ]
    inlines = exclude_overlapping(inline_candidates, [span for span, _, _ in blocks])
    
    return sorted(blocks + inlines, key=lambda item: item[0].start)


def resolve_claims(claims: Iterable[ClaimedSpan]) -> list[ClaimedSpan]:
    """
    Greedily keep claims by priority, dropping any that overlap a kept one.
    
    Claims are visited highest priority first, then left to right.
    The result is sorted by start offset and is guaranteed overlap-free.
    """
    accepted: list[ClaimedSpan] = []
    
    for claim in sorted(claims, key=lambda c: (c.priority, c.span.start)):
        if any(claim.span.overlaps(kept.span) for kept in accepted):
            continue
        accepted.append(claim)
    
    return sorted(accepted, key=lambda c: c.span.start)
