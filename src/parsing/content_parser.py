"""
Content parser for streamed chat messages.

Turns the full text of a message into ordered, typed segments:
plain text, fenced code, block math and inline math. Callers re-parse
the whole growing string on every streamed chunk, so results are
memoized by exact input in a small bounded cache.

Pipeline:
  1. claim code fences
  2. claim block math, then inline math, outside code
  3. resolve claims by priority (code > block math > inline math)
  4. fill the gaps with text segments
  5. rewrite LaTeX in math segments, list markers in text segments
"""

from threading import Lock
from typing import Optional

from src.parsing.latex import latex_to_unicode
from src.parsing.models import ClaimedSpan, ContentSegment, SegmentKind
from src.parsing.spans import extract_code_spans, extract_math_spans, resolve_claims
from src.parsing.text_format import normalize_list_markers
from src.utils.logger import LoggerMixin


DEFAULT_CACHE_LIMIT = 100


class ParseCache(LoggerMixin):
    """
    Memo of parse results keyed by the exact input string.
    
    When the entry count reaches the limit the whole cache is cleared
    before the next insert. The access pattern is one growing string per
    in-flight stream, so dropping everything is cheap to recover from.
    All access goes through a lock; entries are immutable tuples.
    
    Attributes:
        limit: Number of entries that triggers a full clear.
    """
    
    def __init__(self, limit: int = DEFAULT_CACHE_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"Cache limit must be at least 1, got: {limit}")
        
        self.limit = limit
        self._entries: dict[str, tuple[ContentSegment, ...]] = {}
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
    
    def get(self, text: str) -> Optional[tuple[ContentSegment, ...]]:
        """Return the cached segments for text, or None."""
        with self._lock:
            segments = self._entries.get(text)
            if segments is None:
                self._misses += 1
            else:
                self._hits += 1
            return segments
    
    def put(self, text: str, segments: tuple[ContentSegment, ...]) -> None:
        """Store segments, clearing everything first if the cache is full."""
        with self._lock:
            if text not in self._entries and len(self._entries) >= self.limit:
                self._entries.clear()
                self._evictions += 1
                self.logger.debug(f"Parse cache full ({self.limit}), cleared")
            self._entries[text] = segments
    
    def clear(self) -> None:
        """Drop all cached results."""
        with self._lock:
            self._entries.clear()
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
    
    @property
    def stats(self) -> dict:
        """Hit/miss counters and current size."""
        with self._lock:
            return {
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "size": len(self._entries),
                "limit": self.limit,
            }


class ContentParser:
    """
    Parser from raw message text to renderable content segments.
    
    The parser itself is stateless; the only shared state is the cache,
    which is owned (or injected) and internally locked. Construct one
    per process and hand it to whoever renders messages.
    
    Example:
        >>> parser = ContentParser()
        >>> [s.kind for s in parser.parse("Area is $\\pi r^2$")]
        [<SegmentKind.TEXT: 'text'>, <SegmentKind.INLINE_MATH: 'inline_math'>]
    """
    
    def __init__(
        self,
        cache: Optional[ParseCache] = None,
        use_cache: bool = True
    ) -> None:
        """
        Initialize the parser.
        
        Args:
            cache: Cache to use. A new one is created when omitted.
            use_cache: Set False to bypass memoization entirely.
        """
        self.cache = cache if cache is not None else ParseCache()
        self.use_cache = use_cache
    
    def parse(self, text: str) -> tuple[ContentSegment, ...]:
        """
        Parse message text into segments.
        
        Never fails on string input: unmatched delimiters stay text and
        unknown LaTeX is dropped.
        
        Args:
            text: Full current text of the message.
        
        Returns:
            Segments in source order.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected str, got {type(text).__name__}")
        
        if self.use_cache:
            cached = self.cache.get(text)
            if cached is not None:
                return cached
        
        segments = parse_segments(text)
        
        if self.use_cache:
            self.cache.put(text, segments)
        return segments


def collect_claims(text: str) -> list[ClaimedSpan]:
    """
    Claim code and math ranges and resolve them into a disjoint list.
    
    Math content is rewritten here; code content is kept verbatim.
    """
    claims: list[ClaimedSpan] = []
    
    code_spans = extract_code_spans(text)
    for span, language, content in code_spans:
        claims.append(ClaimedSpan(
            span=span,
            segment=ContentSegment(SegmentKind.CODE, content, language=language),
        ))
    
    excluded = [span for span, _, _ in code_spans]
    for span, is_block, content in extract_math_spans(text, excluded):
        kind = SegmentKind.BLOCK_MATH if is_block else SegmentKind.INLINE_MATH
        claims.append(ClaimedSpan(
            span=span,
            segment=ContentSegment(kind, latex_to_unicode(content)),
        ))
    
    return resolve_claims(claims)


def assemble_segments(
    text: str,
    claims: list[ClaimedSpan]
) -> tuple[ContentSegment, ...]:
    """
    Interleave claimed segments with text segments for the gaps.
    
    Args:
        text: Source text.
        claims: Disjoint claims sorted by start offset.
    
    Returns:
        Segments in source order; empty gaps produce nothing.
    """
    segments: list[ContentSegment] = []
    cursor = 0
    
    for claim in claims:
        if claim.span.start > cursor:
            gap = text[cursor:claim.span.start]
            segments.append(ContentSegment(SegmentKind.TEXT, normalize_list_markers(gap)))
        segments.append(claim.segment)
        cursor = claim.span.end
    
    if cursor < len(text):
        segments.append(ContentSegment(SegmentKind.TEXT, normalize_list_markers(text[cursor:])))
    
    return tuple(segments)


def parse_segments(text: str) -> tuple[ContentSegment, ...]:
    """Uncached parse of text into segments."""
    if not text:
        return ()
    return assemble_segments(text, collect_claims(text))


# Process-wide default parser (lazy loaded)
_parser: Optional[ContentParser] = None


def get_parser() -> ContentParser:
    """
    Get the shared parser used by the front ends.
    
    Returns:
        ContentParser built from the global config.
    """
    global _parser
    if _parser is None:
        from src.utils.config import get_config
        _parser = create_parser_from_config(get_config())
    return _parser


def create_parser_from_config(config) -> ContentParser:
    """
    Create a ContentParser from application config.
    
    Args:
        config: Config object with parse_cache_limit.
    
    Returns:
        Parser with a cache sized from config.
    """
    return ContentParser(cache=ParseCache(limit=config.parse_cache_limit))
