"""Unit tests for the content parser and its cache."""

from types import SimpleNamespace

import pytest

from src.parsing.content_parser import (
    ContentParser,
    ParseCache,
    collect_claims,
    create_parser_from_config,
    parse_segments,
)
from src.parsing.models import ContentSegment, SegmentKind, Span


def kinds(segments):
    return [segment.kind for segment in segments]


def source_spans(text):
    """Source range and kind of every segment parse would emit."""
    ranges = []
    cursor = 0
    for claim in collect_claims(text):
        if claim.span.start > cursor:
            ranges.append((Span(cursor, claim.span.start), SegmentKind.TEXT))
        ranges.append((claim.span, claim.segment.kind))
        cursor = claim.span.end
    if cursor < len(text):
        ranges.append((Span(cursor, len(text)), SegmentKind.TEXT))
    return ranges


class TestParse:
    """Test end-to-end segment production."""

    def setup_method(self):
        self.parser = ContentParser()

    def test_fraction_and_symbol_inline(self):
        segments = self.parser.parse(r"$\frac{1}{2} + \pi$")
        assert segments == (ContentSegment(SegmentKind.INLINE_MATH, "(1)/(2) + π"),)

    def test_currency_is_plain_text(self):
        text = "It costs $5 and $10"
        segments = self.parser.parse(text)

        assert SegmentKind.INLINE_MATH not in kinds(segments)
        assert segments == (ContentSegment(SegmentKind.TEXT, text),)

    def test_math_inside_code_stays_code(self):
        segments = self.parser.parse("```\n$x$ and $$y$$\n```")

        assert segments == (ContentSegment(SegmentKind.CODE, "$x$ and $$y$$\n"),)

    def test_list_markers_only_in_text(self):
        segments = self.parser.parse("* item one\n$x$\n* item two")

        assert segments == (
            ContentSegment(SegmentKind.TEXT, "• item one\n"),
            ContentSegment(SegmentKind.INLINE_MATH, "x"),
            ContentSegment(SegmentKind.TEXT, "\n• item two"),
        )

    def test_streaming_fence_growth(self):
        partial = "Here is code: ```py\nprint(1)"
        assert self.parser.parse(partial) == (ContentSegment(SegmentKind.TEXT, partial),)

        complete = partial + "```"
        assert self.parser.parse(complete) == (
            ContentSegment(SegmentKind.TEXT, "Here is code: "),
            ContentSegment(SegmentKind.CODE, "print(1)", language="py"),
        )

    def test_block_math_is_trimmed_and_rewritten(self):
        segments = self.parser.parse("Euler:\n$$\ne^{i\\pi} + 1 = 0\n$$\nDone")

        assert segments == (
            ContentSegment(SegmentKind.TEXT, "Euler:\n"),
            ContentSegment(SegmentKind.BLOCK_MATH, "e^(iπ) + 1 = 0"),
            ContentSegment(SegmentKind.TEXT, "\nDone"),
        )

    def test_adjacent_spans_produce_no_empty_text(self):
        segments = self.parser.parse("```x```$y$")
        assert kinds(segments) == [SegmentKind.CODE, SegmentKind.INLINE_MATH]

    def test_mixed_document_order(self):
        segments = self.parser.parse("Use $x$ in ```\n$y$```")

        assert segments == (
            ContentSegment(SegmentKind.TEXT, "Use "),
            ContentSegment(SegmentKind.INLINE_MATH, "x"),
            ContentSegment(SegmentKind.TEXT, " in "),
            ContentSegment(SegmentKind.CODE, "$y$"),
        )

    def test_dollars_inside_code_leave_later_block_intact(self):
        segments = self.parser.parse("bash: ```sh\necho $$\n```\nformula: $$E=mc^2$$")

        assert segments == (
            ContentSegment(SegmentKind.TEXT, "bash: "),
            ContentSegment(SegmentKind.CODE, "echo $$\n", language="sh"),
            ContentSegment(SegmentKind.TEXT, "\nformula: "),
            ContentSegment(SegmentKind.BLOCK_MATH, "E=mc^2"),
        )
        assert [s.is_math for s in segments] == [False, False, False, True]

    def test_emphasis_and_latex_in_text_untouched(self):
        text = "**Note:** write \\alpha as a command"
        assert self.parser.parse(text) == (ContentSegment(SegmentKind.TEXT, text),)

    def test_unmatched_dollar_is_text(self):
        text = "Only one $ here"
        assert self.parser.parse(text) == (ContentSegment(SegmentKind.TEXT, text),)

    def test_empty_input(self):
        assert self.parser.parse("") == ()

    def test_non_string_rejected(self):
        with pytest.raises(TypeError):
            self.parser.parse(None)


@pytest.mark.parametrize("text", [
    "plain",
    "a $x$ b $$y$$ c ```py\nz``` d",
    "```$x$``` $5 and $10 $$\\alpha$$",
    "* one\n$a$$b$\n```\nunterminated",
    "$$$$ $a\\$b$",
])
def test_source_spans_tile_input(text):
    spans = source_spans(text)

    cursor = 0
    for span, _ in spans:
        assert span.start == cursor
        assert span.end > span.start
        cursor = span.end
    assert cursor == len(text)
    assert len(spans) == len(parse_segments(text))


class TestParseCache:
    """Test memoization and bounded eviction."""

    def test_hit_returns_same_result(self):
        parser = ContentParser()
        first = parser.parse("a $x$ b")
        second = parser.parse("a $x$ b")

        assert first is second
        assert parser.cache.stats["hits"] == 1
        assert parser.cache.stats["misses"] == 1

    def test_cached_and_uncached_agree(self):
        text = "* list\n```sh\nls```\n$$\\sum x$$"
        cached = ContentParser()
        uncached = ContentParser(use_cache=False)

        assert cached.parse(text) == uncached.parse(text)
        assert cached.parse(text) == uncached.parse(text)
        assert len(uncached.cache) == 0

    def test_full_cache_is_cleared(self):
        cache = ParseCache(limit=2)
        cache.put("a", ())
        cache.put("b", ())
        cache.put("c", ())

        assert len(cache) == 1
        assert cache.get("a") is None
        assert cache.get("c") == ()
        assert cache.stats["evictions"] == 1

    def test_rewriting_existing_key_does_not_evict(self):
        cache = ParseCache(limit=2)
        cache.put("a", ())
        cache.put("b", ())
        cache.put("b", ())

        assert len(cache) == 2
        assert cache.stats["evictions"] == 0

    def test_eviction_does_not_change_output(self):
        parser = ContentParser(cache=ParseCache(limit=1))
        before = parser.parse("$a$")
        parser.parse("$b$")
        after = parser.parse("$a$")

        assert before == after

    def test_clear(self):
        cache = ParseCache()
        cache.put("a", ())
        cache.clear()
        assert len(cache) == 0

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            ParseCache(limit=0)

    def test_create_from_config(self):
        parser = create_parser_from_config(SimpleNamespace(parse_cache_limit=5))
        assert parser.cache.limit == 5
